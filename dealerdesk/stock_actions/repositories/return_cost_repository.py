"""Return Cost Repository — costs recorded when a sold vehicle comes back."""

from ...core.base_repository import DealerScopedRepository


class ReturnCostRepository(DealerScopedRepository):

    table = 'return_costs'
    sortable = frozenset({'created_at', 'updated_at', 'registration'})
    json_columns = frozenset({'vatable_costs', 'non_vatable_costs'})

    def list(self, stock_id=None):
        if stock_id:
            return self.find_all(['stock_id = %s'], [stock_id])
        return self.find_all()

    def get_by_stock(self, stock_id):
        return self.find_one(['stock_id = %s'], [stock_id])

    def save(self, stock_id, fields):
        if self.get_by_stock(stock_id):
            return self.update_where(fields, ['stock_id = %s'], [stock_id])
        return self.insert(dict(fields, stock_id=stock_id))
