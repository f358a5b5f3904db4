"""Vehicle Cost Repository — per-stock cost sheets for a dealer."""

from ...core.base_repository import DealerScopedRepository


class VehicleCostRepository(DealerScopedRepository):

    table = 'vehicle_costs'
    sortable = frozenset({'created_at', 'updated_at', 'grand_total', 'registration'})
    json_columns = frozenset({'ex_vat_costs', 'inc_vat_costs'})

    def list(self, stock_id=None):
        if stock_id:
            return self.find_all(['stock_id = %s'], [stock_id])
        return self.find_all()

    def get_by_stock(self, stock_id):
        return self.find_one(['stock_id = %s'], [stock_id])

    def save(self, stock_id, fields, exists):
        """Insert or update the cost sheet for `stock_id`."""
        if exists:
            return self.update_where(fields, ['stock_id = %s'], [stock_id])
        return self.insert(dict(fields, stock_id=stock_id))
