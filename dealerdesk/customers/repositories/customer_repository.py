"""Customer Repository — dealer-scoped CRUD + search for customers."""

from ...core.base_repository import DealerScopedRepository


class CustomerRepository(DealerScopedRepository):

    table = 'customers'
    sortable = frozenset({
        'created_at', 'updated_at', 'first_name', 'last_name',
        'email', 'status', 'city', 'postcode',
    })
    json_columns = frozenset({'tags', 'custom_fields'})

    SEARCH_COLUMNS = ('first_name', 'last_name', 'email', 'phone')

    def _filters(self, search=None, status=None):
        conditions, params = [], []
        if search:
            clause, values = self._search(search, self.SEARCH_COLUMNS)
            conditions.append(clause)
            params.extend(values)
        if status and status != 'all':
            conditions.append('status = %s')
            params.append(status)
        return conditions, params

    def search(self, search=None, status=None, sort_by=None, sort_order=None,
               limit=50, offset=0):
        """Return (rows, total) for the filtered customer list."""
        conditions, params = self._filters(search, status)
        rows = self.find_all(conditions, params, sort_by=sort_by, sort_order=sort_order,
                             limit=limit, offset=offset)
        return rows, self.count(conditions, params)

    def get(self, customer_id):
        return self.find_one(['id = %s'], [customer_id])

    def find_by_email(self, email, exclude_id=None):
        if not email:
            return None
        conditions, params = ['LOWER(email) = LOWER(%s)'], [email]
        if exclude_id:
            conditions.append('id <> %s')
            params.append(exclude_id)
        return self.find_one(conditions, params)

    def create(self, record):
        return self.insert(record)

    def update(self, customer_id, record):
        return self.update_where(record, ['id = %s'], [customer_id])

    def delete(self, customer_id):
        return self.delete_where(['id = %s'], [customer_id])
