"""Base repositories — connection boilerplate and dealer scoping.

BaseRepository provides query_one(), query_all() and execute()
that handle get_db()/get_cursor()/release_db() and try/finally.

DealerScopedRepository is the single entry point to tenant tables. It is
bound to one dealer id at construction and every statement it builds
starts with `dealer_id = %s`, so a handler cannot forget the tenant filter.

Usage:
    class CustomerRepository(DealerScopedRepository):
        table = 'customers'
        sortable = {'created_at', 'last_name'}

    repo = CustomerRepository(dealer['id'])
    rows = repo.find_all(['status = %s'], ['active'], sort_by='last_name')
"""

import json

from ..database import get_db, get_cursor, release_db, dict_from_row


def like_pattern(term):
    """Build a substring ILIKE pattern with LIKE wildcards in `term` escaped."""
    escaped = term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f'%{escaped}%'


class BaseRepository:

    def query_one(self, sql, params=None):
        """Execute a SELECT and return a single row as dict, or None."""
        conn = get_db()
        try:
            cursor = get_cursor(conn)
            cursor.execute(sql, params or ())
            row = cursor.fetchone()
            return dict_from_row(row) if row else None
        finally:
            release_db(conn)

    def query_all(self, sql, params=None):
        """Execute a SELECT and return all rows as list of dicts."""
        conn = get_db()
        try:
            cursor = get_cursor(conn)
            cursor.execute(sql, params or ())
            return [dict_from_row(r) for r in cursor.fetchall()]
        finally:
            release_db(conn)

    def execute(self, sql, params=None, returning=False):
        """Execute an INSERT/UPDATE/DELETE with auto-commit.

        Returns:
            dict if returning=True, else int (rowcount)
        """
        conn = get_db()
        try:
            cursor = get_cursor(conn)
            cursor.execute(sql, params or ())
            if returning:
                result = cursor.fetchone()
                conn.commit()
                return dict_from_row(result) if result else None
            conn.commit()
            return cursor.rowcount
        except Exception:
            conn.rollback()
            raise
        finally:
            release_db(conn)


class DealerScopedRepository(BaseRepository):
    """Repository bound to a single dealer (tenant).

    Subclasses set `table`, optionally `sortable` (whitelisted ORDER BY
    columns), `default_sort` and `json_columns` (serialized with json.dumps
    on write).
    """

    table = None
    sortable = frozenset({'created_at'})
    default_sort = 'created_at'
    json_columns = frozenset()

    def __init__(self, dealer_id):
        if not dealer_id:
            raise RuntimeError('dealer_id is required for scoped repositories')
        self.dealer_id = str(dealer_id)

    # ── SQL building ──

    def _where(self, conditions=None, params=None):
        """Prefix the dealer filter to caller conditions."""
        clauses = ['dealer_id = %s'] + list(conditions or [])
        return ' AND '.join(clauses), [self.dealer_id] + list(params or [])

    def _order_by(self, sort_by=None, sort_order=None):
        col = sort_by if sort_by in self.sortable else self.default_sort
        direction = 'ASC' if sort_order and sort_order.upper() == 'ASC' else 'DESC'
        return f'{col} {direction} NULLS LAST'

    def _search(self, term, columns):
        """OR-ed case-insensitive substring match of `term` across `columns`."""
        pattern = like_pattern(term)
        clause = ' OR '.join(f'{col} ILIKE %s' for col in columns)
        return f'({clause})', [pattern] * len(columns)

    def _prepare(self, fields):
        prepared = {}
        for key, value in fields.items():
            if key in self.json_columns and value is not None:
                value = json.dumps(value)
            prepared[key] = value
        return prepared

    # ── Reads ──

    def find_one(self, conditions=None, params=None):
        where, values = self._where(conditions, params)
        return self.query_one(
            f'SELECT * FROM {self.table} WHERE {where} LIMIT 1',
            tuple(values)
        )

    def find_all(self, conditions=None, params=None, sort_by=None, sort_order=None,
                 limit=None, offset=0):
        where, values = self._where(conditions, params)
        sql = f'SELECT * FROM {self.table} WHERE {where} ORDER BY {self._order_by(sort_by, sort_order)}'
        if limit is not None:
            sql += ' LIMIT %s OFFSET %s'
            values.extend([limit, offset])
        return self.query_all(sql, tuple(values))

    def count(self, conditions=None, params=None):
        where, values = self._where(conditions, params)
        row = self.query_one(
            f'SELECT COUNT(*) AS count FROM {self.table} WHERE {where}',
            tuple(values)
        )
        return row['count'] if row else 0

    # ── Writes ──

    def insert(self, fields):
        """Insert a row owned by this dealer. Any dealer_id in fields is ignored."""
        data = self._prepare({k: v for k, v in fields.items() if k != 'dealer_id'})
        columns = ['dealer_id'] + list(data)
        placeholders = ', '.join(['%s'] * len(columns))
        return self.execute(
            f'INSERT INTO {self.table} ({", ".join(columns)}) VALUES ({placeholders}) RETURNING *',
            tuple([self.dealer_id] + list(data.values())),
            returning=True
        )

    def update_where(self, fields, conditions, params):
        """Update matching rows of this dealer and return the first updated row."""
        data = self._prepare({k: v for k, v in fields.items() if k != 'dealer_id'})
        if not data:
            return None
        sets = ', '.join(f'{k} = %s' for k in data)
        where, values = self._where(conditions, params)
        return self.execute(
            f'UPDATE {self.table} SET {sets}, updated_at = NOW() WHERE {where} RETURNING *',
            tuple(list(data.values()) + values),
            returning=True
        )

    def delete_where(self, conditions, params):
        where, values = self._where(conditions, params)
        return self.execute(f'DELETE FROM {self.table} WHERE {where}', tuple(values)) > 0
