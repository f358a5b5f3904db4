"""DealerDesk database module.

Owns the psycopg2 connection pool and the row helpers shared by every
repository. The pool is created lazily on first use so that importing the
package never touches the network.
"""
import os
import uuid
import logging
import threading
from decimal import Decimal

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

logger = logging.getLogger('dealerdesk.database')

DATABASE_URL = os.environ.get('DATABASE_URL')

POOL_MIN_CONN = int(os.environ.get('DB_POOL_MIN_CONN', '2'))
POOL_MAX_CONN = int(os.environ.get('DB_POOL_MAX_CONN', '8'))
POOL_GETCONN_TIMEOUT = int(os.environ.get('DB_POOL_TIMEOUT', '10'))

_connection_pool = None
_pool_lock = threading.Lock()


def configure(config):
    """Apply pool settings from an AppConfig. Must run before the first query."""
    global DATABASE_URL, POOL_MIN_CONN, POOL_MAX_CONN, POOL_GETCONN_TIMEOUT
    if config.DATABASE_URL:
        DATABASE_URL = config.DATABASE_URL
    POOL_MIN_CONN = config.DB_POOL_MIN_CONN
    POOL_MAX_CONN = config.DB_POOL_MAX_CONN
    POOL_GETCONN_TIMEOUT = config.DB_POOL_TIMEOUT


def _get_pool():
    """Get or create the connection pool (lazy initialization, thread-safe)."""
    global _connection_pool
    if _connection_pool is None:
        with _pool_lock:
            if _connection_pool is None:
                if not DATABASE_URL:
                    raise RuntimeError(
                        'DATABASE_URL environment variable is required. '
                        'Set it to your PostgreSQL connection string.'
                    )
                _connection_pool = pool.ThreadedConnectionPool(
                    minconn=POOL_MIN_CONN,
                    maxconn=POOL_MAX_CONN,
                    dsn=DATABASE_URL,
                    keepalives=1,
                    keepalives_idle=30,
                    keepalives_interval=10,
                    keepalives_count=5,
                    connect_timeout=5,
                )
                logger.info(f'Connection pool created: min={POOL_MIN_CONN}, max={POOL_MAX_CONN}')
    return _connection_pool


def _getconn_with_timeout(timeout=None):
    """Get connection from pool, failing instead of blocking when exhausted.

    ThreadedConnectionPool.getconn() blocks forever when the pool is empty,
    so the call runs on a helper thread bounded by `timeout`.
    """
    if timeout is None:
        timeout = POOL_GETCONN_TIMEOUT

    result = [None]
    error = [None]

    def _get():
        try:
            result[0] = _get_pool().getconn()
        except Exception as e:
            error[0] = e

    t = threading.Thread(target=_get, daemon=True)
    t.start()
    t.join(timeout=timeout)

    if t.is_alive():
        raise psycopg2.OperationalError(
            f'Connection pool exhausted, timed out after {timeout}s waiting for a connection'
        )
    if error[0]:
        raise error[0]
    return result[0]


def get_db():
    """Get a healthy PostgreSQL connection from the pool.

    Stale connections (closed by the server while idle) are discarded and
    replaced, up to 3 attempts.
    """
    max_retries = 3
    last_error = None

    for attempt in range(max_retries):
        conn = _getconn_with_timeout()
        try:
            with conn.cursor() as cur:
                cur.execute('SELECT 1')
            conn.rollback()
            conn.autocommit = True
            return conn
        except (psycopg2.OperationalError, psycopg2.InterfaceError, psycopg2.DatabaseError) as e:
            last_error = e
            logger.warning(f'Stale connection discarded (attempt {attempt + 1}/{max_retries}): {e}')
            _get_pool().putconn(conn, close=True)

    raise psycopg2.OperationalError(
        f'Failed to get valid connection after {max_retries} attempts: {last_error}'
    )


def release_db(conn):
    """Return connection to pool, closing it if it is no longer usable."""
    if not conn or not _connection_pool:
        return
    if conn.closed:
        _connection_pool.putconn(conn, close=True)
        return
    try:
        conn.autocommit = False
    except psycopg2.Error:
        _connection_pool.putconn(conn, close=True)
        return
    _connection_pool.putconn(conn)


def ping_db():
    """Run SELECT 1 against the pool. Returns True if the database answered."""
    try:
        conn = get_db()
    except (psycopg2.Error, RuntimeError) as e:
        logger.error(f'Database ping failed: {e}')
        return False
    try:
        with conn.cursor() as cur:
            cur.execute('SELECT 1')
        return True
    except psycopg2.Error as e:
        logger.error(f'Database ping failed: {e}')
        return False
    finally:
        release_db(conn)


def get_cursor(conn):
    """Get cursor with dict row factory."""
    return conn.cursor(cursor_factory=RealDictCursor)


def dict_from_row(row):
    """Convert a database row to a dictionary with JSON-safe values.

    Dates and datetimes become ISO strings, UUIDs become strings and
    Decimals become strings so currency values keep their scale.
    """
    if row is None:
        return None
    result = dict(row)
    for key, value in result.items():
        if hasattr(value, 'isoformat'):
            result[key] = value.isoformat()
        elif isinstance(value, uuid.UUID):
            result[key] = str(value)
        elif isinstance(value, Decimal):
            result[key] = str(value)
    return result
