"""Migration runner — baseline schema plus versioned SQL files.

Versioned files live in migrations/versions/ and are applied in lexical
order. Each file runs in its own transaction together with the
schema_migrations row that records it, so a file is either fully applied
and recorded or not applied at all.
"""
import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import psycopg2

from .init_schema import create_schema

logger = logging.getLogger('dealerdesk.migrations')

VERSIONS_DIR = os.path.join(os.path.dirname(__file__), 'versions')


@dataclass
class MigrationResult:
    applied: List[str] = field(default_factory=list)
    pending: List[str] = field(default_factory=list)
    failed: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed is None


class MigrationRunner:

    def __init__(self, database_url, versions_dir=VERSIONS_DIR, connect=psycopg2.connect):
        if not database_url:
            raise ValueError('DATABASE_URL is required to run migrations')
        self.database_url = database_url
        self.versions_dir = versions_dir
        self._connect = connect

    def available(self):
        """All migration versions on disk, in apply order."""
        if not os.path.isdir(self.versions_dir):
            return []
        return sorted(
            name[:-4] for name in os.listdir(self.versions_dir) if name.endswith('.sql')
        )

    def _read(self, version):
        with open(os.path.join(self.versions_dir, f'{version}.sql'), encoding='utf-8') as fh:
            return fh.read()

    @staticmethod
    def _applied(cursor):
        cursor.execute("SELECT to_regclass('schema_migrations') IS NOT NULL")
        if not cursor.fetchone()[0]:
            return set()
        cursor.execute('SELECT version FROM schema_migrations')
        return {row[0] for row in cursor.fetchall()}

    def status(self):
        """Return (applied, pending) version lists without changing anything."""
        conn = self._connect(self.database_url)
        try:
            applied = self._applied(conn.cursor())
            conn.rollback()
        finally:
            conn.close()
        versions = self.available()
        return [v for v in versions if v in applied], [v for v in versions if v not in applied]

    def run(self, dry_run=False):
        """Ensure the baseline schema, then apply pending versions.

        Stops at the first failing file; that file is rolled back and
        reported in the result. Earlier files stay applied.
        """
        result = MigrationResult()
        conn = self._connect(self.database_url)
        try:
            cursor = conn.cursor()
            if dry_run:
                applied = self._applied(cursor)
                conn.rollback()
                result.pending = [v for v in self.available() if v not in applied]
                return result

            statements = create_schema(conn, cursor)
            logger.info(f'Baseline schema ensured ({statements} statements)')

            applied = self._applied(cursor)
            result.pending = [v for v in self.available() if v not in applied]
            for version in result.pending:
                try:
                    cursor.execute(self._read(version))
                    cursor.execute(
                        'INSERT INTO schema_migrations (version) VALUES (%s)', (version,)
                    )
                    conn.commit()
                except (psycopg2.Error, OSError) as e:
                    conn.rollback()
                    logger.error(f'Migration {version} failed: {e}')
                    result.failed = version
                    result.error = str(e)
                    break
                logger.info(f'Applied migration {version}')
                result.applied.append(version)
            return result
        finally:
            conn.close()
