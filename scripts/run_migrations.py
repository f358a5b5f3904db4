#!/usr/bin/env python3
"""
Database Migration Script: baseline schema + versioned SQL files

Creates any missing tables/indexes, then applies every file in
dealerdesk/migrations/versions/ that is not yet recorded in
schema_migrations, one transaction per file.

Usage:
    DATABASE_URL='postgresql://...' python scripts/run_migrations.py

Options:
    --dry-run    Show pending migrations without applying anything
    --list       List applied and pending migrations
"""

import os
import sys
import argparse

import psycopg2

from dealerdesk.core.utils.logging_config import setup_logging
from dealerdesk.migrations.runner import MigrationRunner


def main(argv=None):
    parser = argparse.ArgumentParser(description='Apply DealerDesk database migrations')
    parser.add_argument('--dry-run', action='store_true', help='Show pending migrations only')
    parser.add_argument('--list', action='store_true', help='List applied and pending migrations')
    args = parser.parse_args(argv)

    setup_logging(level=os.environ.get('LOG_LEVEL', 'INFO'))

    db_url = os.environ.get('DATABASE_URL')
    if not db_url:
        print("ERROR: DATABASE_URL environment variable not set")
        return 1

    runner = MigrationRunner(db_url)

    try:
        if args.list:
            applied, pending = runner.status()
            print("\n" + "=" * 60)
            print("MIGRATIONS")
            print("=" * 60)
            for version in applied:
                print(f"  [applied] {version}")
            for version in pending:
                print(f"  [pending] {version}")
            return 0

        result = runner.run(dry_run=args.dry_run)
    except psycopg2.Error as e:
        print(f"ERROR: {e}")
        return 1

    if args.dry_run:
        print(f"Pending migrations: {len(result.pending)}")
        for version in result.pending:
            print(f"  {version}")
        return 0

    for version in result.applied:
        print(f"  Applied: {version}")
    if not result.ok:
        print(f"FAILED: {result.failed}: {result.error}")
        return 1
    print(f"Migrations complete ({len(result.applied)} applied).")
    return 0


if __name__ == '__main__':
    sys.exit(main())
