#!/usr/bin/env python3
"""
Create the viral_searches and viral_images tables.

Prints the schema for pasting into the Supabase SQL editor, or runs it
directly over the PostgreSQL pooler with --apply.
"""

import os
import sys
import argparse
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

MIGRATIONS_DIR = Path(__file__).resolve().parent / "database" / "migrations"
DEFAULT_MIGRATION = "001_viral_tables.sql"


def load_migration(name: str = DEFAULT_MIGRATION) -> str:
    """Read a migration file; FileNotFoundError if it does not exist."""
    return (MIGRATIONS_DIR / name).read_text(encoding='utf-8')


def run_migration(sql: str) -> None:
    """Execute the migration with the configured Supabase database password."""
    from viralfinder.core.config import get_config
    from viralfinder.core.database.connection_manager import ConnectionManager

    with ConnectionManager(get_config().database) as manager:
        with manager.get_cursor() as cursor:
            cursor.execute(sql)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Viral search schema migration")
    parser.add_argument('--apply', action='store_true',
                        help='Run against SUPABASE_URL using SUPABASE_DB_PASSWORD instead of printing')
    parser.add_argument('--file', default=DEFAULT_MIGRATION, help=f'Migration file (default: {DEFAULT_MIGRATION})')
    args = parser.parse_args(argv)

    try:
        sql = load_migration(args.file)
    except FileNotFoundError:
        print(f"Migration file not found: {MIGRATIONS_DIR / args.file}")
        return 1

    if args.apply:
        run_migration(sql)
        print(f"✅ Applied {args.file}")
        return 0

    print(f"Database Migration: {args.file}")
    print("=" * 60)
    print(sql)
    print("=" * 60)
    print("\n⚠️  Run the SQL above in the Supabase SQL Editor, or re-run with --apply.")
    print("Then check the record store with:")
    print("RECORD_STORE=supabase python run.py health check")
    return 0


if __name__ == "__main__":
    sys.exit(main())
