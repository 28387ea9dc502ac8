#!/usr/bin/env python3
"""Apply a SQL migration to the content index database.

Usage:
    python3 run_migration.py migrations/0001_content_index.sql

Connects with psycopg2 using DATABASE_URL. When psycopg2 isn't installed the
SQL is printed so it can be pasted into the Supabase SQL editor.
"""
import argparse
import os
import sys
from pathlib import Path


def apply_migration(sql: str, database_url: str) -> None:
    import psycopg2

    print("🔌 Connecting to database...")
    conn = psycopg2.connect(database_url)
    try:
        with conn.cursor() as cursor:
            print("🚀 Executing migration...\n")
            cursor.execute(sql)
        conn.commit()
    finally:
        conn.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Apply a SQL migration")
    parser.add_argument("migration_file", type=Path)
    args = parser.parse_args()

    if not args.migration_file.is_file():
        print(f"❌ Migration file not found: {args.migration_file}")
        return 1

    sql = args.migration_file.read_text()
    print(f"📄 Migration file: {args.migration_file}")
    print(f"📊 Content length: {len(sql)} bytes\n")

    try:
        import psycopg2  # noqa: F401
    except ImportError:
        print("❌ psycopg2 not installed. Install with: pip install -e '.[migrate]'")
        print("\nOr copy this SQL and run it in the Supabase SQL editor:\n")
        print("=" * 60)
        print(sql)
        print("=" * 60)
        return 1

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("❌ DATABASE_URL environment variable not set")
        return 1

    try:
        apply_migration(sql, database_url)
    except Exception as e:
        print(f"❌ Error running migration: {e}")
        return 1

    print("✅ Migration complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
