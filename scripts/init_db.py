#!/usr/bin/env python3
"""
Schema Bootstrap Script

Drops and recreates all tables from scripts/schema.sql.
Usage: python scripts/init_db.py
"""
import sys
sys.path.insert(0, '.')

from pathlib import Path

from sqlalchemy import text

from app.core.config import get_settings
from app.db.postgres import engine

SCHEMA_FILE = Path(__file__).resolve().parent / "schema.sql"


def create_schema() -> None:
    """Execute schema.sql in a single transaction."""
    ddl = SCHEMA_FILE.read_text(encoding="utf-8")
    with engine.begin() as conn:
        conn.execute(text(ddl))


def main():
    settings = get_settings()
    print(f"Recreating tables in {settings.postgres_db} on {settings.postgres_host}:{settings.postgres_port}...")
    create_schema()
    print("Schema created successfully")


if __name__ == "__main__":
    main()
