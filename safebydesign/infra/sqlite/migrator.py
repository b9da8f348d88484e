"""SQLite schema migration helpers for game, team, submission and result tables.

Responsibilities:
  - Create/upgrade schema deterministically.
Must not:
  - Embed business logic; migrations only.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


def migration_files() -> list[Path]:
    migrations_dir = Path(__file__).resolve().parent / "migrations"
    return sorted(migrations_dir.glob("*.sql"))


def apply_migrations(conn: sqlite3.Connection) -> None:
    for migration in migration_files():
        sql_text = migration.read_text(encoding="utf-8")
        conn.executescript(sql_text)
