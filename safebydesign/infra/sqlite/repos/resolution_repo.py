"""SQLite repository for the per-cycle resolution marker.

A row in cycle_resolution means results and cumulative scores for that
(game, cycle) were written in the same transaction.
"""

from __future__ import annotations

import sqlite3


class ResolutionRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def mark_resolved(self, game_id: str, cycle: int, resolved_at: str) -> None:
        self._conn.execute(
            "INSERT INTO cycle_resolution (game_id, cycle, resolved_at) VALUES (?, ?, ?)",
            (game_id, cycle, resolved_at),
        )

    def is_resolved(self, game_id: str, cycle: int) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM cycle_resolution WHERE game_id = ? AND cycle = ?",
            (game_id, cycle),
        ).fetchone()
        return row is not None

    def resolved_cycles(self, game_id: str) -> frozenset[int]:
        rows = self._conn.execute(
            "SELECT cycle FROM cycle_resolution WHERE game_id = ?", (game_id,)
        ).fetchall()
        return frozenset(row["cycle"] for row in rows)
