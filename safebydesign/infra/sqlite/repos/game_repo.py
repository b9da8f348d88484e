"""SQLite repository for game records."""

from __future__ import annotations

import sqlite3
from typing import Optional

from safebydesign.core.domain.enums import GameStatus
from safebydesign.core.domain.models import Game


def _row_to_game(row: sqlite3.Row) -> Game:
    return Game(
        id=row["id"],
        code=row["code"],
        created_at=row["created_at"],
        status=GameStatus(row["status"]),
        number_of_teams=row["number_of_teams"],
        current_cycle=row["current_cycle"],
        scenario_seed=row["scenario_seed"],
        facilitator_name=row["facilitator_name"],
    )


class GameRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def upsert(self, game: Game) -> None:
        self._conn.execute(
            """
            INSERT INTO games (
                id,
                code,
                created_at,
                status,
                number_of_teams,
                current_cycle,
                scenario_seed,
                facilitator_name
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                status=excluded.status,
                current_cycle=excluded.current_cycle,
                facilitator_name=excluded.facilitator_name
            """,
            (
                game.id,
                game.code,
                game.created_at,
                game.status.value,
                game.number_of_teams,
                game.current_cycle,
                game.scenario_seed,
                game.facilitator_name,
            ),
        )

    def get(self, game_id: str) -> Optional[Game]:
        row = self._conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
        return None if row is None else _row_to_game(row)

    def get_by_code(self, code: str) -> Optional[Game]:
        row = self._conn.execute(
            "SELECT * FROM games WHERE code = ?", (code.strip().upper(),)
        ).fetchone()
        return None if row is None else _row_to_game(row)

    def code_exists(self, code: str) -> bool:
        row = self._conn.execute("SELECT 1 FROM games WHERE code = ?", (code,)).fetchone()
        return row is not None
