"""SQLite repository for decision submissions (one per team and cycle)."""

from __future__ import annotations

import json
import sqlite3

from safebydesign.core.domain.models import Budgets, DecisionSubmission


class SubmissionRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def upsert(self, submission: DecisionSubmission) -> None:
        decision_ids_json = json.dumps(
            list(submission.decision_ids),
            separators=(",", ":"),
            ensure_ascii=False,
        )
        budgets_json = json.dumps(
            submission.budgets_used.to_dict(),
            separators=(",", ":"),
            ensure_ascii=False,
        )
        self._conn.execute(
            """
            INSERT INTO submissions (
                team_id,
                game_id,
                cycle,
                decision_ids_json,
                submitted_at,
                budgets_used_json
            ) VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(team_id, cycle) DO UPDATE SET
                decision_ids_json=excluded.decision_ids_json,
                submitted_at=excluded.submitted_at,
                budgets_used_json=excluded.budgets_used_json
            """,
            (
                submission.team_id,
                submission.game_id,
                submission.cycle,
                decision_ids_json,
                submission.submitted_at,
                budgets_json,
            ),
        )

    def list_for_game(self, game_id: str) -> list[DecisionSubmission]:
        rows = self._conn.execute(
            "SELECT * FROM submissions WHERE game_id = ? ORDER BY cycle, rowid",
            (game_id,),
        ).fetchall()
        submissions: list[DecisionSubmission] = []
        for row in rows:
            budgets = json.loads(row["budgets_used_json"])
            submissions.append(
                DecisionSubmission(
                    team_id=row["team_id"],
                    game_id=row["game_id"],
                    cycle=row["cycle"],
                    decision_ids=tuple(json.loads(row["decision_ids_json"])),
                    submitted_at=row["submitted_at"],
                    budgets_used=Budgets(
                        capacity_points=budgets.get("capacity_points", 0),
                        staff_energy=budgets.get("staff_energy", 0),
                        cash_budget=budgets.get("cash_budget", 0),
                    ),
                )
            )
        return submissions
