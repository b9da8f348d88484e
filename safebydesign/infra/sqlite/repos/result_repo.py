"""SQLite repository for cycle results.

Responsibilities:
  - Append one row per (game, cycle, team); rows are never updated.
  - Keep scores and metrics in plain columns so reports can query them directly.
Must not:
  - Recompute scores; persistence only.
"""

from __future__ import annotations

import json
import sqlite3

from safebydesign.core.domain.enums import IncidentSeverity
from safebydesign.core.domain.models import CycleResult, Incident, OperationalMetrics, ScoreBreakdown


def _row_to_result(row: sqlite3.Row) -> CycleResult:
    incidents = tuple(
        Incident(type=item["type"], severity=IncidentSeverity(item["severity"]), description=item["description"])
        for item in json.loads(row["incidents_json"])
    )
    return CycleResult(
        id=row["id"],
        game_id=row["game_id"],
        cycle=row["cycle"],
        team_id=row["team_id"],
        scores=ScoreBreakdown(
            safety=row["safety"],
            equity=row["equity"],
            staff=row["staff"],
            resilience=row["resilience"],
            total=row["total"],
        ),
        metrics=OperationalMetrics(
            backlog=row["backlog"],
            dna_rate=row["dna_rate"],
            staff_sickness=row["staff_sickness"],
            high_risk_share=row["high_risk_share"],
            incidents=row["incident_count"],
            neonatal_admissions=row["neonatal_admissions"],
        ),
        incidents=incidents,
        calculated_at=row["calculated_at"],
    )


class ResultRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def insert(self, result: CycleResult) -> None:
        incidents_json = json.dumps(
            [
                {"type": i.type, "severity": i.severity.value, "description": i.description}
                for i in result.incidents
            ],
            separators=(",", ":"),
            ensure_ascii=False,
        )
        scores = result.scores
        metrics = result.metrics
        self._conn.execute(
            """
            INSERT INTO cycle_results (
                id,
                game_id,
                cycle,
                team_id,
                safety,
                equity,
                staff,
                resilience,
                total,
                backlog,
                dna_rate,
                staff_sickness,
                high_risk_share,
                incident_count,
                neonatal_admissions,
                incidents_json,
                calculated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                result.id,
                result.game_id,
                result.cycle,
                result.team_id,
                scores.safety,
                scores.equity,
                scores.staff,
                scores.resilience,
                scores.total,
                metrics.backlog,
                metrics.dna_rate,
                metrics.staff_sickness,
                metrics.high_risk_share,
                metrics.incidents,
                metrics.neonatal_admissions,
                incidents_json,
                result.calculated_at,
            ),
        )

    def list_for_game(self, game_id: str) -> list[CycleResult]:
        rows = self._conn.execute(
            "SELECT * FROM cycle_results WHERE game_id = ? ORDER BY cycle, rowid",
            (game_id,),
        ).fetchall()
        return [_row_to_result(row) for row in rows]
