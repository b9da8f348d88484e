"""Per-team, per-cycle report for one game from the results tables."""

from __future__ import annotations

import argparse
import sqlite3
from typing import Optional

import numpy as np
import pandas as pd

from safebydesign.core.domain.enums import PILLARS
from safebydesign.infra.sqlite.db import get_readonly_connection
from safebydesign.cli._debug_utils import _configure_logging, _dbg

RESULT_COLUMNS = [
    "cycle",
    "team_name",
    "safety",
    "equity",
    "staff",
    "resilience",
    "total",
    "backlog",
    "dna_rate",
    "staff_sickness",
    "incident_count",
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report cycle results for one game")
    parser.add_argument("--db", required=True, help="SQLite database path")
    parser.add_argument("--game-code", default=None, help="Game join code")
    parser.add_argument("--game-id", default=None, help="Game id (overrides --game-code)")
    parser.add_argument("--csv-out", default=None, help="Optional CSV path for the per-cycle table")
    parser.add_argument("--debug", action="store_true", help="Print debug lines")
    return parser.parse_args()


def resolve_game_id(conn: sqlite3.Connection, game_id: Optional[str], game_code: Optional[str]) -> str:
    if game_id:
        return game_id
    if not game_code:
        raise ValueError("either --game-id or --game-code is required")
    row = conn.execute("SELECT id FROM games WHERE code = ?", (game_code.strip().upper(),)).fetchone()
    if row is None:
        raise ValueError(f"unknown game code: {game_code}")
    return row[0]


def load_results_frame(conn: sqlite3.Connection, game_id: str) -> pd.DataFrame:
    sql = """
        SELECT r.cycle, t.name AS team_name, r.team_id,
               r.safety, r.equity, r.staff, r.resilience, r.total,
               r.backlog, r.dna_rate, r.staff_sickness, r.incident_count
        FROM cycle_results r
        JOIN teams t ON t.id = r.team_id
        WHERE r.game_id = ?
        ORDER BY r.cycle, t.joined_at, t.rowid
    """
    return pd.read_sql_query(sql, conn, params=(game_id,))


def team_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Cumulative total, mean and spread per team, ranked by cumulative total."""
    rows = []
    for team_name, group in df.groupby("team_name", sort=False):
        totals = group["total"].to_numpy(dtype=float)
        pillar_means = {p.value: float(np.mean(group[p.value].to_numpy(dtype=float))) for p in PILLARS}
        rows.append(
            {
                "team_name": team_name,
                "cumulative_total": float(np.sum(totals)),
                "mean_total": float(np.mean(totals)),
                "std_total": float(np.std(totals)) if totals.size > 1 else 0.0,
                "incidents": int(group["incident_count"].sum()),
                **pillar_means,
            }
        )
    summary = pd.DataFrame(rows)
    if summary.empty:
        return summary
    summary = summary.sort_values("cumulative_total", ascending=False, kind="mergesort").reset_index(drop=True)
    summary["rank"] = np.arange(1, len(summary) + 1)
    return summary


def pillar_leaders(summary: pd.DataFrame) -> dict[str, str]:
    if summary.empty:
        return {}
    return {p.value: str(summary.loc[summary[p.value].idxmax(), "team_name"]) for p in PILLARS}


def main() -> None:
    args = parse_args()
    _configure_logging(args)
    conn = get_readonly_connection(args.db)
    try:
        game_id = resolve_game_id(conn, args.game_id, args.game_code)
        df = load_results_frame(conn, game_id)
    finally:
        conn.close()
    _dbg(args, f"game_id={game_id} rows={len(df)}")

    if df.empty:
        print(f"SUMMARY status=EMPTY game_id={game_id}")
        return

    with pd.option_context("display.max_rows", None, "display.width", 160):
        print(df[RESULT_COLUMNS].to_string(index=False))

    summary = team_summary(df)
    for row in summary.itertuples(index=False):
        print(
            f"RANK {row.rank} team={row.team_name} cumulative={row.cumulative_total:.1f} "
            f"mean={row.mean_total:.1f} std={row.std_total:.2f} incidents={row.incidents}"
        )
    for pillar, team_name in pillar_leaders(summary).items():
        print(f"PILLAR_LEADER {pillar}={team_name}")

    if args.csv_out:
        df[RESULT_COLUMNS].to_csv(args.csv_out, index=False)
        print(f"CSV_WRITTEN path={args.csv_out} rows={len(df)}")
    print(f"SUMMARY status=OK game_id={game_id} cycles={df['cycle'].nunique()} teams={len(summary)}")


if __name__ == "__main__":
    main()
