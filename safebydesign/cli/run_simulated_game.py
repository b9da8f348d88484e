"""Play a complete seeded game end to end against a SQLite database.

Teams pick random affordable decisions each cycle; the run prints KEY=value
status lines per cycle and the end-of-game debrief.
"""

from __future__ import annotations

import argparse
import random
from typing import Sequence

from safebydesign.app_api.dto import CreateGameSpec
from safebydesign.app_api.factories.build_app import build_facilitation_app
from safebydesign.app_api.publishers import RecordingPublisher
from safebydesign.core.domain.models import Budgets, Decision
from safebydesign.core.outcome.engine import set_outcome_debug
from safebydesign.infra.sqlite.db import get_connection
from safebydesign.cli._debug_utils import _configure_logging, _dbg, _dbg_items


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a simulated facilitation game")
    parser.add_argument("--db", default=":memory:", help="SQLite database path")
    parser.add_argument("--teams", type=int, default=3, help="Number of teams (2-6)")
    parser.add_argument("--seed", type=int, default=12345, help="Scenario seed")
    parser.add_argument("--choice-seed", type=int, default=7, help="Seed for simulated team choices")
    parser.add_argument("--max-decisions", type=int, default=4, help="Max decisions per team per cycle")
    parser.add_argument("--content-dir", default=None, help="Optional content directory override")
    parser.add_argument("--debug", action="store_true", help="Print debug lines")
    parser.add_argument("--debug-limit", type=int, default=0, help="Limit debug list output (0 = all)")
    return parser.parse_args()


def pick_affordable(
    decisions: Sequence[Decision],
    allowance: Budgets,
    rand: random.Random,
    max_picks: int,
) -> list[str]:
    """Random decision ids whose summed costs stay within the allowance."""
    pool = list(decisions)
    rand.shuffle(pool)
    spent = Budgets()
    picked: list[str] = []
    for decision in pool:
        if len(picked) >= max_picks:
            break
        candidate = spent.plus(decision.costs)
        if candidate.overruns(allowance):
            continue
        spent = candidate
        picked.append(decision.id)
    return picked


def main() -> None:
    args = parse_args()
    _configure_logging(args)
    if args.debug:
        set_outcome_debug(lambda msg: _dbg(args, msg))

    conn = get_connection(args.db)
    publisher = RecordingPublisher()
    app = build_facilitation_app(conn, publisher=publisher, content_dir=args.content_dir)
    rand = random.Random(args.choice_seed)

    game = app.create_game(CreateGameSpec(number_of_teams=args.teams, scenario_seed=args.seed))
    print(f"GAME id={game.id} code={game.code} seed={game.scenario_seed} teams={game.number_of_teams}")
    teams = [app.join_team(game.code, f"Team {i + 1}") for i in range(args.teams)]
    app.start_cycle(game.id)

    for cycle in range(1, app.rules.total_cycles + 1):
        started = publisher.last("cycle_started")
        if started is not None:
            _dbg_items(args, f"cycle={cycle} events", [e["title"] for e in started.payload.get("events", [])])
        for team in teams:
            choice = pick_affordable(
                app.list_decisions(), app.rules.budget_allowance, rand, args.max_decisions
            )
            _dbg_items(args, f"cycle={cycle} team={team.name} decisions", choice)
            app.submit_decisions(team.id, choice)
        for row in app.leaderboard(game.id):
            print(f"CYCLE {cycle} RANK {row['rank']} team={row['team_name']} score={row['score']:.1f}")
        app.advance_cycle(game.id)

    prompts = app.end_of_game_prompts(game.id)
    print(f"NARRATIVE {prompts.game_narrative}")
    for question in prompts.all_teams:
        print(f"ROOM_QUESTION theme={question.theme.value} text={question.text}")
    for analysis in prompts.per_team:
        for observation in analysis.key_observations:
            print(f"OBSERVATION team={analysis.team_name} {observation}")
        for question in analysis.suggested_questions:
            print(f"TEAM_QUESTION team={analysis.team_name} theme={question.theme.value} text={question.text}")
    print(f"EVENTS_PUBLISHED={len(publisher.published)}")
    conn.close()


if __name__ == "__main__":
    main()
