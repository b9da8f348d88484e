"""Outbound event vocabulary published by the session machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

AUDIENCE_ROOM = "room"
AUDIENCE_FACILITATOR = "facilitator"

GAME_CREATED = "game_created"
TEAM_JOINED = "team_joined"
GAME_UPDATED = "game_updated"
ALL_TEAMS_READY = "all_teams_ready"
CYCLE_STARTED = "cycle_started"
TEAM_SUBMITTED = "team_submitted"
SUBMISSIONS_CLOSED = "submissions_closed"
RESULTS_READY = "results_ready"
DEBRIEF_PROMPTS = "debrief_prompts"
LEADERBOARD_UPDATED = "leaderboard_updated"
CYCLE_ADVANCED = "cycle_advanced"
GAME_ENDED = "game_ended"

EVENT_NAMES = frozenset(
    (
        GAME_CREATED,
        TEAM_JOINED,
        GAME_UPDATED,
        ALL_TEAMS_READY,
        CYCLE_STARTED,
        TEAM_SUBMITTED,
        SUBMISSIONS_CLOSED,
        RESULTS_READY,
        DEBRIEF_PROMPTS,
        LEADERBOARD_UPDATED,
        CYCLE_ADVANCED,
        GAME_ENDED,
    )
)


@dataclass(frozen=True)
class OutboundEvent:
    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    audience: str = AUDIENCE_ROOM

    def __post_init__(self) -> None:
        if self.name not in EVENT_NAMES:
            raise ValueError(f"Unknown event name: {self.name}")
        if self.audience not in (AUDIENCE_ROOM, AUDIENCE_FACILITATOR):
            raise ValueError(f"Unknown audience: {self.audience}")
