"""Content port consumed by the session machine."""

from __future__ import annotations

from typing import Iterable, Mapping, Protocol, Sequence

from ..debrief.models import DebriefQuestion
from ..domain.models import CycleBrief, Decision, RandomEvent


class ContentPort(Protocol):
    decisions_by_id: Mapping[str, Decision]
    questions: Sequence[DebriefQuestion]
    events: Sequence[RandomEvent]

    def resolve(self, decision_ids: Iterable[str]) -> list[Decision]:
        ...

    def brief(self, cycle: int) -> CycleBrief:
        ...
