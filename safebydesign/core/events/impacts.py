"""Event impact application and system-state derivation.

Impacts are applied event by event and clamped after each event, so ordering
only matters when a bound is hit.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..domain.bounds import clamp_field, round_half_up
from ..domain.models import CycleResult, RandomEvent, SystemState


def apply_event_impacts(state: SystemState, events: Iterable[RandomEvent]) -> SystemState:
    values = state.to_dict()
    for event in events:
        for field_name, delta in event.impacts.items():
            if field_name not in values:
                raise ValueError(f"Unknown impact field '{field_name}' in event '{event.title}'")
            if not delta:
                continue
            values[field_name] = clamp_field(field_name, values[field_name] + delta)
    return SystemState(**values)


def build_system_state(previous_results: Sequence[CycleResult]) -> SystemState:
    """Average the previous cycle's team metrics; defaults when there is no history."""
    if not previous_results:
        return SystemState()
    count = len(previous_results)
    return SystemState(
        backlog=round_half_up(sum(r.metrics.backlog for r in previous_results) / count),
        dna_rate=round_half_up(sum(r.metrics.dna_rate for r in previous_results) / count),
        staff_sickness=round_half_up(sum(r.metrics.staff_sickness for r in previous_results) / count),
    )
