"""Seeded event selection for a cycle.

Contract:
  - Inputs: cycle, scenario seed, titles already seen, event library.
  - Output: list of RandomEvent occurrences with ids "{cycle}-{position}".
  - Determinism: one integer-seeded stream per (scenario seed, cycle).

Selection summary:
  - One roll picks the event count: cycle 1 gives 1 below 0.7 else 0; later
    cycles give 0/1/2/3 at cut points 0.2/0.75/0.95.
  - Eligible events are shuffled with the same stream and the first N positions
    are taken; titles already seen are skipped, not replaced.

Edge cases:
  - Fewer eligible events than N returns all eligible (minus seen titles).
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Sequence

from ..domain.models import RandomEvent
from ..rng import RandomStream, seeded_random_from_int, seeded_shuffle

CYCLE_SEED_STRIDE = 1000
FIRST_CYCLE_EVENT_CHANCE = 0.7
# (upper bound of roll, event count) for cycles after the first
LATER_CYCLE_BUCKETS: tuple[tuple[float, int], ...] = ((0.2, 0), (0.75, 1), (0.95, 2))
LATER_CYCLE_MAX_EVENTS = 3


def event_count_for_roll(cycle: int, roll: float) -> int:
    if cycle == 1:
        return 1 if roll < FIRST_CYCLE_EVENT_CHANCE else 0
    for upper, count in LATER_CYCLE_BUCKETS:
        if roll < upper:
            return count
    return LATER_CYCLE_MAX_EVENTS


def cycle_stream(scenario_seed: int, cycle: int) -> RandomStream:
    return seeded_random_from_int(scenario_seed + cycle * CYCLE_SEED_STRIDE)


def generate_events_for_cycle(
    cycle: int,
    scenario_seed: int,
    library: Sequence[RandomEvent],
    previous_titles: Iterable[str] = (),
) -> list[RandomEvent]:
    rand = cycle_stream(scenario_seed, cycle)
    count = event_count_for_roll(cycle, rand())
    eligible = [event for event in library if event.eligible_for(cycle)]
    shuffled = seeded_shuffle(eligible, rand)
    seen = set(previous_titles)

    selected: list[RandomEvent] = []
    for i in range(min(count, len(shuffled))):
        event = shuffled[i]
        if event.title in seen:
            continue
        selected.append(dataclasses.replace(event, id=f"{cycle}-{i}"))
    return selected


def events_through_cycle(
    cycle: int,
    scenario_seed: int,
    library: Sequence[RandomEvent],
) -> dict[int, list[RandomEvent]]:
    """Regenerate events for cycles 1..cycle, feeding earlier titles forward."""
    by_cycle: dict[int, list[RandomEvent]] = {}
    seen: list[str] = []
    for c in range(1, cycle + 1):
        events = generate_events_for_cycle(c, scenario_seed, library, previous_titles=seen)
        by_cycle[c] = events
        seen.extend(event.title for event in events)
    return by_cycle
