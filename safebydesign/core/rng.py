"""Deterministic random streams.

Responsibilities:
  - Provide reproducible float streams keyed by string or integer seeds.
  - Provide a seeded Fisher-Yates shuffle.

Invariants:
  - Same seed, same sequence. No global random state is touched.
  - The integer stream uses integer arithmetic only, so it is platform independent.
"""

from __future__ import annotations

import random
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

RandomStream = Callable[[], float]

_LCG_MULTIPLIER = 1103515245
_LCG_INCREMENT = 12345
_LCG_MASK = 0x7FFFFFFF
_LCG_MODULUS = 2**31


def seeded_stream(seed: str) -> RandomStream:
    return random.Random(seed).random


def seeded_random_from_int(seed: int) -> RandomStream:
    state = seed & _LCG_MASK

    def _next() -> float:
        nonlocal state
        state = (state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _LCG_MASK
        return state / _LCG_MODULUS

    return _next


def outcome_seed(scenario_seed: int, team_id: str, cycle: int) -> str:
    return f"{scenario_seed}-{team_id}-{cycle}"


def seeded_shuffle(items: Sequence[T], rand: RandomStream) -> list[T]:
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(rand() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result
