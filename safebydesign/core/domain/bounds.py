"""Valid ranges for operational metrics and system-state fields.

Shared by the outcome engine and the event engine so a metric has one bound
everywhere it is clamped.
"""

from __future__ import annotations

import math
from typing import Optional

PILLAR_MIN = 0.0
PILLAR_MAX = 100.0

# field -> (lower, upper); None means unbounded on that side
FIELD_BOUNDS: dict[str, tuple[Optional[float], Optional[float]]] = {
    "backlog": (0.0, None),
    "dna_rate": (0.0, 50.0),
    "staff_sickness": (0.0, 40.0),
    "staff_morale": (0.0, 100.0),
    "safety_risk": (0.0, None),
    "capacity_modifier": (None, None),
}


def clamp(value: float, lower: Optional[float], upper: Optional[float]) -> float:
    if lower is not None and value < lower:
        value = lower
    if upper is not None and value > upper:
        value = upper
    return value


def clamp_field(field_name: str, value: float) -> float:
    lower, upper = FIELD_BOUNDS[field_name]
    return clamp(value, lower, upper)


def clamp_pillar(value: float) -> float:
    return clamp(value, PILLAR_MIN, PILLAR_MAX)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round1(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10
