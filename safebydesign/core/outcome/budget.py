"""Budget accounting for decision submissions.

Budget validation happens at submission time, before the outcome engine runs.
"""

from __future__ import annotations

from typing import Iterable

from ..domain.models import Budgets, Decision
from ..errors import ValidationError


def budget_used(decisions: Iterable[Decision]) -> Budgets:
    used = Budgets()
    for decision in decisions:
        used = used.plus(decision.costs)
    return used


def validate_budget(decisions: Iterable[Decision], allowance: Budgets) -> Budgets:
    used = budget_used(decisions)
    over = used.overruns(allowance)
    if over:
        raise ValidationError(f"Budget exceeded for: {', '.join(over)}")
    return used
