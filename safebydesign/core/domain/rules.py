"""Game rule configuration.

Responsibilities:
  - Hold the tunable constants of a game (cycle count, budget allowance, team limits).
  - Validate rule sets before they reach the session machine.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import Budgets

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


@dataclass(frozen=True)
class GameRules:
    total_cycles: int = 6
    budget_allowance: Budgets = field(default_factory=lambda: Budgets(10, 10, 10))
    min_teams: int = 2
    max_teams: int = 6
    code_length: int = 6
    code_alphabet: str = CODE_ALPHABET

    def validate(self) -> None:
        if self.total_cycles < 1:
            raise ValueError("total_cycles must be >= 1")
        if self.min_teams < 1:
            raise ValueError("min_teams must be >= 1")
        if self.max_teams < self.min_teams:
            raise ValueError("max_teams must be >= min_teams")
        if self.code_length < 4:
            raise ValueError("code_length must be >= 4")
        if len(set(self.code_alphabet)) != len(self.code_alphabet) or not self.code_alphabet:
            raise ValueError("code_alphabet must be non-empty with unique characters")
        allowance = self.budget_allowance
        if min(allowance.capacity_points, allowance.staff_energy, allowance.cash_budget) < 0:
            raise ValueError("budget_allowance must be non-negative")


DEFAULT_RULES = GameRules()
