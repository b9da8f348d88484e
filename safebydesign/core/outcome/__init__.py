"""Cycle outcome calculation.

Responsibilities:
  - Turn one team's selected decisions for a cycle into pillar scores,
    operational metrics and a bounded incident list.
  - Must not validate budgets or touch persistence; callers do both.
"""
