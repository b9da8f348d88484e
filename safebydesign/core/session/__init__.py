"""Per-game session state machine.

Responsibilities:
  - Sequence lobby, decision cycles, results and game end as pure transitions.
  - Return the new state plus the outbound events to publish.
  - Must not touch persistence, locks or transport; the application facade owns those.
"""
