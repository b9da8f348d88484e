"""Facilitator debrief generation.

Responsibilities:
  - Detect intensity-scored triggers from a team's cycle history and game position.
  - Select theme-diverse, priority-ranked discussion questions per team and for the room.
  - Build the end-of-game narrative and per-cycle summaries.
  - Must not touch persistence; inputs are assembled by the orchestration layer.
"""
