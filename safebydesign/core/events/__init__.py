"""Random perturbation events.

Responsibilities:
  - Select 0-3 seeded events per cycle from the static event library.
  - Apply event impacts to the running system-state vector.
  - Must not touch persistence; applied events are ephemeral.
"""
