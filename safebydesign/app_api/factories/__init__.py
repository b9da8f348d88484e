"""Factory helpers for building the application facade."""

from .build_app import build_facilitation_app

__all__ = ["build_facilitation_app"]
