"""Construct a fully wired app instance for running facilitation games.

Responsibilities:
  - Assemble content, sqlite stores, trigger detector and publisher.
Must not:
  - Implement game logic; composition only.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Optional

from safebydesign.app_api.facade import FacilitationApplication
from safebydesign.app_api.ports import EventPublisher
from safebydesign.app_api.publishers import RecordingPublisher
from safebydesign.content.library import ContentLibrary, load_content
from safebydesign.core.debrief.thresholds import TriggerThresholds
from safebydesign.core.debrief.triggers import TriggerDetector
from safebydesign.core.domain.rules import DEFAULT_RULES, GameRules
from safebydesign.infra.sqlite.migrator import apply_migrations
from safebydesign.infra.sqlite.repos.game_repo import GameRepo
from safebydesign.infra.sqlite.repos.resolution_repo import ResolutionRepo
from safebydesign.infra.sqlite.repos.result_repo import ResultRepo
from safebydesign.infra.sqlite.repos.submission_repo import SubmissionRepo
from safebydesign.infra.sqlite.repos.team_repo import TeamRepo


def build_facilitation_app(
    conn: sqlite3.Connection,
    publisher: Optional[EventPublisher] = None,
    content: Optional[ContentLibrary] = None,
    rules: GameRules = DEFAULT_RULES,
    thresholds: Optional[TriggerThresholds] = None,
    migrate: bool = True,
    **kwargs: Any,
) -> FacilitationApplication:
    """
    Composition root: build and wire all runtime components (content, stores, detector)
    and return the application facade.
    """
    content_dir = kwargs.pop("content_dir", None)
    if migrate:
        apply_migrations(conn)
    if content is None:
        content = load_content(Path(content_dir) if content_dir is not None else None)

    return FacilitationApplication(
        conn=conn,
        content=content,
        games=GameRepo(conn),
        teams=TeamRepo(conn),
        submissions=SubmissionRepo(conn),
        results=ResultRepo(conn),
        resolutions=ResolutionRepo(conn),
        publisher=publisher if publisher is not None else RecordingPublisher(),
        detector=TriggerDetector(thresholds),
        rules=rules,
        clock=kwargs.pop("clock", None),
        seed_source=kwargs.pop("seed_source", None),
        code_source=kwargs.pop("code_source", None),
        id_source=kwargs.pop("id_source", None),
    )
