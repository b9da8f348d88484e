from __future__ import annotations

import argparse
import logging
from typing import List, Sequence


def _debug_enabled(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "debug", False))


def _effective_limit(args: argparse.Namespace, items: Sequence[object]) -> int:
    if not items:
        return 0
    raw = getattr(args, "debug_limit", 0)
    if raw == 0:
        return len(items)
    return min(raw, len(items))


def _dbg(args: argparse.Namespace, msg: str) -> None:
    if _debug_enabled(args):
        print(f"[debug] {msg}")


def _take_head_tail(items: List[str], limit: int | None) -> tuple[List[str], List[str]]:
    if limit is None or limit <= 0:
        return items, []
    head = items[:limit]
    tail = items[-limit:] if len(items) > limit else []
    return head, tail


def _dbg_items(args: argparse.Namespace, label: str, items: Sequence[str]) -> None:
    """One debug line for a list, trimmed to --debug-limit items at each end."""
    if not _debug_enabled(args):
        return
    values = list(items)
    head, tail = _take_head_tail(values, _effective_limit(args, values))
    if tail:
        _dbg(args, f"{label} count={len(values)} head={head} tail={tail}")
    else:
        _dbg(args, f"{label} count={len(values)} items={head}")


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if _debug_enabled(args) else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
