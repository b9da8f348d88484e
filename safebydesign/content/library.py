"""Static game content: decision catalog, cycle briefs, question bank, event library.

Responsibilities:
  - Load and type-check the JSON content files once.
  - Expose them as an immutable ContentLibrary shared by every game.

Invariants:
  - A loaded library is never mutated; reloading builds a new object.
  - Decision ids, question ids and event ids are unique within their bank.
Must not:
  - Hold per-game state.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from safebydesign.core.debrief.models import DebriefQuestion
from safebydesign.core.domain.enums import (
    DecisionCategory,
    DecisionFlag,
    DecisionTiming,
    EffectTag,
    EventSeverity,
    Metric,
    Pillar,
    QuestionScope,
    QuestionTheme,
    TriggerType,
)
from safebydesign.core.domain.models import Budgets, CycleBrief, Decision, RandomEvent, TradeoffRule
from safebydesign.core.errors import NotFoundError

logger = logging.getLogger(__name__)

TRADEOFF_TARGETS = frozenset(p.value for p in Pillar) | frozenset(m.value for m in Metric)
SYSTEM_STATE_FIELDS = frozenset(
    ("backlog", "dna_rate", "staff_sickness", "staff_morale", "safety_risk", "capacity_modifier")
)


def _data_dir() -> Path:
    return Path(__file__).resolve().parent / "data"


def _require(payload: dict[str, Any], key: str, expected_type: type, where: str) -> Any:
    if key not in payload:
        raise ValueError(f"Missing required field '{key}' in {where}")
    value = payload[key]
    if expected_type is float:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' in {where} must be float")
        return float(value)
    if expected_type is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' in {where} must be int")
        return value
    if not isinstance(value, expected_type):
        raise ValueError(f"Field '{key}' in {where} must be {expected_type.__name__}")
    return value


def _optional_int(payload: dict[str, Any], key: str, where: str) -> Optional[int]:
    if payload.get(key) is None:
        return None
    return _require(payload, key, int, where)


def _float_map(raw: Any, allowed: Iterable[str], key: str, where: str) -> dict[str, float]:
    if not isinstance(raw, dict):
        raise ValueError(f"Field '{key}' in {where} must be dict")
    allowed_set = set(allowed)
    out: dict[str, float] = {}
    for name in raw:
        if name not in allowed_set:
            raise ValueError(f"Unknown key '{name}' in '{key}' of {where}")
        out[name] = _require(raw, name, float, f"{where}.{key}")
    return out


def _read_list(path: Path) -> list[dict[str, Any]]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise ValueError(f"{path.name} must be a JSON list of objects")
    return payload


def parse_decision(payload: dict[str, Any]) -> Decision:
    where = f"decision '{payload.get('id', '?')}'"
    costs = _require(payload, "costs", dict, where)
    cost_where = f"{where}.costs"
    delayed_cycles = _optional_int(payload, "delayed_cycles", where)
    if delayed_cycles is not None and delayed_cycles < 1:
        raise ValueError(f"Field 'delayed_cycles' in {where} must be >= 1")

    tradeoffs: list[TradeoffRule] = []
    for raw in payload.get("tradeoffs", []):
        target = _require(raw, "target", str, f"{where}.tradeoffs")
        if target not in TRADEOFF_TARGETS:
            raise ValueError(f"Unknown trade-off target '{target}' in {where}")
        chance = _require(raw, "chance", float, f"{where}.tradeoffs") if "chance" in raw else 1.0
        if chance < 0.0 or chance > 1.0:
            raise ValueError(f"Trade-off chance in {where} must be within [0, 1]")
        tradeoffs.append(
            TradeoffRule(target=target, delta=_require(raw, "delta", float, f"{where}.tradeoffs"), chance=chance)
        )

    adjustments = _float_map(payload.get("effect_adjustments", {}), (p.value for p in Pillar), "effect_adjustments", where)
    metric_deltas = _float_map(payload.get("metric_deltas", {}), (m.value for m in Metric), "metric_deltas", where)

    return Decision(
        id=_require(payload, "id", str, where),
        name=_require(payload, "name", str, where),
        description=_require(payload, "description", str, where),
        category=DecisionCategory(_require(payload, "category", str, where)),
        costs=Budgets(
            capacity_points=_require(costs, "capacity_points", int, cost_where),
            staff_energy=_require(costs, "staff_energy", int, cost_where),
            cash_budget=_require(costs, "cash_budget", int, cost_where),
        ),
        effect_tags=tuple(EffectTag(tag) for tag in _require(payload, "effect_tags", list, where)),
        timing=DecisionTiming(_require(payload, "timing", str, where)),
        delayed_cycles=delayed_cycles if delayed_cycles is not None else 1,
        effect_adjustments={Pillar(k): v for k, v in adjustments.items()},
        tradeoffs=tuple(tradeoffs),
        metric_deltas={Metric(k): v for k, v in metric_deltas.items()},
        flags=frozenset(DecisionFlag(flag) for flag in payload.get("flags", [])),
    )


def parse_brief(payload: dict[str, Any]) -> CycleBrief:
    where = f"cycle brief {payload.get('cycle', '?')}"
    pressure = _require(payload, "pressure_level", int, where)
    if pressure < 1 or pressure > 5:
        raise ValueError(f"Field 'pressure_level' in {where} must be within [1, 5]")
    return CycleBrief(
        cycle=_require(payload, "cycle", int, where),
        title=_require(payload, "title", str, where),
        description=_require(payload, "description", str, where),
        pressure_level=pressure,
        signals=tuple(_require(payload, "signals", list, where)),
    )


def parse_question(payload: dict[str, Any]) -> DebriefQuestion:
    where = f"question '{payload.get('id', '?')}'"
    priority = _require(payload, "priority", int, where)
    if priority < 1 or priority > 5:
        raise ValueError(f"Field 'priority' in {where} must be within [1, 5]")
    follow_up = payload.get("follow_up")
    if follow_up is not None and not isinstance(follow_up, str):
        raise ValueError(f"Field 'follow_up' in {where} must be str")
    return DebriefQuestion(
        id=_require(payload, "id", str, where),
        text=_require(payload, "text", str, where),
        theme=QuestionTheme(_require(payload, "theme", str, where)),
        triggers=tuple(TriggerType(t) for t in _require(payload, "triggers", list, where)),
        priority=priority,
        scope=QuestionScope(_require(payload, "scope", str, where)),
        follow_up=follow_up,
        min_cycle=_optional_int(payload, "min_cycle", where),
        max_cycle=_optional_int(payload, "max_cycle", where),
    )


def parse_event(payload: dict[str, Any]) -> RandomEvent:
    where = f"event '{payload.get('id', '?')}'"
    return RandomEvent(
        id=_require(payload, "id", str, where),
        title=_require(payload, "title", str, where),
        description=_require(payload, "description", str, where),
        severity=EventSeverity(_require(payload, "severity", str, where)),
        effect=_require(payload, "effect", str, where),
        impacts=_float_map(_require(payload, "impacts", dict, where), SYSTEM_STATE_FIELDS, "impacts", where),
        cycle=_optional_int(payload, "cycle", where),
        min_cycle=_optional_int(payload, "min_cycle", where),
        max_cycle=_optional_int(payload, "max_cycle", where),
    )


def _ensure_unique(ids: Iterable[object], what: str) -> None:
    seen: set[object] = set()
    for item_id in ids:
        if item_id in seen:
            raise ValueError(f"Duplicate {what} id: {item_id}")
        seen.add(item_id)


@dataclass(frozen=True)
class ContentLibrary:
    decisions: tuple[Decision, ...]
    decisions_by_id: Mapping[str, Decision]
    briefs: tuple[CycleBrief, ...]
    questions: tuple[DebriefQuestion, ...]
    events: tuple[RandomEvent, ...]

    @classmethod
    def build(
        cls,
        decisions: Iterable[Decision],
        briefs: Iterable[CycleBrief],
        questions: Iterable[DebriefQuestion],
        events: Iterable[RandomEvent],
    ) -> ContentLibrary:
        decisions = tuple(decisions)
        briefs = tuple(sorted(briefs, key=lambda b: b.cycle))
        questions = tuple(questions)
        events = tuple(events)
        _ensure_unique((d.id for d in decisions), "decision")
        _ensure_unique((b.cycle for b in briefs), "cycle brief")
        _ensure_unique((q.id for q in questions), "question")
        _ensure_unique((e.id for e in events), "event")
        return cls(
            decisions=decisions,
            decisions_by_id=MappingProxyType({d.id: d for d in decisions}),
            briefs=briefs,
            questions=questions,
            events=events,
        )

    def resolve(self, decision_ids: Iterable[str]) -> list[Decision]:
        """Catalog entries for the given ids, in order; unknown ids are dropped."""
        return [self.decisions_by_id[d] for d in decision_ids if d in self.decisions_by_id]

    def brief(self, cycle: int) -> CycleBrief:
        for brief in self.briefs:
            if brief.cycle == cycle:
                return brief
        raise NotFoundError(f"No brief for cycle {cycle}")


def load_content(data_dir: Optional[Path] = None) -> ContentLibrary:
    base = Path(data_dir) if data_dir is not None else _data_dir()
    library = ContentLibrary.build(
        decisions=[parse_decision(p) for p in _read_list(base / "decisions.json")],
        briefs=[parse_brief(p) for p in _read_list(base / "cycle_briefs.json")],
        questions=[parse_question(p) for p in _read_list(base / "questions.json")],
        events=[parse_event(p) for p in _read_list(base / "events.json")],
    )
    logger.info(
        "content loaded from %s: decisions=%d briefs=%d questions=%d events=%d",
        base,
        len(library.decisions),
        len(library.briefs),
        len(library.questions),
        len(library.events),
    )
    return library
