"""Domain enums for the game lifecycle, decision catalog and debrief triggers.

Responsibilities:
  - Define GameStatus, catalog vocabularies and TriggerType identifiers.
  - Provide stable trigger categories and facilitator-facing labels.

Invariants:
  - Enum values must remain stable for persistence and content files.
  - TRIGGER_METADATA must be complete and deterministic.
"""

from __future__ import annotations

from enum import Enum


class GameStatus(Enum):
    LOBBY = "lobby"
    IN_CYCLE = "in_cycle"
    RESULTS = "results"
    ENDED = "ended"


class DecisionCategory(Enum):
    PATHWAY_ACCESS = "pathway_access"
    CLINICAL_SAFETY = "clinical_safety"
    DIGITAL_MONITORING = "digital_monitoring"
    WORKFORCE_WELLBEING = "workforce_wellbeing"


class DecisionTiming(Enum):
    IMMEDIATE = "immediate"
    DELAYED = "delayed"
    BOTH = "both"


class EffectTag(Enum):
    SAFETY = "safety"
    EQUITY = "equity"
    STAFF = "staff"
    RESILIENCE = "resilience"
    GOVERNANCE = "governance"
    DIGITAL = "digital"
    FLOW = "flow"


class Pillar(Enum):
    SAFETY = "safety"
    EQUITY = "equity"
    STAFF = "staff"
    RESILIENCE = "resilience"


# Evaluation order matters for seeded draws; do not reorder.
PILLARS: tuple[Pillar, ...] = (Pillar.SAFETY, Pillar.EQUITY, Pillar.STAFF, Pillar.RESILIENCE)


class Metric(Enum):
    BACKLOG = "backlog"
    DNA_RATE = "dna_rate"
    STAFF_SICKNESS = "staff_sickness"
    HIGH_RISK_SHARE = "high_risk_share"


# Catalog markers checked by exact membership in trigger detection.
class DecisionFlag(Enum):
    ESCALATION = "escalation"
    TRIAGE = "triage"
    INTERPRETER = "interpreter"
    TRAINING = "training"
    BANK_STAFF = "bank_staff"
    GOVERNANCE = "governance"
    SAFETY_MECHANISM = "safety_mechanism"


class IncidentSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EventSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class QuestionTheme(Enum):
    STORY = "story"
    DECISION_QUALITY = "decision_quality"
    SYSTEMS_THINKING = "systems_thinking"
    TEAM_DYNAMICS = "team_dynamics"
    STRATEGY = "strategy"
    LESSONS = "lessons"
    SAFETY_CULTURE = "safety_culture"
    EQUITY_ACCESS = "equity_access"
    STAFF_WELLBEING = "staff_wellbeing"
    RESILIENCE = "resilience"


class QuestionScope(Enum):
    TEAM = "team"
    ALL = "all"


class TriggerCategory(Enum):
    LIFECYCLE = "LIFECYCLE"
    SAFETY = "SAFETY"
    EQUITY = "EQUITY"
    STAFF = "STAFF"
    RESILIENCE = "RESILIENCE"
    PERFORMANCE = "PERFORMANCE"
    POSITION = "POSITION"


class TriggerType(Enum):
    # safety
    SAFETY_FOCUS = "safety_focus"
    SAFETY_NEGLECT = "safety_neglect"
    INCIDENT_OCCURRED = "incident_occurred"
    NEAR_MISS = "near_miss"
    ESCALATION_IMPROVED = "escalation_improved"
    DOCUMENTATION_GAP = "documentation_gap"
    # equity
    EQUITY_FOCUS = "equity_focus"
    EQUITY_NEGLECT = "equity_neglect"
    ACCESS_BARRIER = "access_barrier"
    INTERPRETER_USED = "interpreter_used"
    TRIAGE_TIGHTENED = "triage_tightened"
    VULNERABLE_GROUP_IMPACT = "vulnerable_group_impact"
    # staff
    STAFF_WELLBEING_FOCUS = "staff_wellbeing_focus"
    STAFF_NEGLECT = "staff_neglect"
    HIGH_SICKNESS = "high_sickness"
    BURNOUT_RISK = "burnout_risk"
    TRAINING_INVESTED = "training_invested"
    WORKLOAD_PRESSURE = "workload_pressure"
    # resilience
    RESILIENCE_FOCUS = "resilience_focus"
    RESILIENCE_NEGLECT = "resilience_neglect"
    GOVERNANCE_IMPROVED = "governance_improved"
    CAPACITY_STRAIN = "capacity_strain"
    BANK_STAFF_USED = "bank_staff_used"
    SYSTEM_FRAGILE = "system_fragile"
    # performance
    BACKLOG_GROWING = "backlog_growing"
    BACKLOG_REDUCED = "backlog_reduced"
    DNA_RATE_HIGH = "dna_rate_high"
    DNA_RATE_IMPROVED = "dna_rate_improved"
    HIGH_RISK_PROPORTION = "high_risk_proportion"
    NEONATAL_ADMISSIONS_HIGH = "neonatal_admissions_high"
    # game position
    FIRST_CYCLE = "first_cycle"
    LEADING_TEAM = "leading_team"
    STRUGGLING_TEAM = "struggling_team"
    COMEBACK = "comeback"
    EARLY_LEAD_LOST = "early_lead_lost"
    BALANCED_APPROACH = "balanced_approach"
    SINGLE_FOCUS = "single_focus"


def _meta(category: TriggerCategory, label: str) -> dict[str, object]:
    return {"category": category, "label": label}


# Facilitator-facing metadata keyed by trigger type.
TRIGGER_METADATA: dict[TriggerType, dict[str, object]] = {
    TriggerType.SAFETY_FOCUS: _meta(TriggerCategory.SAFETY, "Strong safety performance"),
    TriggerType.SAFETY_NEGLECT: _meta(TriggerCategory.SAFETY, "Safety below threshold"),
    TriggerType.INCIDENT_OCCURRED: _meta(TriggerCategory.SAFETY, "Incidents recorded"),
    TriggerType.NEAR_MISS: _meta(TriggerCategory.SAFETY, "Near miss reported"),
    TriggerType.ESCALATION_IMPROVED: _meta(TriggerCategory.SAFETY, "Escalation or audit investment"),
    TriggerType.DOCUMENTATION_GAP: _meta(TriggerCategory.SAFETY, "Escalation pathway not followed"),
    TriggerType.EQUITY_FOCUS: _meta(TriggerCategory.EQUITY, "Strong equity performance"),
    TriggerType.EQUITY_NEGLECT: _meta(TriggerCategory.EQUITY, "Equity below threshold"),
    TriggerType.ACCESS_BARRIER: _meta(TriggerCategory.EQUITY, "Access barrier incident"),
    TriggerType.INTERPRETER_USED: _meta(TriggerCategory.EQUITY, "Language support investment"),
    TriggerType.TRIAGE_TIGHTENED: _meta(TriggerCategory.EQUITY, "Triage criteria tightened"),
    TriggerType.VULNERABLE_GROUP_IMPACT: _meta(TriggerCategory.EQUITY, "Vulnerable groups affected"),
    TriggerType.STAFF_WELLBEING_FOCUS: _meta(TriggerCategory.STAFF, "Strong staff wellbeing"),
    TriggerType.STAFF_NEGLECT: _meta(TriggerCategory.STAFF, "Staff wellbeing below threshold"),
    TriggerType.HIGH_SICKNESS: _meta(TriggerCategory.STAFF, "High staff sickness"),
    TriggerType.BURNOUT_RISK: _meta(TriggerCategory.STAFF, "Critical staff sickness"),
    TriggerType.TRAINING_INVESTED: _meta(TriggerCategory.STAFF, "Staff development investment"),
    TriggerType.WORKLOAD_PRESSURE: _meta(TriggerCategory.STAFF, "Workload pressure"),
    TriggerType.RESILIENCE_FOCUS: _meta(TriggerCategory.RESILIENCE, "Strong resilience"),
    TriggerType.RESILIENCE_NEGLECT: _meta(TriggerCategory.RESILIENCE, "Resilience below threshold"),
    TriggerType.GOVERNANCE_IMPROVED: _meta(TriggerCategory.RESILIENCE, "Governance investment"),
    TriggerType.CAPACITY_STRAIN: _meta(TriggerCategory.RESILIENCE, "Capacity strain"),
    TriggerType.BANK_STAFF_USED: _meta(TriggerCategory.RESILIENCE, "Bank or agency staff used"),
    TriggerType.SYSTEM_FRAGILE: _meta(TriggerCategory.RESILIENCE, "Several pillars below threshold"),
    TriggerType.BACKLOG_GROWING: _meta(TriggerCategory.PERFORMANCE, "Backlog growing"),
    TriggerType.BACKLOG_REDUCED: _meta(TriggerCategory.PERFORMANCE, "Backlog reduced"),
    TriggerType.DNA_RATE_HIGH: _meta(TriggerCategory.PERFORMANCE, "High DNA rate"),
    TriggerType.DNA_RATE_IMPROVED: _meta(TriggerCategory.PERFORMANCE, "DNA rate improving"),
    TriggerType.HIGH_RISK_PROPORTION: _meta(TriggerCategory.PERFORMANCE, "High-risk caseload"),
    TriggerType.NEONATAL_ADMISSIONS_HIGH: _meta(TriggerCategory.PERFORMANCE, "Neonatal admissions high"),
    TriggerType.FIRST_CYCLE: _meta(TriggerCategory.LIFECYCLE, "Early game"),
    TriggerType.LEADING_TEAM: _meta(TriggerCategory.POSITION, "Leading the game"),
    TriggerType.STRUGGLING_TEAM: _meta(TriggerCategory.POSITION, "Bottom of the leaderboard"),
    TriggerType.COMEBACK: _meta(TriggerCategory.POSITION, "Comeback to lead"),
    TriggerType.EARLY_LEAD_LOST: _meta(TriggerCategory.POSITION, "Early lead lost"),
    TriggerType.BALANCED_APPROACH: _meta(TriggerCategory.POSITION, "Balanced across pillars"),
    TriggerType.SINGLE_FOCUS: _meta(TriggerCategory.POSITION, "Focused on one pillar"),
}


def trigger_label(trigger: TriggerType) -> str:
    return str(TRIGGER_METADATA[trigger]["label"])


def trigger_category(trigger: TriggerType) -> TriggerCategory:
    category = TRIGGER_METADATA[trigger]["category"]
    assert isinstance(category, TriggerCategory)
    return category


_missing = [t for t in TriggerType if t not in TRIGGER_METADATA]
if _missing:
    raise RuntimeError(f"Missing TRIGGER_METADATA for: {[m.value for m in _missing]}")

_extra = [k for k in TRIGGER_METADATA.keys() if k not in set(TriggerType)]
if _extra:
    raise RuntimeError(f"Extra TRIGGER_METADATA keys: {[e.value for e in _extra]}")
