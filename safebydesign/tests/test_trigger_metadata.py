import pytest

from safebydesign.core.domain.enums import (
    TRIGGER_METADATA,
    TriggerCategory,
    TriggerType,
    trigger_category,
    trigger_label,
)
from safebydesign.core.session.events import OutboundEvent


def test_trigger_metadata_complete():
    assert set(TRIGGER_METADATA.keys()) == set(TriggerType)


def test_trigger_labels_non_empty_and_categories_typed():
    for trigger in TriggerType:
        assert trigger_label(trigger)
        assert isinstance(trigger_category(trigger), TriggerCategory)


def test_first_cycle_is_lifecycle():
    assert trigger_category(TriggerType.FIRST_CYCLE) == TriggerCategory.LIFECYCLE
    assert trigger_category(TriggerType.COMEBACK) == TriggerCategory.POSITION


def test_outbound_event_rejects_unknown_name_and_audience():
    with pytest.raises(ValueError):
        OutboundEvent(name="made_up")
    with pytest.raises(ValueError):
        OutboundEvent(name="game_updated", audience="everyone")
