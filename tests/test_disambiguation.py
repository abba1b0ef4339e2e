"""Tests for the food name confirmation gate."""

import pytest

from nutrivision.domain.errors import (
    AnalysisInProgressError,
    NothingPendingError,
    ValidationFailureError,
)
from nutrivision.domain.meals import MealType
from nutrivision.domain.sessions import GateState
from nutrivision.domain.vision import ConfidentIdentification, UncertainIdentification
from nutrivision.services.disambiguation import DisambiguationGate
from tests.conftest import png_image


def _park_uncertain(gate: DisambiguationGate) -> None:
    gate.route(
        UncertainIdentification(description="I see rice, and what looks like a dal."),
        png_image(),
        MealType.DINNER,
    )


def test_confident_identification_passes_through() -> None:
    gate = DisambiguationGate()

    food = gate.route(
        ConfidentIdentification(title="Thali", description="* **Roti:** Bread."),
        png_image(),
        MealType.LUNCH,
    )

    assert food is not None
    assert food.name == "Thali"
    assert gate.pending is None
    assert gate.state == GateState.IDLE


def test_uncertain_identification_waits_with_suggestion() -> None:
    gate = DisambiguationGate()

    _park_uncertain(gate)

    assert gate.is_awaiting
    assert gate.pending is not None
    assert gate.pending.suggested_name == "dal."
    assert gate.pending.meal_type == MealType.DINNER


def test_confirm_keeps_ai_description() -> None:
    gate = DisambiguationGate()
    _park_uncertain(gate)

    food = gate.confirm("  Moong Dal  ")

    assert food.name == "Moong Dal"
    assert food.description == "I see rice, and what looks like a dal."
    assert food.meal_type == MealType.DINNER
    assert gate.pending is None
    assert gate.state == GateState.CONFIRMED


def test_confirm_rejects_blank_name_and_stays_pending() -> None:
    gate = DisambiguationGate()
    _park_uncertain(gate)

    with pytest.raises(ValidationFailureError):
        gate.confirm("   ")

    assert gate.is_awaiting


def test_confirm_without_pending_item() -> None:
    with pytest.raises(NothingPendingError):
        DisambiguationGate().confirm("Dal")


def test_second_item_cannot_queue_behind_pending() -> None:
    gate = DisambiguationGate()
    _park_uncertain(gate)

    with pytest.raises(AnalysisInProgressError):
        _park_uncertain(gate)


def test_cancel_discards_pending() -> None:
    gate = DisambiguationGate()
    _park_uncertain(gate)

    assert gate.cancel() is True
    assert gate.state == GateState.CANCELLED
    assert gate.pending is None
    assert gate.cancel() is False


def test_reopen_prefills_last_name() -> None:
    gate = DisambiguationGate()
    _park_uncertain(gate)
    food = gate.confirm("Moong Dal")

    gate.reopen(food)

    assert gate.is_awaiting
    assert gate.pending is not None
    assert gate.pending.suggested_name == "Moong Dal"


def test_settle_returns_handled_states_to_idle() -> None:
    gate = DisambiguationGate()
    _park_uncertain(gate)

    gate.settle()
    assert gate.state == GateState.AWAITING_CONFIRMATION

    gate.confirm("Moong Dal")
    gate.settle()
    assert gate.state == GateState.IDLE

    _park_uncertain(gate)
    gate.cancel()
    gate.settle()
    assert gate.state == GateState.IDLE
