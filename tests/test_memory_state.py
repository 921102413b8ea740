"""Tests for mapping cards onto scheduler input."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from kairos.core.srs.memory_state import (
    days_between,
    round_half_up,
    to_algorithm_input,
)
from kairos.schemas.card import Card, CardState
from kairos.utils.exceptions import ValidationError

T0 = datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)


def make_card(**fields) -> Card:
    values = {"headword": "学习", "due_at": T0}
    values.update(fields)
    return Card(**values)


def test_scheduled_days_for_exact_interval() -> None:
    card = make_card(last_review_at=T0, due_at=T0 + timedelta(days=3), state=CardState.Review)

    state = to_algorithm_input(card, T0 + timedelta(days=3, hours=5))

    assert state.scheduled_days == 3
    assert state.elapsed_days == 3


def test_scheduled_days_round_half_up() -> None:
    card = make_card(last_review_at=T0, due_at=T0 + timedelta(days=2, hours=12))

    assert to_algorithm_input(card, T0).scheduled_days == 3


def test_scheduled_days_round_down_below_half() -> None:
    card = make_card(last_review_at=T0, due_at=T0 + timedelta(days=2, hours=11))

    assert to_algorithm_input(card, T0).scheduled_days == 2


def test_elapsed_days_truncates_partial_days() -> None:
    card = make_card(last_review_at=T0, due_at=T0 + timedelta(days=1))

    assert to_algorithm_input(card, T0 + timedelta(days=1, hours=23)).elapsed_days == 1


def test_elapsed_days_never_negative() -> None:
    card = make_card(last_review_at=T0, due_at=T0 + timedelta(days=1))

    assert to_algorithm_input(card, T0 - timedelta(days=2)).elapsed_days == 0


@pytest.mark.parametrize("last_review", [None, datetime(1, 1, 1)])
def test_never_reviewed_card_maps_to_first_review(last_review) -> None:
    card = make_card(last_review_at=last_review, due_at=T0 - timedelta(days=1))

    state = to_algorithm_input(card, T0)

    assert state.elapsed_days == 0
    assert state.scheduled_days == 0
    assert state.last_review_at is None
    assert state.state == CardState.New


def test_memory_fields_carried_through() -> None:
    card = make_card(
        stability=12.5,
        difficulty=6.25,
        reps=7,
        lapses=2,
        state=CardState.Relearning,
        learning_step=0,
        last_review_at=T0,
        due_at=T0 + timedelta(minutes=10),
    )

    state = to_algorithm_input(card, T0 + timedelta(minutes=15))

    assert state.stability == 12.5
    assert state.difficulty == 6.25
    assert state.reps == 7
    assert state.lapses == 2
    assert state.state == CardState.Relearning
    assert state.learning_step == 0
    assert state.last_review_at == T0


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = T0.replace(tzinfo=None)
    card = make_card(last_review_at=naive, due_at=naive + timedelta(days=4))

    state = to_algorithm_input(card, T0 + timedelta(days=4))

    assert state.scheduled_days == 4
    assert state.elapsed_days == 4
    assert state.due_at.tzinfo == timezone.utc
    assert state.last_review_at == T0


def test_malformed_now_is_rejected() -> None:
    with pytest.raises(ValidationError):
        to_algorithm_input(make_card(), "yesterday")  # type: ignore[arg-type]


def test_rounding_helpers() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.49) == 0
    assert round_half_up(-2.5) == -3
    assert days_between(T0, T0 + timedelta(hours=36)) == pytest.approx(1.5)
