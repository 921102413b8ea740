"""Conversion of stored cards into scheduler input.

The scheduler works on whole-day counters and timezone-aware UTC datetimes,
while stored rows may carry naive timestamps and a missing last review for
cards that have never been graded.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone

from kairos.schemas.card import Card, CardState
from kairos.utils.exceptions import ValidationError

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True, slots=True)
class AlgorithmCardState:
    """Card memory state in the scheduler's conventions."""

    stability: float
    difficulty: float
    elapsed_days: int
    scheduled_days: int
    reps: int
    lapses: int
    state: CardState
    learning_step: int | None
    last_review_at: datetime | None
    due_at: datetime


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime; naive values are taken as UTC."""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""

    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def days_between(start: datetime, end: datetime) -> float:
    """Return the signed number of days from ``start`` to ``end``."""

    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / SECONDS_PER_DAY


def _is_unset(dt: datetime | None) -> bool:
    # Rows migrated from systems without NULLs may carry year 1 as "never".
    return dt is None or dt.year <= 1


def _checked_timestamp(name: str, value: object, *, required: bool) -> datetime | None:
    if value is None:
        if required:
            raise ValidationError(f"Card is missing {name}")
        return None
    if not isinstance(value, datetime):
        raise ValidationError(f"{name} is not a timestamp: {value!r}")
    return value


def to_algorithm_input(card: Card, now: datetime) -> AlgorithmCardState:
    """Map ``card`` to the scheduler's input representation at ``now``."""

    due_at = _checked_timestamp("due_at", card.due_at, required=True)
    last_review_at = _checked_timestamp("last_review_at", card.last_review_at, required=False)
    now = _checked_timestamp("now", now, required=True)

    if _is_unset(last_review_at):
        last_review_at = None
        elapsed_days = 0
        scheduled_days = 0
    else:
        last_review_at = ensure_utc(last_review_at)
        elapsed_days = max(0, int(days_between(last_review_at, now)))
        scheduled_days = round_half_up(days_between(last_review_at, due_at))

    return AlgorithmCardState(
        stability=float(card.stability),
        difficulty=float(card.difficulty),
        elapsed_days=elapsed_days,
        scheduled_days=scheduled_days,
        reps=int(card.reps),
        lapses=int(card.lapses),
        state=CardState(card.state),
        learning_step=card.learning_step,
        last_review_at=last_review_at,
        due_at=ensure_utc(due_at),
    )
