"""FSRS scheduling adapter.

The memory model itself lives in the ``fsrs`` package. This module wraps it
behind :class:`SchedulingAlgorithm`, which returns one candidate outcome per
rating, and applies the selected outcome back onto a :class:`Card`.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Mapping, Protocol

from fsrs import Card as FSRSCard
from fsrs import Rating, Scheduler, State

from kairos.core.srs.memory_state import (
    AlgorithmCardState,
    days_between,
    ensure_utc,
    round_half_up,
)
from kairos.schemas.card import Card, CardState
from kairos.utils.exceptions import ValidationError

RATINGS: tuple[Rating, ...] = tuple(Rating)


@dataclass(frozen=True, slots=True)
class SchedulingOutcome:
    """Candidate post-review state for a single rating."""

    stability: float
    difficulty: float
    state: CardState
    learning_step: int | None
    lapses: int
    last_review_at: datetime
    due_at: datetime
    reps: int
    scheduled_days: int


class SchedulingAlgorithm(Protocol):
    """Anything that can schedule a card for every rating at once."""

    def schedule_all(
        self, state: AlgorithmCardState, now: datetime
    ) -> Mapping[Rating, SchedulingOutcome]:
        ...


def parse_rating(raw: object) -> Rating:
    """Parse a user-supplied rating into the closed :class:`Rating` set."""

    if isinstance(raw, Rating):
        return raw
    if raw is None or isinstance(raw, bool):
        raise ValidationError("Invalid rating", details={"rating": raw})
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise ValidationError("Invalid rating", details={"rating": raw})
    try:
        value = int(raw)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise ValidationError("Invalid rating", details={"rating": raw}) from exc
    if isinstance(raw, float) and raw != value:
        raise ValidationError("Invalid rating", details={"rating": raw})
    try:
        return Rating(value)
    except ValueError as exc:
        lowest, highest = min(RATINGS), max(RATINGS)
        raise ValidationError(
            f"Rating must be between {int(lowest)} and {int(highest)} inclusive",
            details={"rating": value},
        ) from exc


class FSRSAlgorithm:
    """:class:`SchedulingAlgorithm` backed by ``fsrs.Scheduler``."""

    def __init__(
        self,
        *,
        desired_retention: float = 0.9,
        maximum_interval_days: int = 36500,
        learning_steps: Iterable[timedelta] = (timedelta(minutes=1), timedelta(minutes=10)),
        relearning_steps: Iterable[timedelta] = (timedelta(minutes=10),),
        enable_fuzzing: bool = False,
    ) -> None:
        self.scheduler = Scheduler(
            desired_retention=desired_retention,
            learning_steps=tuple(learning_steps),
            relearning_steps=tuple(relearning_steps),
            maximum_interval=maximum_interval_days,
            enable_fuzzing=enable_fuzzing,
        )

    @classmethod
    def from_settings(cls, settings) -> "FSRSAlgorithm":
        return cls(
            desired_retention=settings.FSRS_DESIRED_RETENTION,
            maximum_interval_days=settings.FSRS_MAXIMUM_INTERVAL_DAYS,
            learning_steps=[timedelta(minutes=m) for m in settings.FSRS_LEARNING_STEPS_MINUTES],
            relearning_steps=[
                timedelta(minutes=m) for m in settings.FSRS_RELEARNING_STEPS_MINUTES
            ],
            enable_fuzzing=settings.FSRS_ENABLE_FUZZING,
        )

    def _to_fsrs_card(self, state: AlgorithmCardState) -> FSRSCard:
        has_memory = state.stability > 0 and state.difficulty > 0
        if state.state == CardState.New or not has_memory:
            return FSRSCard(
                card_id=1,
                state=State.Learning,
                step=0,
                due=state.due_at,
                last_review=None,
            )

        fsrs_state = State(int(state.state))
        # NULL steps on (re)learning rows restart at the first step
        step = None if fsrs_state == State.Review else (state.learning_step or 0)
        return FSRSCard(
            card_id=1,
            state=fsrs_state,
            step=step,
            stability=state.stability,
            difficulty=state.difficulty,
            due=state.due_at,
            last_review=state.last_review_at,
        )

    def schedule_all(
        self, state: AlgorithmCardState, now: datetime
    ) -> dict[Rating, SchedulingOutcome]:
        now = ensure_utc(now)
        outcomes: dict[Rating, SchedulingOutcome] = {}
        for rating in RATINGS:
            reviewed, _ = self.scheduler.review_card(
                self._to_fsrs_card(state), rating, review_datetime=now
            )
            lapses = state.lapses
            if rating == Rating.Again and state.state == CardState.Review:
                lapses += 1
            last_review_at = reviewed.last_review or now
            outcomes[rating] = SchedulingOutcome(
                stability=float(reviewed.stability),
                difficulty=float(reviewed.difficulty),
                state=CardState(int(reviewed.state)),
                learning_step=reviewed.step,
                lapses=lapses,
                last_review_at=last_review_at,
                due_at=reviewed.due,
                reps=state.reps + 1,
                scheduled_days=round_half_up(days_between(last_review_at, reviewed.due)),
            )
        return outcomes


class SchedulerAdapter:
    """Select the outcome for one rating from a :class:`SchedulingAlgorithm`."""

    def __init__(self, algorithm: SchedulingAlgorithm):
        self.algorithm = algorithm

    def select_outcome(
        self, state: AlgorithmCardState, rating: object, now: datetime
    ) -> SchedulingOutcome:
        rating = parse_rating(rating)
        outcomes = self.algorithm.schedule_all(state, now)
        return outcomes[rating]


def apply_outcome(card: Card, outcome: SchedulingOutcome) -> Card:
    """Return a copy of ``card`` carrying the scheduling fields of ``outcome``."""

    return card.model_copy(
        update={
            "stability": outcome.stability,
            "difficulty": outcome.difficulty,
            "state": outcome.state,
            "learning_step": outcome.learning_step,
            "lapses": outcome.lapses,
            "last_review_at": outcome.last_review_at,
            "due_at": outcome.due_at,
            "reps": outcome.reps,
        }
    )
