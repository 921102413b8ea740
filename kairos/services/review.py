"""Review workflow: select a due card, reveal it, grade it.

No state is kept between the three phases. The client carries the headword
from one request to the next and every phase re-reads the card from the
store, so the only client input that reaches persisted state is the rating.
"""
from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger

from kairos.core.srs.memory_state import to_algorithm_input
from kairos.core.srs.scheduler import SchedulerAdapter, apply_outcome, parse_rating
from kairos.schemas.card import Card
from kairos.services.card_store import CardStore
from kairos.utils.exceptions import ConsistencyError, NotFoundError, ValidationError


class ReviewService:
    """Drive one card at a time through the review cycle."""

    def __init__(self, store: CardStore, adapter: SchedulerAdapter):
        self.store = store
        self.adapter = adapter

    def select_due(self, now: datetime | None = None) -> Card | None:
        """Return the next due card, or ``None`` when everything is reviewed."""

        card = self.store.find_next_due(now)
        if card is None:
            logger.debug("No cards due for review")
        return card

    def reveal(self, headword: str | None) -> Card | None:
        """Return the full card for ``headword``.

        ``None`` means the caller should go back to :meth:`select_due`.
        """

        if not headword:
            return None
        card = self.store.find_by_headword(headword)
        if card is None:
            logger.info(f"Reveal requested for unknown card {headword!r}")
        return card

    def grade(self, headword: str | None, rating: object, now: datetime | None = None) -> Card:
        """Reschedule ``headword`` according to ``rating`` and persist it."""

        if not headword:
            raise ValidationError("Missing card headword")

        card = self.store.find_by_headword(headword)
        if card is None:
            raise NotFoundError(f"No card for headword {headword!r}")
        if card.headword != headword:
            raise ConsistencyError(
                "Submitted card does not match stored card",
                details={"submitted": headword, "stored": card.headword},
            )

        parsed = parse_rating(rating)
        now = now or datetime.now(timezone.utc)
        outcome = self.adapter.select_outcome(to_algorithm_input(card, now), parsed, now)
        updated = apply_outcome(card, outcome)
        self.store.persist(updated, expected_reps=card.reps)

        logger.info(
            f"Graded {headword!r} as {parsed.name}: {card.state.name} -> {updated.state.name}, "
            f"due {updated.due_at.isoformat()}"
        )
        return updated
