"""Persistence helpers for flashcard rows."""
from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kairos.db.models.entry import Entry
from kairos.schemas.card import Card
from kairos.utils.exceptions import ConflictError, NotFoundError, StorageError


class CardStore:
    """Read and update cards in the ``entries`` table.

    Only the scheduling columns are ever written; display columns belong to
    whatever seeded the table.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_next_due(self, now: datetime | None = None) -> Card | None:
        """Return the due card with the earliest ``due_at``, or ``None``.

        Cards sharing the same ``due_at`` are ordered by headword.
        """

        now = now or datetime.now(timezone.utc)
        stmt = (
            select(Entry)
            .where(Entry.due_at <= now)
            .order_by(Entry.due_at.asc(), Entry.headword.asc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        try:
            entry = self.db.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to load next due card") from exc
        return Card.model_validate(entry) if entry else None

    def find_by_headword(self, headword: str) -> Card | None:
        """Return the card for ``headword``, or ``None`` if there is none."""

        stmt = (
            select(Entry)
            .where(Entry.headword == headword)
            .execution_options(populate_existing=True)
        )
        try:
            entry = self.db.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load card {headword!r}") from exc
        return Card.model_validate(entry) if entry else None

    def persist(self, card: Card, *, expected_reps: int | None = None) -> None:
        """Overwrite the scheduling fields of ``card`` in one transaction.

        When ``expected_reps`` is given the row is only updated if its stored
        review count still matches, otherwise ``ConflictError`` is raised.
        """

        stmt = (
            update(Entry)
            .where(Entry.headword == card.headword)
            .values(
                {
                    Entry.stability: card.stability,
                    Entry.difficulty: card.difficulty,
                    Entry.lapses: card.lapses,
                    Entry.state: int(card.state),
                    Entry.last_review_at: card.last_review_at,
                    Entry.due_at: card.due_at,
                    Entry.reps: card.reps,
                    Entry.learning_step: card.learning_step,
                }
            )
            .execution_options(synchronize_session=False)
        )
        if expected_reps is not None:
            stmt = stmt.where(Entry.reps == expected_reps)

        try:
            result = self.db.execute(stmt)
            if result.rowcount == 1:
                self.db.commit()
                return
            self.db.rollback()
            exists = self.db.scalar(select(Entry.headword).where(Entry.headword == card.headword))
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Failed to save card {card.headword!r}") from exc

        if exists is None:
            raise NotFoundError(f"Card {card.headword!r} no longer exists")
        logger.warning(
            f"Card {card.headword!r} changed since it was read (expected reps={expected_reps})"
        )
        raise ConflictError(
            f"Card {card.headword!r} was updated concurrently",
            details={"expected_reps": expected_reps},
        )
