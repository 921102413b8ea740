"""Flashcard entry database model."""
from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from kairos.db.base import Base


class Entry(Base):
    """A vocabulary card together with its scheduling state."""

    __tablename__ = "entries"

    headword = Column(String(255), primary_key=True)
    pinyin = Column(String(255), nullable=False, default="")
    english_definition = Column(Text, nullable=False, default="")
    chinese_definition = Column(Text, nullable=False, default="")
    frequency = Column("freq", Integer, nullable=True)

    stability = Column(Float, nullable=False, default=0.0)
    difficulty = Column(Float, nullable=False, default=0.0)
    lapses = Column(Integer, nullable=False, default=0)
    state = Column(Integer, nullable=False, default=0)
    last_review_at = Column("last_review", DateTime(timezone=True), nullable=True)
    due_at = Column(DateTime(timezone=True), nullable=False, index=True)
    reps = Column("reps_ct", Integer, nullable=False, default=0)
    learning_step = Column(Integer, nullable=True)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Entry headword={self.headword!r} state={self.state!r} due_at={self.due_at!r}>"
