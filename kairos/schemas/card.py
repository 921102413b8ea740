"""Pydantic schemas for flashcards."""
from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CardState(IntEnum):
    """Memory state of a card, stored as an integer."""

    New = 0
    Learning = 1
    Review = 2
    Relearning = 3


class Card(BaseModel):
    """Immutable snapshot of a card row."""

    headword: str = Field(min_length=1)
    pinyin: str = ""
    english_definition: str = ""
    chinese_definition: str = ""
    frequency: int = Field(default=0, ge=0)

    stability: float = Field(default=0.0, ge=0)
    difficulty: float = 0.0
    lapses: int = Field(default=0, ge=0)
    state: CardState = CardState.New
    last_review_at: Optional[datetime] = None
    due_at: datetime
    reps: int = Field(default=0, ge=0)
    learning_step: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("pinyin", "english_definition", "chinese_definition", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("frequency", mode="before")
    @classmethod
    def _none_as_zero(cls, value: object) -> object:
        return 0 if value is None else value

    @property
    def is_new(self) -> bool:
        return self.state == CardState.New
