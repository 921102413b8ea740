"""Pydantic schemas package."""

from kairos.schemas.card import Card, CardState

__all__ = ["Card", "CardState"]
