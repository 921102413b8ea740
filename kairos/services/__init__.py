"""Service layer package."""

from kairos.services.card_store import CardStore
from kairos.services.review import ReviewService

__all__ = ["CardStore", "ReviewService"]
