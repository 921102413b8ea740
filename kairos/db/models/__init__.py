"""Database models package."""
from kairos.db.models.entry import Entry

__all__ = ["Entry"]
