"""Review API package."""
