"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from loguru import logger


class KairosError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(KairosError):
    """Malformed, missing or out-of-range input."""
    pass


class NotFoundError(KairosError):
    """No card matches the requested headword."""
    pass


class ConsistencyError(KairosError):
    """Submitted and stored card identity disagree."""
    pass


class ConflictError(KairosError):
    """The card changed between read and write."""
    pass


class StorageError(KairosError):
    """Database operation errors."""
    pass


class ConfigurationError(KairosError):
    """Required startup configuration is missing or invalid."""
    pass


def handle_validation_error(error: ValidationError) -> HTTPException:
    """Handle validation errors."""
    logger.warning(f"Validation error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message,
    )


def handle_not_found_error(error: NotFoundError) -> HTTPException:
    """Handle missing cards."""
    logger.info(f"Card not found: {error.message}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Card not found",
    )


def handle_consistency_error(error: ConsistencyError) -> HTTPException:
    """Handle identity mismatches between the form and the stored card."""
    logger.warning(f"Consistency error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Sync error: refresh page",
    )


def handle_conflict_error(error: ConflictError) -> HTTPException:
    """Handle concurrent updates of the same card."""
    logger.warning(f"Conflict: {error.message}")
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Card was reviewed elsewhere: refresh page",
    )


def handle_storage_error(error: StorageError) -> HTTPException:
    """Handle database errors and return appropriate HTTP response."""
    logger.error(f"Database error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database operation failed. Please try again later.",
    )
