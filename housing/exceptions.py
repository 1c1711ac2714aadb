"""Custom exception hierarchy for the housing listings core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from housing.models import Flat


class ListingsError(Exception):
    """Base exception for all listings errors."""


class ForbiddenError(ListingsError):
    """Raised when the caller's role does not allow the operation."""


class NotFoundError(ListingsError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(NotFoundError):
    """Raised when a flat references a house that does not exist."""


class ConflictError(ListingsError):
    """Raised when a uniqueness invariant would be violated."""


class InvalidPayloadError(ListingsError):
    """Raised when an entity payload has missing or out-of-range fields."""


class ConfigurationError(ListingsError):
    """Raised when configuration is invalid or missing."""


class StoreError(ListingsError):
    """Raised when the underlying store fails a query or connection."""


class ConstraintViolationError(StoreError):
    """Raised when the store rejects a row on a schema constraint."""


class SchemaError(StoreError):
    """Raised when schema bootstrap fails."""


class PartialSuccessError(ListingsError):
    """Raised when a flat was persisted but its house timestamp was not bumped.

    The flat is durable: callers must not create it again, only retry the
    timestamp touch (``ListingService.touch_house``).
    """

    def __init__(self, message: str, flat: Flat, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.flat = flat
        self.cause = cause
