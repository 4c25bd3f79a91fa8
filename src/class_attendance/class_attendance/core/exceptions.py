from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .enums import DenialReason

if TYPE_CHECKING:
    from ..timetable.model import TimetableSlot


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when a slot's start time is not strictly before its end time."""


class ConflictError(DomainError):
    """Raised when a proposed slot overlaps an existing one on the same class/day."""

    def __init__(self, message: str, *, slot: "TimetableSlot"):
        super().__init__(message)
        self.slot = slot


class NotFoundError(DomainError):
    """Raised when a referenced slot, class or notice does not exist."""


class DeniedError(DomainError):
    """Raised when the attendance gate refuses to authorize a mark."""

    def __init__(self, reason: DenialReason, message: Optional[str] = None):
        super().__init__(message or reason.value)
        self.reason = reason


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
