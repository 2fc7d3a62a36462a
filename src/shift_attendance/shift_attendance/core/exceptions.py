from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a shift, worker or job does not exist."""

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ForbiddenError(DomainError):
    """Raised when a worker acts on a shift that is not theirs."""


class InvalidStateError(DomainError):
    """Raised when an action is not allowed in the shift's current status."""

    def __init__(self, message: str, *, current_status: Optional[str] = None):
        super().__init__(message)
        self.current_status = current_status


class ConcurrentUpdateError(InvalidStateError):
    """Raised when conditional writes keep losing to other writers."""


class PreconditionFailedError(DomainError):
    """Raised when a shift has no resolvable geofence (operator must configure one)."""


class LocationRejectedError(DomainError):
    """Raised when the reported position lies outside the allowed radius."""

    def __init__(self, message: str, *, distance_meters: float, allowed_radius: float):
        super().__init__(message)
        self.distance_meters = distance_meters
        self.allowed_radius = allowed_radius
