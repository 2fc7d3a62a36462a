from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role as decided by the upstream identity layer."""

    WORKER = "worker"
    EMPLOYER = "employer"


class ShiftStatus(str, Enum):
    """Lifecycle of a shift record, stored as-is in the database."""

    SCHEDULED = "scheduled"
    CLOCKED_IN = "clocked-in"
    COMPLETED = "completed"
    MISSED = "missed"


class LocationSource(str, Enum):
    """Where a shift's geofence snapshot was taken from."""

    EXPLICIT = "explicit"
    EMPLOYMENT = "employment"
    JOB = "job"
    BUSINESS = "business"


class EmploymentStatus(str, Enum):
    ACTIVE = "active"
    TERMINATED = "terminated"
    RESIGNED = "resigned"
    COMPLETED = "completed"
