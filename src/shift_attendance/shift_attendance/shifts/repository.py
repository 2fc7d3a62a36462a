from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ShiftFilter, ShiftRecord


class ShiftRepository(Protocol):
    """Shift record store.

    `save_if_unchanged` is the only write path for existing records: it must
    persist `record` atomically iff the stored version still equals
    `expected_version`, so two concurrent clock-ins cannot both succeed.
    """

    def get_by_id(self, shift_id: int) -> Optional[ShiftRecord]:
        raise NotImplementedError

    def list(self, shift_filter: ShiftFilter) -> Sequence[ShiftRecord]:
        raise NotImplementedError

    def create(self, record: ShiftRecord) -> ShiftRecord:
        """Persist a new record; returns it with shift_id and version assigned."""

        raise NotImplementedError

    def save_if_unchanged(self, record: ShiftRecord, *, expected_version: int) -> Optional[ShiftRecord]:
        """Returns the stored record (version bumped), or None when the write lost."""

        raise NotImplementedError
