from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional, Sequence

from .model import ShiftFilter, ShiftRecord
from .repository import ShiftRepository


class InMemoryShiftRepository(ShiftRepository):
    """Thread-safe store for embedding the engine without a database."""

    def __init__(self, records: Sequence[ShiftRecord] = ()):
        self._lock = threading.Lock()
        self._records: dict[int, ShiftRecord] = {r.shift_id: r for r in records}
        self._next_id = max(self._records, default=0) + 1

    def get_by_id(self, shift_id: int) -> Optional[ShiftRecord]:
        with self._lock:
            return self._records.get(int(shift_id))

    def list(self, shift_filter: ShiftFilter) -> Sequence[ShiftRecord]:
        with self._lock:
            items = [r for r in self._records.values() if shift_filter.matches(r)]
        items.sort(key=lambda r: (r.scheduled_start, r.shift_id))
        if shift_filter.limit is not None:
            items = items[: shift_filter.limit]
        return items

    def create(self, record: ShiftRecord) -> ShiftRecord:
        with self._lock:
            stored = replace(record, shift_id=self._next_id, version=1)
            self._records[stored.shift_id] = stored
            self._next_id += 1
            return stored

    def save_if_unchanged(self, record: ShiftRecord, *, expected_version: int) -> Optional[ShiftRecord]:
        with self._lock:
            current = self._records.get(record.shift_id)
            if current is None or current.version != expected_version:
                return None
            stored = replace(record, version=expected_version + 1)
            self._records[stored.shift_id] = stored
            return stored
