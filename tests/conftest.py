from __future__ import annotations

from datetime import datetime, timezone

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    """Monday 2025-01-06 09:00 UTC; shifts in tests start at this instant."""
    return datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)
