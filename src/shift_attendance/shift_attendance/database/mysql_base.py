from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_mysql_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """DATETIME columns hold naive UTC values."""

    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def from_mysql_datetime(value: Any) -> Optional[datetime]:
    """Normalize MySQL DATETIME values back into aware UTC datetimes.

    mysql-connector can return DATETIME as:
    - datetime.datetime (naive)
    - string (e.g. '2026-02-01 08:30:00')
    """

    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    if not isinstance(value, datetime):
        raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_json_column(value: Optional[dict]) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, separators=(",", ":"))


def from_json_column(value: Any) -> Optional[dict]:
    if value is None or value == "":
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)


def optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def optional_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None
