from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from ..geo.geofence import Coordinates
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


def coordinates_from_row(row: Dict[str, Any], prefix: str) -> Optional[Coordinates]:
    """Read a ``<prefix>_lng`` / ``<prefix>_lat`` column pair."""
    lng = row.get(f"{prefix}_lng")
    lat = row.get(f"{prefix}_lat")
    if lng is None or lat is None:
        return None
    return Coordinates(lng=float(lng), lat=float(lat))


def dump_vector(values: Optional[Sequence[float]]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps([float(v) for v in values])


def load_vector(value: Any) -> Optional[list[float]]:
    """Decode a JSON column holding a numeric vector.

    mysql-connector may return JSON columns as str, bytes or already-decoded lists.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return [float(v) for v in value]
