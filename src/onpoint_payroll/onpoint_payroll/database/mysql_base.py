from __future__ import annotations

import json
from contextlib import contextmanager
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


def load_json_column(value: Any) -> Any:
    """Normalize MySQL JSON values across connector implementations.

    mysql-connector can return JSON columns as:
    - str
    - bytes / bytearray
    - already-decoded list/dict (some pure-python builds)
    """

    if value is None:
        return None

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        return json.loads(value)

    if isinstance(value, (list, dict)):
        return value

    raise TypeError(f"Unsupported MySQL JSON value type: {type(value)!r}")
