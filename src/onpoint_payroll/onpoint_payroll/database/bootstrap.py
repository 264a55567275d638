"""Schema/seed helpers used by create_app() and scripts/init_db.py."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Union

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

_CREATE_DB = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_DB = re.compile(r"(?im)^\s*USE\b.*?;\s*$")


def _factory(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def split_sql(sql: str) -> Iterator[str]:
    """Yield statements separated by ';' outside quoted strings."""
    buf: list[str] = []
    quote = ""
    escaped = False

    for ch in sql:
        buf.append(ch)
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_file(db_config: dict, path: Union[str, Path]) -> int:
    # The target database name comes from settings, not from the file.
    sql = _USE_DB.sub("", _CREATE_DB.sub("", Path(path).read_text(encoding="utf-8")))

    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        count = 0
        for stmt in split_sql(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        return count
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    ensure_database_exists(db_config)
    count = _run_file(db_config, schema_path)
    logger.info("Applied %d schema statement(s) from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: Union[str, Path]) -> None:
    count = _run_file(db_config, seed_path)
    logger.info("Applied %d seed statement(s) from %s", count, seed_path)


def list_tables(db_config: dict) -> list[str]:
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
