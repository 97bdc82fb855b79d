from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Mapping

from .connection import DatabaseConnection
from .mysql_base import db_cursor

log = logging.getLogger(__name__)

# Quoted strings, line comments, or anything up to the next ';'.
_TOKEN = re.compile(r"""'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|--[^\n]*|#[^\n]*|;|[^'"#;-]+|-""", re.S)
_DB_SCOPED = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.I)


def split_statements(sql: str) -> Iterator[str]:
    """Split a .sql script into statements, ignoring ';' inside quotes and comments."""

    parts: list[str] = []
    for token in _TOKEN.findall(sql):
        if token.startswith(("--", "#")):
            continue
        if token == ";":
            stmt = "".join(parts).strip()
            parts.clear()
            if stmt and not _DB_SCOPED.match(stmt):
                yield stmt
            continue
        parts.append(token)

    stmt = "".join(parts).strip()
    if stmt and not _DB_SCOPED.match(stmt):
        yield stmt


def _run_script(db_config: Mapping, path: str | Path) -> int:
    # Scripts never pick the database; the configured one is used.
    statements = list(split_statements(Path(path).read_text(encoding="utf-8")))
    with db_cursor(DatabaseConnection.from_dict(db_config), dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)
    return len(statements)


def ensure_database_exists(db_config: Mapping) -> None:
    factory = DatabaseConnection.from_dict(db_config)
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    log.info("applied %d schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    log.info("applied %d seed statements from %s", count, seed_path)


def list_tables(db_config: Mapping) -> list[str]:
    with db_cursor(DatabaseConnection.from_dict(db_config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
