"""Schema and demo-data setup for local environments.

Used by ``scripts/init_db.py``/``scripts/seed_db.py`` and, when
``AUTO_INIT_DB``/``AUTO_SEED_DB`` are set, by ``create_app``.
"""
from __future__ import annotations

import logging
from contextlib import closing
from datetime import date
from pathlib import Path
from typing import Iterator

from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

DEMO_EMPLOYEES = (
    # name, email, password, role, position
    ("Admin Demo", "admin@example.com", "admin123", "admin", "HR Manager"),
    ("Employee Demo", "employee@example.com", "employee123", "employee", "Developer"),
    ("Intern Demo", "intern@example.com", "intern123", "stagiaire", "Intern"),
)


def iter_schema_statements(sql: str) -> Iterator[str]:
    """Split schema.sql into executable statements.

    Statements end with ``;`` at the end of a line. ``--`` comment lines and the
    ``CREATE DATABASE``/``USE`` preamble are dropped so the target schema name
    always comes from ``DB_CONFIG``.
    """
    pending: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        pending.append(line)
        if not stripped.endswith(";"):
            continue

        statement = "\n".join(pending).strip().rstrip(";").strip()
        pending.clear()
        head = statement.split(None, 2)
        if head[0].upper() == "USE" or (len(head) > 1 and head[0].upper() == "CREATE" and head[1].upper() == "DATABASE"):
            continue
        yield statement

    tail = "\n".join(pending).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    with closing(config.open(with_database=False)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = Path(schema_path).read_text(encoding="utf-8")

    with closing(DBConfig.from_dict(db_config).open()) as conn:
        with closing(conn.cursor()) as cur:
            for statement in iter_schema_statements(sql):
                cur.execute(statement)
        conn.commit()
    logger.info("schema applied path=%s", schema_path)


def ensure_demo_employees(db_config: dict) -> None:
    """Create (or reset the credentials of) the demo accounts."""
    with closing(DBConfig.from_dict(db_config).open()) as conn:
        with closing(conn.cursor()) as cur:
            for name, email, password, role, position in DEMO_EMPLOYEES:
                cur.execute(
                    """
                    INSERT INTO employees (name, email, password_hash, role, hire_date, position)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    ON DUPLICATE KEY UPDATE name=VALUES(name), password_hash=VALUES(password_hash),
                        role=VALUES(role), position=VALUES(position)
                    """,
                    (name, email, generate_password_hash(password), role, date.today(), position),
                )
        conn.commit()


def list_tables(db_config: dict) -> list[str]:
    with closing(DBConfig.from_dict(db_config).open()) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute("SHOW TABLES")
            return [row[0] for row in cur.fetchall()]
