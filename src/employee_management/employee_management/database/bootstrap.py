from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_EMPLOYEES = (
    # name, email, password, role, department, designation
    ("Admin Demo", "admin@example.com", "admin123", Role.ADMIN, "Human Resources", "HR Manager"),
    ("Jane Employee", "jane@example.com", "employee123", Role.EMPLOYEE, "Engineering", "Software Engineer"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes, skips '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(conn_factory: DatabaseConnection, sql: str) -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(_strip_create_db_and_use(sql)):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    _run_script(conn_factory, Path(schema_path).read_text(encoding="utf-8"))
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    _run_script(conn_factory, Path(seed_path).read_text(encoding="utf-8"))
    logger.info("Applied seed %s", seed_path)


def ensure_demo_employees(db_config: dict) -> None:
    """Create or refresh the demo accounts with real password hashes."""

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def get_id(table: str, id_col: str, name_col: str, value: str) -> int:
            cur.execute(f"SELECT {id_col} AS id FROM {table} WHERE {name_col}=%s", (value,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing {table} row for {name_col}={value}")
            return int(row["id"])

        for name, email, password, role, dept_name, title in DEMO_EMPLOYEES:
            dept_id = get_id("departments", "department_id", "name", dept_name)
            designation_id = get_id("designations", "designation_id", "title", title)
            password_hash = generate_password_hash(password)

            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE employees
                    SET name=%s, password_hash=%s, role=%s, department_id=%s, designation_id=%s, is_active=1
                    WHERE email=%s
                    """,
                    (name, password_hash, role.value, dept_id, designation_id, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees (name, email, password_hash, role, department_id, designation_id)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (name, email, password_hash, role.value, dept_id, designation_id),
                )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
