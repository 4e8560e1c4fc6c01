from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_LEAVE_ENTITLEMENTS

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")
SEED_PATH = Path(__file__).with_name("seed.sql")

DEMO_PASSWORD = "password123"

# (full_name, email, role, department_name, annual_salary)
DEMO_EMPLOYEES = (
    ("Admin User", "admin@hrms.com", "Admin", "Human Resources", 120000),
    ("HR Head", "hr@hrms.com", "HR", "Human Resources", 95000),
    ("Mike Johnson", "manager@hrms.com", "Manager", "Engineering", 110000),
    ("Sarah Lee", "employee@hrms.com", "Employee", "Engineering", 80000),
)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hrms_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on top-level ';'.

    Text inside '...', "..." or `...` is kept whole, including backslash
    escapes; a doubled quote simply closes and reopens the literal.
    """
    start = 0
    quote: Optional[str] = None
    i = 0

    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in iter_sql_statements(_strip_line_comments(sql)):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Optional[str | Path] = None) -> None:
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied to %s@%s/%s", target.user, target.host, target.database)


def apply_seed_sql(db_config: dict, *, seed_path: Optional[str | Path] = None) -> None:
    target = _as_target(db_config)
    sql = _strip_create_db_and_use(Path(seed_path or SEED_PATH).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_employees(db_config: dict) -> None:
    """Upsert the demo accounts and give each one the opening leave balances."""
    target = _as_target(db_config)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def department_id(name: str) -> int:
            cur.execute("SELECT department_id FROM departments WHERE department_name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing departments row for department_name={name}")
            return int(row["department_id"])

        password_hash = generate_password_hash(DEMO_PASSWORD)
        for full_name, email, role, dept_name, salary in DEMO_EMPLOYEES:
            cur.execute(
                """
                INSERT INTO employees(full_name, email, password_hash, role, department_id, status, annual_salary, joined_on)
                VALUES(%s,%s,%s,%s,%s,'Active',%s,'2023-01-15')
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name), password_hash=VALUES(password_hash), role=VALUES(role),
                    department_id=VALUES(department_id), annual_salary=VALUES(annual_salary), status='Active'
                """,
                (full_name, email, password_hash, role, department_id(dept_name), salary),
            )
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            employee_id = int(cur.fetchone()["employee_id"])
            for leave_type, total in DEFAULT_LEAVE_ENTITLEMENTS.items():
                cur.execute(
                    """
                    INSERT IGNORE INTO leave_balances(employee_id, leave_type, total, used, pending)
                    VALUES(%s,%s,%s,0,0)
                    """,
                    (employee_id, leave_type.value, total),
                )

        cur.execute(
            """
            UPDATE departments d
            JOIN employees e ON e.email=%s
            SET d.manager_id=e.employee_id
            WHERE d.department_name='Engineering'
            """,
            ("manager@hrms.com",),
        )

        conn.commit()
    finally:
        conn.close()
    logger.info("demo employees ready (%d accounts)", len(DEMO_EMPLOYEES))


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
