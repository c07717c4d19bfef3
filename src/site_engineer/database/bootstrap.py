from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig
from .mysql_base import new_id

log = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must work whatever DB_NAME points at.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote is not None:
            if ch == quote:
                quote = None
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


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_line_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    log.info("Schema applied from %s", schema_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create (or reset) one demo account per role plus a linked client, site and assignment."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_profile(full_name: str, email: str, password: str, role: str, designation: Optional[str]) -> str:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT id FROM profiles WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE profiles SET full_name=%s, password_hash=%s, role=%s, designation=%s WHERE id=%s",
                    (full_name, password_hash, role, designation, existing["id"]),
                )
                return str(existing["id"])
            profile_id = new_id()
            cur.execute(
                """
                INSERT INTO profiles (id, email, full_name, role, designation, password_hash)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (profile_id, email, full_name, role, designation, password_hash),
            )
            return profile_id

        upsert_profile("Admin Demo", "admin@example.com", "admin123", "admin", "Administrator")
        upsert_profile("HR Demo", "hr@example.com", "hr1234", "hr", "HR Manager")
        engineer_id = upsert_profile("Engineer Demo", "engineer@example.com", "engineer123", "engineer", "Site Engineer")
        client_user_id = upsert_profile("Client Demo", "client@example.com", "client123", "client", None)

        cur.execute("SELECT id FROM clients WHERE user_id=%s", (client_user_id,))
        row = cur.fetchone()
        if row:
            client_id = str(row["id"])
        else:
            client_id = new_id()
            cur.execute(
                """
                INSERT INTO clients (id, name, contact_person, contact_email, address, user_id)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (client_id, "Demo Constructions", "Client Demo", "client@example.com", "1 Demo Street", client_user_id),
            )

        cur.execute("SELECT id FROM sites WHERE client_id=%s LIMIT 1", (client_id,))
        row = cur.fetchone()
        if row:
            site_id = str(row["id"])
        else:
            site_id = new_id()
            cur.execute(
                "INSERT INTO sites (id, client_id, name, location) VALUES (%s, %s, %s, %s)",
                (site_id, client_id, "Demo Tower", "Downtown"),
            )

        cur.execute(
            "SELECT id FROM engineer_assignments WHERE engineer_id=%s AND client_id=%s",
            (engineer_id, client_id),
        )
        if not cur.fetchone():
            cur.execute(
                """
                INSERT INTO engineer_assignments (id, engineer_id, client_id, site_id, assigned_date, is_active)
                VALUES (%s, %s, %s, %s, CURDATE(), 1)
                """,
                (new_id(), engineer_id, client_id, site_id),
            )

        conn.commit()
    finally:
        conn.close()
    log.info("Demo accounts ready")


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
