from __future__ import annotations

import uuid
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

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


def new_id() -> str:
    return str(uuid.uuid4())


def as_float(value: Any) -> Optional[float]:
    """DECIMAL columns come back as Decimal; records carry floats."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return float(value)
    return float(value)


def in_clause(column: str, values: Sequence[Any]) -> tuple[str, list[Any]]:
    """Build `column IN (%s, ...)`; an empty list matches nothing."""
    if not values:
        return "1=0", []
    return f"{column} IN ({', '.join(['%s'] * len(values))})", list(values)


def build_where(filters: Iterable[tuple[str, list[Any]]]) -> tuple[str, list[Any]]:
    clauses = ["1=1"]
    params: list[Any] = []
    for clause, clause_params in filters:
        clauses.append(clause)
        params.extend(clause_params)
    return " AND ".join(clauses), params


def patch_assignments(patch: Mapping[str, Any], allowed: Mapping[str, str]) -> tuple[str, list[Any]]:
    """Translate a field patch into `col=%s, ...` using an allow-list of field->column."""
    parts: list[str] = []
    params: list[Any] = []
    for field_name, value in patch.items():
        column = allowed.get(field_name)
        if column is None:
            continue
        parts.append(f"{column}=%s")
        params.append(value)
    return ", ".join(parts), params


def is_duplicate_key(error: Exception) -> bool:
    """True for a unique-key violation (MySQL 1062)."""
    return isinstance(error, IntegrityError) and error.errno == errorcode.ER_DUP_ENTRY
