from __future__ import annotations

from typing import Any, Collection, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    build_where,
    db_cursor,
    fetchall,
    fetchone,
    in_clause,
    is_duplicate_key,
    new_id,
    patch_assignments,
)
from .model import METADATA_FIELDS, Profile
from .repository import ProfileRepository

_COLUMNS = """
    id, email, full_name, role, password_hash, phone, designation,
    mobile_number, alternate_number, personal_email, address_line1, address_line2,
    city, state, country, pincode, date_of_birth, gender, years_of_experience,
    skills, linkedin_url, portfolio_url, reporting_manager_id, created_at, updated_at
"""

_PATCHABLE = {name: name for name in METADATA_FIELDS}


def _to_profile(r: dict) -> Profile:
    years = r.get("years_of_experience")
    return Profile(
        id=str(r["id"]),
        email=r["email"],
        full_name=r["full_name"],
        role=Role(r["role"]),
        created_at=r["created_at"],
        password_hash=r.get("password_hash"),
        phone=r.get("phone"),
        designation=r.get("designation"),
        mobile_number=r.get("mobile_number"),
        alternate_number=r.get("alternate_number"),
        personal_email=r.get("personal_email"),
        address_line1=r.get("address_line1"),
        address_line2=r.get("address_line2"),
        city=r.get("city"),
        state=r.get("state"),
        country=r.get("country"),
        pincode=r.get("pincode"),
        date_of_birth=r.get("date_of_birth"),
        gender=r.get("gender"),
        years_of_experience=int(years) if years is not None else None,
        skills=r.get("skills"),
        linkedin_url=r.get("linkedin_url"),
        portfolio_url=r.get("portfolio_url"),
        reporting_manager_id=r.get("reporting_manager_id"),
        updated_at=r.get("updated_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (str(profile_id),))
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM profiles WHERE LOWER(email)=%s LIMIT 1",
                ((email or "").strip().lower(),),
            )
            r = fetchone(cur)
            return _to_profile(r) if r else None

    def list(
        self,
        *,
        role: Optional[Role] = None,
        ids: Optional[Collection[str]] = None,
        limit: int = 500,
    ) -> Sequence[Profile]:
        filters = []
        if role is not None:
            filters.append(("role=%s", [role.value]))
        if ids is not None:
            filters.append(in_clause("id", sorted(ids)))
        where, params = build_where(filters)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM profiles WHERE {where} ORDER BY created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_profile(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        email: str,
        full_name: str,
        role: Role,
        password_hash: str,
        phone: Optional[str] = None,
        designation: Optional[str] = None,
    ) -> Profile:
        profile_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO profiles(id, email, full_name, role, password_hash, phone, designation)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (profile_id, email.strip().lower(), full_name, role.value, password_hash, phone, designation),
                )
            except IntegrityError as e:
                if is_duplicate_key(e):
                    raise ValidationError("Email already registered") from e
                raise
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (profile_id,))
            return _to_profile(fetchone(cur))

    def update_metadata(self, profile_id: str, patch: Mapping[str, Any]) -> Optional[Profile]:
        assignments, params = patch_assignments(patch, _PATCHABLE)
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock keeps concurrent edits of the same profile serialized.
            cur.execute("SELECT id FROM profiles WHERE id=%s FOR UPDATE", (str(profile_id),))
            if not fetchone(cur):
                return None
            if assignments:
                cur.execute(
                    f"UPDATE profiles SET {assignments} WHERE id=%s",
                    tuple(params + [str(profile_id)]),
                )
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (str(profile_id),))
            return _to_profile(fetchone(cur))

    def set_password_hash(self, profile_id: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET password_hash=%s WHERE id=%s",
                (password_hash, str(profile_id)),
            )
            return cur.rowcount > 0
