from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.constants import DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, new_id, patch_assignments
from .model import EDITABLE_FIELDS, CompanyProfile
from .repository import CompanyProfileRepository

_COLUMNS = """
    id, company_name, brand_name, logo_url, primary_color, secondary_color,
    support_email, contact_number, address, created_at, updated_at, updated_by
"""

_PATCHABLE = {name: name for name in EDITABLE_FIELDS}


def _to_company(r: dict) -> CompanyProfile:
    return CompanyProfile(
        id=str(r["id"]),
        company_name=r["company_name"],
        brand_name=r["brand_name"],
        support_email=r["support_email"],
        contact_number=r["contact_number"],
        address=r["address"],
        created_at=r["created_at"],
        logo_url=r.get("logo_url"),
        primary_color=r.get("primary_color") or DEFAULT_PRIMARY_COLOR,
        secondary_color=r.get("secondary_color") or DEFAULT_SECONDARY_COLOR,
        updated_at=r.get("updated_at"),
        updated_by=r.get("updated_by"),
    )


class MySQLCompanyProfileRepository(CompanyProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[CompanyProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM company_profiles ORDER BY created_at LIMIT 1")
            r = fetchone(cur)
            return _to_company(r) if r else None

    def upsert(self, fields: Mapping[str, Any], *, updated_by: str) -> CompanyProfile:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM company_profiles ORDER BY created_at LIMIT 1 FOR UPDATE")
            existing = fetchone(cur)
            if existing:
                profile_id = str(existing["id"])
                assignments, params = patch_assignments(fields, _PATCHABLE)
                assignments = f"{assignments}, updated_by=%s" if assignments else "updated_by=%s"
                cur.execute(
                    f"UPDATE company_profiles SET {assignments} WHERE id=%s",
                    tuple(params + [str(updated_by), profile_id]),
                )
            else:
                profile_id = new_id()
                cur.execute(
                    """
                    INSERT INTO company_profiles(
                        id, company_name, brand_name, logo_url, primary_color, secondary_color,
                        support_email, contact_number, address, updated_by
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        profile_id,
                        fields["company_name"],
                        fields["brand_name"],
                        fields.get("logo_url"),
                        fields.get("primary_color") or DEFAULT_PRIMARY_COLOR,
                        fields.get("secondary_color") or DEFAULT_SECONDARY_COLOR,
                        fields["support_email"],
                        fields["contact_number"],
                        fields["address"],
                        str(updated_by),
                    ),
                )
            cur.execute(f"SELECT {_COLUMNS} FROM company_profiles WHERE id=%s", (profile_id,))
            return _to_company(fetchone(cur))
