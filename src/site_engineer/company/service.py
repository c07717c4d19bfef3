from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..access.scope import require_roles
from ..auth.model import Caller
from ..common.datetime_utils import iso
from ..common.validators import optional_str, require_email, require_hex_color, require_non_empty
from ..core.constants import DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import CompanyProfile
from .repository import CompanyProfileRepository

log = logging.getLogger(__name__)

_REQUEST_KEYS = {
    "companyName": "company_name",
    "brandName": "brand_name",
    "logoUrl": "logo_url",
    "primaryColor": "primary_color",
    "secondaryColor": "secondary_color",
    "supportEmail": "support_email",
    "contactNumber": "contact_number",
    "address": "address",
}
_DEFAULT_COLORS = {"primary_color": DEFAULT_PRIMARY_COLOR, "secondary_color": DEFAULT_SECONDARY_COLOR}
_REQUIRED = ("company_name", "brand_name", "support_email", "contact_number", "address")


def company_view(c: CompanyProfile) -> dict:
    return {
        "id": c.id,
        "companyName": c.company_name,
        "brandName": c.brand_name,
        "logoUrl": c.logo_url,
        "primaryColor": c.primary_color,
        "secondaryColor": c.secondary_color,
        "supportEmail": c.support_email,
        "contactNumber": c.contact_number,
        "address": c.address,
        "createdAt": iso(c.created_at),
        "updatedAt": iso(c.updated_at),
    }


class CompanyProfileService:
    def __init__(self, company: CompanyProfileRepository):
        self._company = company

    def get_profile(self) -> Optional[dict]:
        c = self._company.get()
        return company_view(c) if c else None

    def save_profile(self, caller: Caller, body: Mapping[str, Any]) -> dict:
        require_roles(caller, Role.ADMIN, action="edit the company profile")

        fields: dict[str, Any] = {}
        for key, name in _REQUEST_KEYS.items():
            if key not in body:
                continue
            value = body[key]
            if name in _DEFAULT_COLORS:
                # Blank resets the colour to its default.
                fields[name] = require_hex_color(value, key) if optional_str(value) else _DEFAULT_COLORS[name]
            elif name == "support_email":
                fields[name] = require_email(value, key)
            elif name == "logo_url":
                fields[name] = optional_str(value)
            else:
                fields[name] = require_non_empty(value, key)

        existing = self._company.get()
        if existing is None:
            missing = [k for k, name in _REQUEST_KEYS.items() if name in _REQUIRED and name not in fields]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        elif not fields:
            raise ValidationError("Nothing to update")

        saved = self._company.upsert(fields, updated_by=caller.user_id)
        log.info("Company profile saved by=%s fields=%s", caller.user_id, sorted(fields))
        return company_view(saved)
