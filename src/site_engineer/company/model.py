from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_PRIMARY_COLOR, DEFAULT_SECONDARY_COLOR

EDITABLE_FIELDS: tuple[str, ...] = (
    "company_name",
    "brand_name",
    "logo_url",
    "primary_color",
    "secondary_color",
    "support_email",
    "contact_number",
    "address",
)


@dataclass(frozen=True)
class CompanyProfile:
    """Singleton branding/contact record used by the UI and email templates."""

    id: str
    company_name: str
    brand_name: str
    support_email: str
    contact_number: str
    address: str
    created_at: datetime
    logo_url: Optional[str] = None
    primary_color: str = DEFAULT_PRIMARY_COLOR
    secondary_color: str = DEFAULT_SECONDARY_COLOR
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
