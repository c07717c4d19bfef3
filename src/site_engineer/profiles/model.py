from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Role

# Self-service profile fields. Role, email and password are not in this set.
METADATA_FIELDS: tuple[str, ...] = (
    "full_name",
    "phone",
    "designation",
    "mobile_number",
    "alternate_number",
    "personal_email",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "country",
    "pincode",
    "date_of_birth",
    "gender",
    "years_of_experience",
    "skills",
    "linkedin_url",
    "portfolio_url",
    "reporting_manager_id",
)


@dataclass(frozen=True)
class Profile:
    """A user account with a role.

    ``password_hash`` never leaves the service layer; views are built without it.
    """

    id: str
    email: str
    full_name: str
    role: Role
    created_at: datetime
    password_hash: Optional[str] = None
    phone: Optional[str] = None
    designation: Optional[str] = None
    mobile_number: Optional[str] = None
    alternate_number: Optional[str] = None
    personal_email: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    pincode: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    years_of_experience: Optional[int] = None
    skills: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    reporting_manager_id: Optional[str] = None
    updated_at: Optional[datetime] = None
