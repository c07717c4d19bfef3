from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from werkzeug.security import generate_password_hash

from ..access.scope import build_scope, require_staff
from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..clients.repository import ClientRepository
from ..common.datetime_utils import iso, optional_iso_date
from ..common.validators import optional_str, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFound, ValidationError
from .model import METADATA_FIELDS, Profile
from .repository import ProfileRepository

log = logging.getLogger(__name__)

# camelCase request keys -> Profile fields.
_REQUEST_KEYS = {
    "fullName": "full_name",
    "phone": "phone",
    "designation": "designation",
    "mobileNumber": "mobile_number",
    "alternateNumber": "alternate_number",
    "personalEmail": "personal_email",
    "addressLine1": "address_line1",
    "addressLine2": "address_line2",
    "city": "city",
    "state": "state",
    "country": "country",
    "pincode": "pincode",
    "dateOfBirth": "date_of_birth",
    "gender": "gender",
    "yearsOfExperience": "years_of_experience",
    "skills": "skills",
    "linkedinUrl": "linkedin_url",
    "portfolioUrl": "portfolio_url",
    "reportingManagerId": "reporting_manager_id",
}
_LOCKED_KEYS = {"id", "email", "role", "password", "passwordHash", "createdAt", "updatedAt"}


def profile_view(p: Profile, *, client_id: Optional[str] = None) -> dict:
    view = {
        "id": p.id,
        "email": p.email,
        "fullName": p.full_name,
        "role": p.role.value,
        "phone": p.phone,
        "designation": p.designation,
        "mobileNumber": p.mobile_number,
        "alternateNumber": p.alternate_number,
        "personalEmail": p.personal_email,
        "addressLine1": p.address_line1,
        "addressLine2": p.address_line2,
        "city": p.city,
        "state": p.state,
        "country": p.country,
        "pincode": p.pincode,
        "dateOfBirth": iso(p.date_of_birth),
        "gender": p.gender,
        "yearsOfExperience": p.years_of_experience,
        "skills": p.skills,
        "linkedinUrl": p.linkedin_url,
        "portfolioUrl": p.portfolio_url,
        "reportingManagerId": p.reporting_manager_id,
        "createdAt": iso(p.created_at),
        "updatedAt": iso(p.updated_at),
    }
    if p.role == Role.CLIENT:
        view["clientId"] = client_id
    return view


@dataclass(frozen=True)
class NewProfile:
    email: str
    full_name: str
    role: str
    password: str
    phone: Optional[str] = None
    designation: Optional[str] = None
    client_id: Optional[str] = None
    company_name: Optional[str] = None


class ProfileService:
    def __init__(self, profiles: ProfileRepository, clients: ClientRepository, assignments: AssignmentRepository):
        self._profiles = profiles
        self._clients = clients
        self._assignments = assignments

    def _view(self, p: Profile) -> dict:
        client_id = None
        if p.role == Role.CLIENT:
            client = self._clients.get_by_user_id(p.id)
            client_id = client.id if client else None
        return profile_view(p, client_id=client_id)

    def list_profiles(self, caller: Caller, *, role: Optional[str] = None) -> list[dict]:
        require_staff(caller, "list profiles")
        role_filter = self._parse_role(role) if role else None
        return [self._view(p) for p in self._profiles.list(role=role_filter)]

    def get_profile(self, caller: Caller, profile_id: str) -> dict:
        if profile_id != caller.user_id and not caller.role.is_staff:
            raise AuthorizationError("You can only view your own profile")
        p = self._profiles.get_by_id(profile_id)
        if p is None:
            raise NotFound("Profile not found")
        return self._view(p)

    @staticmethod
    def _parse_role(value: Any) -> Role:
        try:
            return Role(str(value or "").strip().lower())
        except ValueError:
            raise ValidationError("role must be one of admin, hr, engineer, client")

    def create_profile(self, caller: Caller, data: NewProfile) -> dict:
        require_staff(caller, "create profiles")
        role = self._parse_role(data.role)
        if role.is_staff and caller.role != Role.ADMIN:
            raise AuthorizationError("Only admins can create admin or hr accounts")

        email = require_email(data.email).lower()
        full_name = require_non_empty(data.full_name, "fullName")
        password = require_min_length(data.password, "password", MIN_PASSWORD_LENGTH)
        if self._profiles.get_by_email(email) is not None:
            raise ValidationError("Email already registered")

        client = None
        if role == Role.CLIENT and data.client_id:
            client = self._clients.get_by_id(data.client_id)
            if client is None:
                raise ValidationError("clientId does not reference an existing client")
            if client.user_id:
                raise ValidationError("Client already has a login user")

        profile = self._profiles.create(
            email=email,
            full_name=full_name,
            role=role,
            password_hash=generate_password_hash(password),
            phone=optional_str(data.phone),
            designation=optional_str(data.designation),
        )

        if role == Role.CLIENT:
            if client is not None:
                self._clients.link_user(client.id, profile.id)
            else:
                client = self._clients.create(
                    name=optional_str(data.company_name) or full_name,
                    contact_person=full_name,
                    contact_email=email,
                    contact_phone=optional_str(data.phone),
                    user_id=profile.id,
                )

        log.info("Profile created: id=%s role=%s by=%s", profile.id, role.value, caller.user_id)
        return profile_view(profile, client_id=client.id if client else None)

    def update_profile(self, caller: Caller, profile_id: str, body: Mapping[str, Any]) -> dict:
        if profile_id != caller.user_id and not caller.role.is_staff:
            raise AuthorizationError("You can only edit your own profile")

        locked = sorted(set(body) & _LOCKED_KEYS)
        if locked:
            raise ValidationError(f"Fields cannot be changed here: {', '.join(locked)}")
        unknown = sorted(set(body) - set(_REQUEST_KEYS))
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(unknown)}")

        patch = self._clean_patch({_REQUEST_KEYS[k]: v for k, v in body.items()})
        updated = self._profiles.update_metadata(profile_id, patch)
        if updated is None:
            raise NotFound("Profile not found")
        log.info("Profile updated: id=%s fields=%s by=%s", profile_id, sorted(patch), caller.user_id)
        return self._view(updated)

    def _clean_patch(self, raw: Mapping[str, Any]) -> dict:
        patch: dict[str, Any] = {}
        for name, value in raw.items():
            if name not in METADATA_FIELDS:
                continue
            if name == "full_name":
                patch[name] = require_non_empty(value, "fullName")
            elif name == "date_of_birth":
                patch[name] = optional_iso_date(value, "dateOfBirth")
            elif name == "years_of_experience":
                patch[name] = self._years(value)
            elif name == "personal_email":
                patch[name] = require_email(value, "personalEmail") if optional_str(value) else None
            elif name == "reporting_manager_id":
                manager_id = optional_str(value)
                if manager_id and self._profiles.get_by_id(manager_id) is None:
                    raise ValidationError("reportingManagerId does not reference an existing profile")
                patch[name] = manager_id
            else:
                patch[name] = optional_str(value)
        return patch

    @staticmethod
    def _years(value: Any) -> Optional[int]:
        if value is None or value == "":
            return None
        try:
            years = int(value)
        except (TypeError, ValueError):
            raise ValidationError("yearsOfExperience must be a whole number")
        if years < 0:
            raise ValidationError("yearsOfExperience cannot be negative")
        return years

    # -------- Engineers --------
    def list_engineers(self, caller: Caller) -> list[dict]:
        visible = build_scope(caller, self._assignments).engineers
        if visible is not None and not visible:
            return []
        engineers = self._profiles.list(role=Role.ENGINEER, ids=visible)
        return [profile_view(p) for p in engineers]

    def create_engineer(self, caller: Caller, data: NewProfile) -> dict:
        return self.create_profile(
            caller,
            NewProfile(
                email=data.email,
                full_name=data.full_name,
                role=Role.ENGINEER.value,
                password=data.password,
                phone=data.phone,
                designation=data.designation,
            ),
        )
