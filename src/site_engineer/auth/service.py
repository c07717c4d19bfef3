from __future__ import annotations

import logging
from datetime import timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..clients.repository import ClientRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_SESSION_DAYS, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import InvalidCredentials, Unauthenticated, ValidationError
from ..profiles.model import Profile
from ..profiles.repository import ProfileRepository
from .model import Caller, Session
from .repository import SessionRepository

log = logging.getLogger(__name__)


def verify_password(password_hash: Optional[str], password: str) -> bool:
    if not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password)
    except (TypeError, ValueError):
        # Placeholder or corrupted hashes in the table.
        return False


class AuthService:
    """Use case: credential check and server-side sessions."""

    def __init__(
        self,
        profiles: ProfileRepository,
        clients: ClientRepository,
        sessions: SessionRepository,
        *,
        session_days: int = DEFAULT_SESSION_DAYS,
        clock: Callable = now_local,
    ):
        self._profiles = profiles
        self._clients = clients
        self._sessions = sessions
        self._session_days = int(session_days)
        self._clock = clock

    def login(self, email: str, password: str) -> tuple[Session, Profile]:
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password must be strings")
        email = email.strip().lower()
        if not email or not password:
            raise ValidationError("Email and password are required")

        profile = self._profiles.get_by_email(email)
        if profile is None or not verify_password(profile.password_hash, password):
            log.info("Login failed for %s", email)
            raise InvalidCredentials("Invalid email or password")

        now = self._clock()
        session = self._sessions.create(
            user_id=profile.id,
            created_at=now,
            expires_at=now + timedelta(days=self._session_days),
        )
        log.info("Login ok: user=%s role=%s", profile.id, profile.role.value)
        return session, profile

    def logout(self, token: Optional[str]) -> None:
        if token:
            self._sessions.destroy(token)

    def current_user(self, token: Optional[str]) -> Profile:
        if not token:
            raise Unauthenticated("Not authenticated")
        session = self._sessions.resolve(token)
        if session is None:
            raise Unauthenticated("Not authenticated")
        if session.is_expired(self._clock()):
            self._sessions.destroy(token)
            raise Unauthenticated("Session expired")
        profile = self._profiles.get_by_id(session.user_id)
        if profile is None:
            self._sessions.destroy(token)
            raise Unauthenticated("Not authenticated")
        return profile

    def caller_for(self, profile: Profile) -> Caller:
        client_id = None
        if profile.role == Role.CLIENT:
            client = self._clients.get_by_user_id(profile.id)
            client_id = client.id if client else None
        return Caller(
            user_id=profile.id,
            role=profile.role,
            full_name=profile.full_name,
            email=profile.email,
            client_id=client_id,
        )

    def resolve_caller(self, token: Optional[str]) -> Caller:
        return self.caller_for(self.current_user(token))

    def change_password(self, caller: Caller, current_password: str, new_password: str) -> None:
        require_non_empty(current_password, "currentPassword")
        require_min_length(new_password, "newPassword", MIN_PASSWORD_LENGTH)

        profile = self._profiles.get_by_id(caller.user_id)
        if profile is None or not verify_password(profile.password_hash, current_password):
            raise InvalidCredentials("Current password is incorrect")

        self._profiles.set_password_hash(profile.id, generate_password_hash(new_password))
        log.info("Password changed: user=%s", profile.id)
