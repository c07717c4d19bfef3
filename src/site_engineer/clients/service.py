from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..access.scope import build_scope, require_staff
from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..common.datetime_utils import iso
from ..common.validators import optional_str, require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFound, ValidationError
from ..profiles.repository import ProfileRepository
from .model import Client
from .repository import ClientRepository

log = logging.getLogger(__name__)


def client_view(c: Client) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "contactPerson": c.contact_person,
        "email": c.contact_email,
        "phone": c.contact_phone,
        "address": c.address,
        "userId": c.user_id,
        "createdAt": iso(c.created_at),
    }


@dataclass(frozen=True)
class NewClient:
    name: str
    contact_person: str
    contact_email: str
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    user_id: Optional[str] = None


class ClientService:
    def __init__(self, clients: ClientRepository, profiles: ProfileRepository, assignments: AssignmentRepository):
        self._clients = clients
        self._profiles = profiles
        self._assignments = assignments

    def list_clients(self, caller: Caller) -> list[dict]:
        allowed = build_scope(caller, self._assignments).clients.client_ids
        if allowed is not None and not allowed:
            return []
        return [client_view(c) for c in self._clients.list(ids=allowed)]

    def get_client(self, caller: Caller, client_id: str) -> dict:
        scope = build_scope(caller, self._assignments)
        client = self._clients.get_by_id(client_id)
        if client is None or not scope.clients.allows(client_id=client.id):
            raise NotFound("Client not found")
        return client_view(client)

    def create_client(self, caller: Caller, data: NewClient) -> dict:
        require_staff(caller, "create clients")
        name = require_non_empty(data.name, "name")
        contact_person = require_non_empty(data.contact_person, "contactPerson")
        contact_email = require_email(data.contact_email, "email")

        user_id = optional_str(data.user_id)
        if user_id:
            user = self._profiles.get_by_id(user_id)
            if user is None or user.role != Role.CLIENT:
                raise ValidationError("userId must reference a client-role profile")
            if self._clients.get_by_user_id(user_id) is not None:
                raise ValidationError("That user is already linked to a client")

        client = self._clients.create(
            name=name,
            contact_person=contact_person,
            contact_email=contact_email,
            contact_phone=optional_str(data.contact_phone),
            address=optional_str(data.address),
            user_id=user_id,
        )
        log.info("Client created: id=%s by=%s", client.id, caller.user_id)
        return client_view(client)
