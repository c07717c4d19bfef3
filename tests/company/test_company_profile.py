from __future__ import annotations

import pytest

from site_engineer.core.exceptions import AuthorizationError, ValidationError

COMPLETE = {
    "companyName": "Acme Engineering Pvt Ltd",
    "brandName": "Acme",
    "supportEmail": "support@acme.test",
    "contactNumber": "+91 20 5555 0000",
    "address": "12 Ring Road, Pune",
}


def test_no_profile_yet(container):
    assert container.company_service.get_profile() is None


def test_only_admin_saves(container, world):
    with pytest.raises(AuthorizationError):
        container.company_service.save_profile(world.caller(container, world.hr), COMPLETE)


def test_first_save_requires_contact_fields(container, world):
    with pytest.raises(ValidationError) as exc:
        container.company_service.save_profile(world.caller(container, world.admin), {"companyName": "Acme"})
    assert "brandName" in str(exc.value)


def test_save_then_partial_update(container, world):
    admin = world.caller(container, world.admin)
    saved = container.company_service.save_profile(admin, COMPLETE)
    assert saved["primaryColor"] == "#2563eb"

    updated = container.company_service.save_profile(admin, {"primaryColor": "#112233", "secondaryColor": ""})

    assert updated["primaryColor"] == "#112233"
    assert updated["secondaryColor"] == "#1e40af"
    assert updated["companyName"] == COMPLETE["companyName"]
    assert container.company_service.get_profile()["brandName"] == "Acme"


@pytest.mark.parametrize(
    "patch",
    [
        {"primaryColor": "blue"},
        {"supportEmail": "not-an-email"},
        {"companyName": "   "},
        {},
    ],
)
def test_invalid_updates_are_rejected(container, world, patch):
    admin = world.caller(container, world.admin)
    container.company_service.save_profile(admin, COMPLETE)

    with pytest.raises(ValidationError):
        container.company_service.save_profile(admin, patch)


def test_branding_flows_into_email(container, world, transport):
    container.company_service.save_profile(world.caller(container, world.admin), COMPLETE)

    container.check_in_service.check_in(world.caller(container, world.e1))

    assert "Acme Engineering Pvt Ltd" in transport.sent[-1].html
