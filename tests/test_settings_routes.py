import pytest

from estatedesk.models import Office
from estatedesk.security.roles import Role


@pytest.fixture
def office(make_office):
    return make_office(name="Old Name")


@pytest.fixture
def manager_headers(auth_headers, office):
    return auth_headers(Role.MANAGER, office_id=office.id)


def reload(db, office):
    db.session.expire_all()
    return db.session.get(Office, office.id)


# GET /api/settings

def test_settings_returns_subscription_and_payments(client, manager_headers, make_payment, office):
    make_payment(office, authority="abc123")

    response = client.get("/api/settings", headers=manager_headers)

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["office"]["id"] == office.id
    assert data["subscription"]["plan"] == "TRIAL"
    assert data["subscription"]["plan_label"] == "Trial"
    assert [p["authority"] for p in data["payment_records"]] == ["abc123"]


def test_settings_forbidden_for_admins(client, auth_headers):
    response = client.get("/api/settings", headers=auth_headers(Role.SUPER_ADMIN))

    assert response.status_code == 403


def test_settings_forbidden_without_office(client, auth_headers):
    response = client.get("/api/settings", headers=auth_headers(Role.MANAGER))

    assert response.status_code == 403


def test_settings_missing_office(client, auth_headers):
    response = client.get("/api/settings", headers=auth_headers(Role.MANAGER, office_id="gone"))

    assert response.status_code == 404


# PATCH /api/settings

def test_update_office_profile(client, manager_headers, office, db):
    response = client.patch(
        "/api/settings",
        json={
            "name": "New Name",
            "phone": "02112345678",
            "email": "office@example.com",
            "address": "12 Valiasr St",
            "city": "Tehran",
        },
        headers=manager_headers,
    )

    assert response.status_code == 200
    assert response.get_json()["data"]["name"] == "New Name"
    saved = reload(db, office)
    assert (saved.name, saved.phone, saved.email, saved.address, saved.city) == (
        "New Name", "02112345678", "office@example.com", "12 Valiasr St", "Tehran",
    )


def test_update_office_profile_clears_blank_fields(client, manager_headers, office, db):
    office.phone = "09121234567"
    office.email = "office@example.com"
    db.session.commit()

    response = client.patch(
        "/api/settings",
        json={"name": "Old Name", "phone": "", "email": ""},
        headers=manager_headers,
    )

    assert response.status_code == 200
    saved = reload(db, office)
    assert saved.phone is None
    assert saved.email is None
    assert saved.city is None


@pytest.mark.parametrize("body", [
    {},
    {"name": ""},
    {"name": "x" * 101},
    {"name": "Office", "phone": "call me"},
    {"name": "Office", "email": "not-an-email"},
    {"name": "Office", "address": "x" * 501},
    {"name": "Office", "website": "https://example.com"},
])
def test_update_office_profile_validation(client, manager_headers, office, db, body):
    response = client.patch("/api/settings", json=body, headers=manager_headers)

    assert response.status_code == 400
    assert reload(db, office).name == "Old Name"


def test_update_office_profile_forbidden_for_agent(client, auth_headers, office):
    response = client.patch(
        "/api/settings",
        json={"name": "Hijacked"},
        headers=auth_headers(Role.AGENT, office_id=office.id),
    )

    assert response.status_code == 403
