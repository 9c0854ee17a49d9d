from fastapi.testclient import TestClient

from ems.main import app
from ems.models.account_activity import AccountActivity
from tests.helpers import create_account, ensure_roles, headers, seed_org


def test_missing_header_is_unauthorized(db_session):
    client = TestClient(app)
    r = client.get("/me")
    assert r.status_code == 401
    assert r.json()["detail"] == "Unauthorized access. Please login."


def test_unknown_account_is_unauthorized(db_session):
    client = TestClient(app)
    r = client.get("/me", headers=headers("nobody@local.test"))
    assert r.status_code == 401


def test_inactive_account_is_unauthorized(db_session):
    ensure_roles(db_session)
    a = create_account(db_session, "gone@local.test", "Gone", role="Admin")
    a.is_active = False
    db_session.commit()

    client = TestClient(app)
    r = client.get("/me", headers=headers("gone@local.test"))
    assert r.status_code == 401


def test_header_is_case_insensitive(db_session):
    org = seed_org(db_session)
    client = TestClient(app)

    r = client.get("/me", headers=headers("ADMIN@local.test"))
    assert r.status_code == 200
    assert r.json()["roles"] == ["Admin"]
    assert r.json()["employee_id"] == org.admin.id


def test_forbidden_without_role(db_session):
    ensure_roles(db_session)
    create_account(db_session, "user@local.test", "User Local")

    client = TestClient(app)
    r = client.get("/dashboard", headers=headers("user@local.test"))
    assert r.status_code == 403
    assert r.json()["detail"] == "Forbidden: You do not have permission."


def test_any_of_roles(db_session):
    org = seed_org(db_session)
    client = TestClient(app)

    assert client.get("/departments", headers=org.admin_headers).status_code == 200
    assert client.get("/departments", headers=org.manager_headers).status_code == 200
    assert client.get("/departments", headers=org.alice_headers).status_code == 403


def test_requests_are_recorded_as_activity(db_session):
    org = seed_org(db_session)
    client = TestClient(app)

    client.get("/me", headers=org.alice_headers)
    client.get("/employees/profile", headers=org.alice_headers)

    rows = db_session.query(AccountActivity).order_by(AccountActivity.id.asc()).all()
    assert [(r.method, r.path) for r in rows] == [("GET", "/me"), ("GET", "/employees/profile")]


def test_mixed_case_stored_email_signs_in(db_session):
    ensure_roles(db_session)
    create_account(db_session, "Bob@Local.test", "Bob", role="Employee")

    client = TestClient(app)
    r = client.get("/me", headers=headers("bob@local.test"))
    assert r.status_code == 200
    assert r.json()["email"] == "Bob@Local.test"
