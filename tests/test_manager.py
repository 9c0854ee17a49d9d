from fastapi.testclient import TestClient

from ems.main import app
from ems.models.leave import LeaveRequest
from tests.helpers import FRIDAY, MONDAY, create_leave, get_balance, seed_org


def test_manager_endpoints_require_manager_role(db_session):
    org = seed_org(db_session)
    client = TestClient(app)

    for path in ("/manager/profile", "/manager/approve-list", "/manager/subordinates"):
        assert client.get(path, headers=org.alice_headers).status_code == 403
        assert client.get(path, headers=org.admin_headers).status_code == 403


def test_manager_profile(db_session):
    org = seed_org(db_session)
    client = TestClient(app)

    r = client.get("/manager/profile", headers=org.manager_headers)
    assert r.status_code == 200
    assert r.json()["employee"]["full_name"] == "Max Manager"
    assert r.json()["manager_name"] == "N/A"


def test_subordinates(db_session):
    org = seed_org(db_session)
    client = TestClient(app)

    r = client.get("/manager/subordinates", headers=org.manager_headers)
    assert r.status_code == 200
    assert [e["full_name"] for e in r.json()] == ["Alice Doe"]


def test_approval_flow(db_session):
    org = seed_org(db_session)
    leave = create_leave(db_session, org.alice, MONDAY, FRIDAY)
    client = TestClient(app)

    r = client.get("/manager/approve-list", headers=org.manager_headers)
    assert [l["id"] for l in r.json()] == [leave.id]

    r = client.get(f"/manager/approvals/{leave.id}", headers=org.manager_headers)
    assert r.status_code == 200
    assert r.json()["employee_name"] == "Alice Doe"

    r = client.post(f"/manager/approvals/{leave.id}?status=Approved", headers=org.manager_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Leave status updated successfully."
    assert get_balance(db_session, org.alice).leaves_taken == 5

    r = client.get("/manager/approve-list", headers=org.manager_headers)
    assert r.json() == []


def test_approval_without_status(db_session):
    org = seed_org(db_session)
    leave = create_leave(db_session, org.alice, MONDAY, FRIDAY)
    client = TestClient(app)

    r = client.post(f"/manager/approvals/{leave.id}", headers=org.manager_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Status is required."
    assert db_session.get(LeaveRequest, leave.id).status == "Pending"


def test_approval_details_missing(db_session):
    org = seed_org(db_session)
    client = TestClient(app)

    r = client.get("/manager/approvals/999", headers=org.manager_headers)
    assert r.status_code == 404


def test_approval_status_too_long(db_session):
    org = seed_org(db_session)
    leave = create_leave(db_session, org.alice, MONDAY, FRIDAY)
    client = TestClient(app)

    r = client.post(
        f"/manager/approvals/{leave.id}?status=Escalated%20to%20head%20office%20review",
        headers=org.manager_headers,
    )
    assert r.status_code == 422
