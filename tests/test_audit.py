"""
Tests for the audit, activity, dashboard and role catalog endpoints.
"""

from fastapi.testclient import TestClient
from ems.main import app

from tests.helpers import (
    FRIDAY,
    MONDAY,
    create_department,
    create_employee,
    create_leave,
    seed_org,
)


def test_department_audit_trail(db_session):
    """Test department logs are written through the department lifecycle"""
    org = seed_org(db_session)
    client = TestClient(app)

    r = client.post("/departments", json={"name": "Sales"}, headers=org.admin_headers)
    dept_id = r.json()["id"]
    client.put(f"/departments/{dept_id}", json={"id": dept_id, "name": "Sales EU"}, headers=org.admin_headers)

    response = client.get(
        "/audit/departments",
        headers=org.admin_headers,
        params={"department_id": dept_id},
    )
    assert response.status_code == 200
    logs = response.json()
    # newest first
    assert [l["operation"] for l in logs] == ["Updated", "Created"]
    assert logs[0]["department_name"] == "Sales EU"
    assert logs[1]["department_name"] == "Sales"
    assert logs[0]["actor_account_id"] is not None


def test_employee_audit_trail(db_session):
    """Test employee logs snapshot the record at each change"""
    org = seed_org(db_session)
    client = TestClient(app)

    r = client.post(
        "/employees",
        json={
            "full_name": "Bob Builder",
            "email": "bob@local.test",
            "role": "Employee",
            "department_id": org.eng.id,
            "leave_balance": 10,
        },
        headers=org.admin_headers,
    )
    emp = r.json()
    emp_payload = {k: emp[k] for k in ("id", "full_name", "email", "phone_number", "role", "is_active", "department_id", "leave_balance")}
    emp_payload["full_name"] = "Robert Builder"
    client.put(f"/employees/{emp['id']}", json=emp_payload, headers=org.admin_headers)

    response = client.get(
        "/audit/employees",
        headers=org.admin_headers,
        params={"employee_id": emp["id"]},
    )
    assert response.status_code == 200
    logs = response.json()
    assert [(l["operation"], l["full_name"]) for l in logs] == [
        ("Updated", "Robert Builder"),
        ("Created", "Bob Builder"),
    ]
    assert logs[0]["manager_id"] == org.manager.id


def test_audit_requires_admin(db_session):
    """Test audit endpoints are Admin only"""
    org = seed_org(db_session)
    client = TestClient(app)

    assert client.get("/audit/departments", headers=org.manager_headers).status_code == 403
    assert client.get("/audit/employees", headers=org.alice_headers).status_code == 403


def test_dashboard_stats(db_session):
    """Test dashboard totals and per-department head counts"""
    org = seed_org(db_session)
    create_department(db_session, "Sales")
    create_leave(db_session, org.alice, MONDAY, FRIDAY)
    create_leave(db_session, org.alice, MONDAY, MONDAY, status="Approved")
    create_leave(db_session, org.manager, MONDAY, MONDAY, status="Rejected")

    client = TestClient(app)
    r = client.get("/dashboard", headers=org.admin_headers)
    assert r.status_code == 200
    stats = r.json()
    assert stats["current_user_name"] == "Ada Admin"
    assert stats["current_role"] == "Admin"
    assert stats["total_employees"] == 3
    assert stats["active_employees"] == 3
    assert stats["total_departments"] == 3
    assert stats["total_leave_requests"] == 3
    assert stats["pending_leaves"] == 1
    assert stats["approved_leaves"] == 1
    assert stats["rejected_leaves"] == 1
    assert [e["full_name"] for e in stats["recent_employees"]] == ["Alice Doe", "Max Manager", "Ada Admin"]
    assert stats["department_stats"] == [
        {"name": "Administration", "employee_count": 1},
        {"name": "Engineering", "employee_count": 2},
        {"name": "Sales", "employee_count": 0},
    ]


def test_dashboard_limits_recent_employees(db_session):
    org = seed_org(db_session)
    for i in range(4):
        create_employee(db_session, f"Extra {i}", f"extra{i}@local.test", org.eng)

    client = TestClient(app)
    r = client.get("/dashboard", headers=org.admin_headers)
    assert len(r.json()["recent_employees"]) == 5
    assert r.json()["recent_employees"][0]["full_name"] == "Extra 3"


def test_list_roles(db_session):
    seed_org(db_session)
    client = TestClient(app)

    r = client.get("/roles")
    assert r.status_code == 200
    assert [role["name"] for role in r.json()] == ["Admin", "Employee", "Manager"]


def test_recent_activity(db_session):
    """Test activity trail of an employee's linked account"""
    org = seed_org(db_session)
    client = TestClient(app)

    client.get("/employees/profile", headers=org.alice_headers)
    client.get("/employees/current-month-info", headers=org.alice_headers)

    r = client.get(f"/activity/recent-activity/{org.alice.id}", headers=org.manager_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["account_id"] == org.alice.account_id
    paths = [a["path"] for a in data["activities"]]
    assert paths == ["/employees/current-month-info", "/employees/profile"]


def test_recent_activity_without_account(db_session):
    org = seed_org(db_session)
    loner = create_employee(db_session, "Lo Ner", "loner@local.test", org.eng)
    client = TestClient(app)

    r = client.get(f"/activity/recent-activity/{loner.id}", headers=org.admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "UserId is required"


def test_activity_employees(db_session):
    org = seed_org(db_session)
    client = TestClient(app)

    r = client.get("/activity/employees", headers=org.manager_headers)
    assert r.status_code == 200
    assert len(r.json()) == 3
