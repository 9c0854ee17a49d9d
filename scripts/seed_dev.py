# seed_dev.py
"""
Local development data: role catalog, an Admin, one managed department
with two employees, and a login account for each of them.

Run after `alembic upgrade head`:
    python -m scripts.seed_dev
"""
from dotenv import load_dotenv

load_dotenv()

from sqlalchemy.orm import Session  # noqa: E402

from ems.core.rbac import ADMIN, EMPLOYEE, MANAGER, ROLE_NAMES, set_account_role  # noqa: E402
from ems.db.session import SessionLocal  # noqa: E402
from ems.models.account import Account  # noqa: E402
from ems.models.department import Department  # noqa: E402
from ems.models.employee import Employee  # noqa: E402
from ems.models.leave import LeaveBalance  # noqa: E402
from ems.models.rbac import Role  # noqa: E402


# ---------- helpers ----------

def get_or_create_role(db: Session, name: str) -> Role:
    r = db.query(Role).filter(Role.name == name).one_or_none()
    if r:
        return r
    r = Role(name=name)
    db.add(r)
    db.flush()
    return r


def get_or_create_account(db: Session, email: str, full_name: str, role: Role) -> Account:
    a = db.query(Account).filter(Account.email == email).one_or_none()
    if not a:
        a = Account(email=email, full_name=full_name, is_active=True)
        db.add(a)
        db.flush()
    set_account_role(db, a.id, role)
    return a


def get_or_create_department(db: Session, name: str) -> Department:
    d = db.query(Department).filter(Department.name == name).one_or_none()
    if d:
        return d
    d = Department(name=name)
    db.add(d)
    db.flush()
    return d


def get_or_create_employee(
    db: Session,
    *,
    email: str,
    full_name: str,
    role: Role,
    department: Department,
    manager_id: int | None,
    quota: int = 20,
) -> Employee:
    e = db.query(Employee).filter(Employee.email == email).one_or_none()
    if e:
        return e
    account = get_or_create_account(db, email, full_name, role)
    e = Employee(
        full_name=full_name,
        email=email,
        role=role.name,
        role_id=role.id,
        is_active=True,
        department_id=department.id,
        manager_id=manager_id,
        account_id=account.id,
        leave_balance=quota,
    )
    db.add(e)
    db.flush()
    db.add(LeaveBalance(employee_id=e.id, total_leaves=quota, leaves_taken=0))
    return e


def main():
    db = SessionLocal()
    try:
        roles = {name: get_or_create_role(db, name) for name in ROLE_NAMES}

        admin_dept = get_or_create_department(db, "Administration")
        get_or_create_employee(
            db, email="admin@local.test", full_name="Ada Admin",
            role=roles[ADMIN], department=admin_dept, manager_id=None,
        )

        eng = get_or_create_department(db, "Engineering")
        manager = get_or_create_employee(
            db, email="manager@local.test", full_name="Max Manager",
            role=roles[MANAGER], department=eng, manager_id=None,
        )
        eng.manager_id = manager.id
        eng.manager_name = manager.full_name

        for email, name in [("alice@local.test", "Alice Doe"), ("bob@local.test", "Bob Roe")]:
            get_or_create_employee(
                db, email=email, full_name=name,
                role=roles[EMPLOYEE], department=eng, manager_id=manager.id,
            )

        db.commit()
        print("Dev data seeded.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
