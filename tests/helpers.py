from datetime import date
from types import SimpleNamespace

from sqlalchemy.orm import Session

from ems.core.rbac import ADMIN, EMPLOYEE, MANAGER, ROLE_NAMES
from ems.models.account import Account
from ems.models.department import Department
from ems.models.employee import Employee
from ems.models.leave import LeaveBalance, LeaveRequest
from ems.models.rbac import Role, AccountRole

# 2024-01-01 is a Monday
MONDAY = date(2024, 1, 1)
FRIDAY = date(2024, 1, 5)
SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)


def headers(email: str) -> dict[str, str]:
    return {"X-User-Email": email}


def ensure_role(db: Session, name: str) -> Role:
    r = db.query(Role).filter(Role.name == name).one_or_none()
    if r:
        return r
    r = Role(name=name)
    db.add(r)
    db.commit()
    db.refresh(r)
    return r


def ensure_roles(db: Session) -> dict[str, Role]:
    return {name: ensure_role(db, name) for name in ROLE_NAMES}


def create_account(db: Session, email: str, full_name="User", role: str | None = None) -> Account:
    a = Account(email=email, full_name=full_name, is_active=True)
    db.add(a)
    db.commit()
    db.refresh(a)
    if role:
        db.add(AccountRole(account_id=a.id, role_id=ensure_role(db, role).id))
        db.commit()
    return a


def create_department(db: Session, name: str) -> Department:
    d = Department(name=name)
    db.add(d)
    db.commit()
    db.refresh(d)
    return d


def create_employee(
    db: Session,
    full_name: str,
    email: str,
    department: Department,
    *,
    role: str = EMPLOYEE,
    quota: int = 20,
    taken: int = 0,
    account: Account | None = None,
    with_balance: bool = True,
) -> Employee:
    """
    Insert an employee directly, wiring the manager reference the way the
    lifecycle would. A Manager also becomes the department's manager.
    """
    e = Employee(
        full_name=full_name,
        email=email,
        role=role,
        role_id=ensure_role(db, role).id,
        is_active=True,
        department_id=department.id,
        manager_id=None if role == MANAGER else department.manager_id,
        account_id=account.id if account else None,
        leave_balance=quota,
    )
    db.add(e)
    db.commit()
    db.refresh(e)

    if role == MANAGER:
        department.manager_id = e.id
        department.manager_name = e.full_name
        db.commit()

    if with_balance:
        db.add(LeaveBalance(employee_id=e.id, total_leaves=quota, leaves_taken=taken))
        db.commit()
    return e


def create_leave(
    db: Session,
    employee: Employee,
    start: date,
    end: date,
    status: str = "Pending",
) -> LeaveRequest:
    l = LeaveRequest(employee_id=employee.id, start_date=start, end_date=end, status=status)
    db.add(l)
    db.commit()
    db.refresh(l)
    return l


def get_balance(db: Session, employee: Employee) -> LeaveBalance | None:
    return db.query(LeaveBalance).filter(LeaveBalance.employee_id == employee.id).one_or_none()


def seed_org(db: Session) -> SimpleNamespace:
    """
    Admin (with login) in "Administration"; "Engineering" managed by a
    Manager (with login) with one Employee (with login) reporting to them.
    """
    ensure_roles(db)

    admin_account = create_account(db, "admin@local.test", "Ada Admin", role=ADMIN)
    admin_dept = create_department(db, "Administration")
    admin = create_employee(
        db, "Ada Admin", "admin@local.test", admin_dept, role=ADMIN, account=admin_account
    )

    manager_account = create_account(db, "manager@local.test", "Max Manager", role=MANAGER)
    eng = create_department(db, "Engineering")
    manager = create_employee(
        db, "Max Manager", "manager@local.test", eng, role=MANAGER, account=manager_account
    )

    employee_account = create_account(db, "alice@local.test", "Alice Doe", role=EMPLOYEE)
    alice = create_employee(
        db, "Alice Doe", "alice@local.test", eng, role=EMPLOYEE, account=employee_account
    )

    return SimpleNamespace(
        admin=admin,
        admin_dept=admin_dept,
        admin_headers=headers("admin@local.test"),
        eng=eng,
        manager=manager,
        manager_headers=headers("manager@local.test"),
        alice=alice,
        alice_headers=headers("alice@local.test"),
    )
