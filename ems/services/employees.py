import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from ems.core.audit import log_employee_event
from ems.core.errors import ConflictFailure, NotFoundFailure, ValidationFailure
from ems.core.rbac import ADMIN, EMPLOYEE, MANAGER, find_role_by_name, set_account_role
from ems.models.account import Account
from ems.models.department import Department
from ems.models.employee import Employee
from ems.models.leave import LeaveBalance
from ems.schemas.employee import EmployeeCreate, EmployeeUpdate
from ems.services import leave_accounting
from ems.services.accounts import find_account_by_email, lock_account, normalize_email
from ems.services.manager_assignment import (
    apply_role_transition,
    assign_manager,
    check_role_transition,
    managed_department,
)

logger = logging.getLogger(__name__)


def _email_taken(db: Session, email: str, *, excluding_id: int | None = None) -> bool:
    q = db.query(Employee.id).filter(func.lower(func.trim(Employee.email)) == normalize_email(email))
    if excluding_id is not None:
        q = q.filter(Employee.id != excluding_id)
    return q.first() is not None


def _resolve_manager_ref(employee: Employee, department: Department) -> int | None:
    if employee.role == MANAGER or department.manager_id == employee.id:
        return None
    return department.manager_id


def create_employee(
    db: Session, payload: EmployeeCreate, *, actor: Account | None = None
) -> Employee:
    if _email_taken(db, payload.email):
        raise ValidationFailure("A user with this Email already exists.")

    department = db.get(Department, payload.department_id)
    if department is None:
        raise ValidationFailure("Selected department does not exist.")

    if payload.role == MANAGER:
        if department.manager_id is not None:
            raise ConflictFailure(
                "This department already has a manager assigned. "
                "Please change the current manager to employee role first."
            )
        if db.query(Employee.id).filter(Employee.role == ADMIN).first() is None:
            raise ValidationFailure("Please create an Admin before adding a Manager.")
    elif payload.role == EMPLOYEE:
        if department.manager_id is None:
            raise ValidationFailure("Please assign a Manager to the Department first.")

    role = find_role_by_name(db, payload.role)
    if role is None:
        raise ValidationFailure("Selected role is invalid.")

    account = find_account_by_email(db, payload.email)

    employee = Employee(
        full_name=payload.full_name,
        email=payload.email.strip(),
        phone_number=payload.phone_number,
        role=payload.role,
        role_id=role.id,
        is_active=payload.is_active,
        department_id=department.id,
        manager_id=None if payload.role == MANAGER else department.manager_id,
        account_id=account.id if account else None,
        leave_balance=payload.leave_balance,
    )
    db.add(employee)
    db.flush()

    if account is not None:
        set_account_role(db, account.id, role)

    if payload.role == MANAGER:
        assign_manager(db, employee, department, actor=actor)

    db.add(LeaveBalance(employee_id=employee.id, total_leaves=payload.leave_balance, leaves_taken=0))
    log_employee_event(db=db, employee=employee, operation="Created", actor=actor)
    db.flush()

    logger.info("Employee %s created as %s in department %s", employee.id, employee.role, department.id)
    return employee


def update_employee(
    db: Session, employee_id: int, payload: EmployeeUpdate, *, actor: Account | None = None
) -> Employee:
    if payload.id != employee_id:
        raise NotFoundFailure("Employee not found")

    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundFailure("Employee not found")

    new_department = db.get(Department, payload.department_id)
    if new_department is None:
        raise ValidationFailure("Selected department does not exist.")

    if _email_taken(db, payload.email, excluding_id=employee.id):
        raise ValidationFailure("A user with this Email already exists.")

    check_role_transition(db, employee, payload.role, new_department)

    role = find_role_by_name(db, payload.role)
    if role is None:
        raise ValidationFailure("Selected role is invalid.")

    was_manager = employee.role == MANAGER
    old_department_id = employee.department_id

    if employee.account_id:
        set_account_role(db, employee.account_id, role)

    if payload.leave_balance != employee.leave_balance:
        leave_accounting.adjust_total(db, employee.id, payload.leave_balance - employee.leave_balance)

    employee.full_name = payload.full_name
    employee.email = payload.email.strip()
    employee.phone_number = payload.phone_number
    employee.role = payload.role
    employee.role_id = role.id
    employee.is_active = payload.is_active
    employee.department_id = new_department.id
    employee.department = new_department
    employee.leave_balance = payload.leave_balance
    db.flush()

    apply_role_transition(
        db,
        employee,
        was_manager=was_manager,
        old_department_id=old_department_id,
        new_department=new_department,
        actor=actor,
    )
    employee.manager_id = _resolve_manager_ref(employee, new_department)
    db.flush()

    log_employee_event(db=db, employee=employee, operation="Updated", actor=actor)
    logger.info("Employee %s updated (role=%s, department=%s)", employee.id, employee.role, employee.department_id)
    return employee


def delete_employee(db: Session, employee_id: int, *, actor: Account | None = None) -> None:
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundFailure("Employee not found")

    if managed_department(db, employee.id) is not None:
        logger.warning("Refusing to delete employee %s: still a department manager", employee_id)
        raise ValidationFailure("Cannot delete employee: assigned as department manager.")

    account = find_account_by_email(db, employee.email)
    if account is not None:
        lock_account(db, account)

    for sub in db.query(Employee).filter(Employee.manager_id == employee.id).all():
        sub.manager_id = None

    log_employee_event(db=db, employee=employee, operation="Deleted", actor=actor)
    db.delete(employee)
    db.flush()
    logger.info("Employee %s deleted", employee_id)
