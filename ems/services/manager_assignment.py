"""
Manager assignment engine.

Keeps three references consistent with each other:

  * Department.manager_id / manager_name
  * Employee.role (+ role_id) of the manager
  * Employee.manager_id of everyone in the managed department

All functions mutate through the caller's Session and flush; nothing here
commits, so a route's whole operation lands in one transaction.
"""
import logging

from sqlalchemy.orm import Session

from ems.core.audit import log_department_event
from ems.core.errors import ConflictFailure, NotFoundFailure, ValidationFailure
from ems.core.rbac import EMPLOYEE, MANAGER, find_role_by_name, set_account_role
from ems.models.account import Account
from ems.models.department import Department
from ems.models.employee import Employee

logger = logging.getLogger(__name__)

MANAGER_ASSIGNED = "Manager Assigned"
MANAGER_DEMOTED = "Manager Demoted"
MANAGER_TRANSFERRED_OUT = "Manager Transferred Out"
UNASSIGNED_MANAGER = "Unassigned Manager"


def _set_role(db: Session, employee: Employee, role_name: str) -> None:
    role = find_role_by_name(db, role_name)
    employee.role = role_name
    employee.role_id = role.id if role else None
    if role and employee.account_id:
        set_account_role(db, employee.account_id, role)


def managed_department(
    db: Session, employee_id: int, excluding_department_id: int | None = None
) -> Department | None:
    q = db.query(Department).filter(Department.manager_id == employee_id)
    if excluding_department_id is not None:
        q = q.filter(Department.id != excluding_department_id)
    return q.order_by(Department.id.asc()).first()


def validate_manager_candidate(
    db: Session, employee_id: int, excluding_department_id: int | None = None
) -> Employee:
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundFailure("Selected manager does not exist.")

    other = managed_department(db, employee_id, excluding_department_id)
    if other is not None:
        raise ConflictFailure(f"This employee is already managing {other.name} department.")
    return employee


def assign_manager(
    db: Session,
    employee: Employee,
    department: Department,
    *,
    actor: Account | None = None,
) -> None:
    other = managed_department(db, employee.id, department.id)
    if other is not None:
        raise ConflictFailure(f"This employee is already managing {other.name} department.")

    if employee.role != MANAGER:
        _set_role(db, employee, MANAGER)
    employee.department_id = department.id
    employee.department = department
    employee.manager_id = None

    department.manager_id = employee.id
    department.manager_name = employee.full_name

    peers = (
        db.query(Employee)
        .filter(Employee.department_id == department.id, Employee.id != employee.id)
        .all()
    )
    for peer in peers:
        peer.manager_id = employee.id

    db.flush()
    log_department_event(db=db, department=department, operation=MANAGER_ASSIGNED, actor=actor)
    logger.info("Employee %s now manages department %s", employee.id, department.id)


def remove_manager(
    db: Session,
    employee_id: int,
    department_id: int,
    *,
    operation: str = UNASSIGNED_MANAGER,
    actor: Account | None = None,
) -> None:
    """Detach a manager from one department. Calling it twice changes nothing more."""
    employee = db.get(Employee, employee_id)
    if employee is not None and employee.role == MANAGER:
        if managed_department(db, employee_id, department_id) is None:
            _set_role(db, employee, EMPLOYEE)
            home = db.get(Department, employee.department_id)
            if home is not None and home.manager_id != employee_id:
                employee.manager_id = home.manager_id
            else:
                employee.manager_id = None

    department = db.get(Department, department_id)
    if department is not None and department.manager_id == employee_id:
        department.manager_id = None
        department.manager_name = None
        log_department_event(db=db, department=department, operation=operation, actor=actor)

    subordinates = (
        db.query(Employee)
        .filter(Employee.department_id == department_id, Employee.manager_id == employee_id)
        .all()
    )
    for sub in subordinates:
        sub.manager_id = None

    db.flush()
    logger.info("Employee %s removed as manager of department %s (%s)", employee_id, department_id, operation)


def check_role_transition(
    db: Session, employee: Employee, new_role: str, new_department: Department
) -> None:
    """Reject a role/department change that would break the one-manager rule."""
    was_manager = employee.role == MANAGER
    will_be_manager = new_role == MANAGER
    occupied = new_department.manager_id is not None and new_department.manager_id != employee.id

    if will_be_manager and not was_manager:
        if occupied:
            raise ConflictFailure(
                "This department already has a manager assigned. "
                "Please change the current manager to employee role first."
            )
    elif will_be_manager and was_manager and new_department.id != employee.department_id:
        if occupied:
            raise ConflictFailure("The target department already has a manager assigned.")
    elif new_role == EMPLOYEE:
        if new_department.manager_id is None:
            raise ValidationFailure(
                "Cannot assign employee to a department without a manager. "
                "Please assign a manager to the department first."
            )


def demote_manager(db: Session, employee: Employee, *, actor: Account | None = None) -> None:
    for department in db.query(Department).filter(Department.manager_id == employee.id).all():
        remove_manager(db, employee.id, department.id, operation=MANAGER_DEMOTED, actor=actor)

    for sub in db.query(Employee).filter(Employee.manager_id == employee.id).all():
        sub.manager_id = None
    db.flush()


def promote_to_manager(
    db: Session, employee: Employee, department: Department, *, actor: Account | None = None
) -> None:
    if department.manager_id is not None and department.manager_id != employee.id:
        raise ConflictFailure(
            f"Department {department.name} already has a manager assigned."
        )
    assign_manager(db, employee, department, actor=actor)


def transfer_manager(
    db: Session,
    employee: Employee,
    old_department_id: int,
    new_department: Department,
    *,
    actor: Account | None = None,
) -> None:
    remove_manager(db, employee.id, old_department_id, operation=MANAGER_TRANSFERRED_OUT, actor=actor)
    promote_to_manager(db, employee, new_department, actor=actor)


def apply_role_transition(
    db: Session,
    employee: Employee,
    *,
    was_manager: bool,
    old_department_id: int,
    new_department: Department,
    actor: Account | None = None,
) -> None:
    """Run demotion, promotion or transfer after the employee's fields were updated."""
    will_be_manager = employee.role == MANAGER

    if was_manager and not will_be_manager:
        demote_manager(db, employee, actor=actor)
    elif not was_manager and will_be_manager:
        promote_to_manager(db, employee, new_department, actor=actor)
    elif was_manager and will_be_manager and old_department_id != new_department.id:
        transfer_manager(db, employee, old_department_id, new_department, actor=actor)
