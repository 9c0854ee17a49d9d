import logging

from sqlalchemy.orm import Session

from ems.core.audit import log_department_event
from ems.core.errors import NotFoundFailure, ValidationFailure
from ems.models.account import Account
from ems.models.department import Department
from ems.models.employee import Employee
from ems.schemas.department import DepartmentCreate, DepartmentUpdate
from ems.services.manager_assignment import (
    UNASSIGNED_MANAGER,
    assign_manager,
    remove_manager,
    validate_manager_candidate,
)

logger = logging.getLogger(__name__)


def _require_name(name: str | None) -> str:
    text = (name or "").strip()
    if not text:
        raise ValidationFailure("Department name is required.")
    return text


def _candidate_or_400(db: Session, employee_id: int, excluding_department_id: int | None = None) -> Employee:
    # a missing candidate is a bad payload here, not a missing resource
    try:
        return validate_manager_candidate(db, employee_id, excluding_department_id)
    except NotFoundFailure as exc:
        raise ValidationFailure(exc.message) from exc


def create_department(
    db: Session, payload: DepartmentCreate, *, actor: Account | None = None
) -> Department:
    name = _require_name(payload.name)

    manager = None
    if payload.manager_id is not None:
        manager = _candidate_or_400(db, payload.manager_id)

    department = Department(name=name)
    db.add(department)
    db.flush()

    if manager is not None:
        assign_manager(db, manager, department, actor=actor)

    log_department_event(db=db, department=department, operation="Created", actor=actor)
    logger.info("Department %s (%s) created", department.id, department.name)
    return department


def update_department(
    db: Session, department_id: int, payload: DepartmentUpdate, *, actor: Account | None = None
) -> Department:
    if payload.id != department_id:
        raise NotFoundFailure("Department not found")

    department = db.get(Department, department_id)
    if department is None:
        raise NotFoundFailure("Department not found")

    name = _require_name(payload.name)

    old_manager_id = department.manager_id
    new_manager_id = payload.manager_id

    if old_manager_id != new_manager_id:
        if new_manager_id is not None:
            new_manager = _candidate_or_400(db, new_manager_id, excluding_department_id=department.id)
            if old_manager_id is not None:
                remove_manager(db, old_manager_id, department.id, operation=UNASSIGNED_MANAGER, actor=actor)
            assign_manager(db, new_manager, department, actor=actor)
        else:
            remove_manager(db, old_manager_id, department.id, operation=UNASSIGNED_MANAGER, actor=actor)
            department.manager_id = None
            department.manager_name = None

    department.name = name
    db.flush()

    log_department_event(db=db, department=department, operation="Updated", actor=actor)
    logger.info("Department %s updated", department.id)
    return department


def delete_department(db: Session, department_id: int, *, actor: Account | None = None) -> None:
    department = db.get(Department, department_id)
    if department is None:
        raise NotFoundFailure("Department not found")

    has_employees = (
        db.query(Employee.id).filter(Employee.department_id == department_id).first() is not None
    )
    if has_employees:
        logger.warning("Refusing to delete department %s: employees still assigned", department_id)
        raise ValidationFailure("Cannot delete department while employees are still assigned.")

    log_department_event(db=db, department=department, operation="Deleted", actor=actor)
    db.delete(department)
    db.flush()
    logger.info("Department %s deleted", department_id)
