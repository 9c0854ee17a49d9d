from sqlalchemy.orm import Session

from ems.models.account import Account
from ems.models.audit_log import DepartmentLog, EmployeeLog
from ems.models.department import Department
from ems.models.employee import Employee


def log_department_event(
    *,
    db: Session,
    department: Department,
    operation: str,
    actor: Account | None = None,
) -> DepartmentLog:
    entry = DepartmentLog(
        department_id=department.id,
        department_name=department.name,
        manager_id=department.manager_id,
        operation=operation,
        actor_account_id=actor.id if actor else None,
    )
    db.add(entry)
    return entry


def log_employee_event(
    *,
    db: Session,
    employee: Employee,
    operation: str,
    actor: Account | None = None,
) -> EmployeeLog:
    entry = EmployeeLog(
        employee_id=employee.id,
        full_name=employee.full_name,
        email=employee.email,
        phone_number=employee.phone_number,
        role=employee.role,
        role_id=employee.role_id,
        is_active=employee.is_active,
        department_id=employee.department_id,
        manager_id=employee.manager_id,
        operation=operation,
        actor_account_id=actor.id if actor else None,
    )
    db.add(entry)
    return entry
