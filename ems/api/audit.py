from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ems.core.rbac import ADMIN, require_roles
from ems.db.session import get_db
from ems.models.audit_log import DepartmentLog, EmployeeLog

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/departments")
def list_department_logs(
    department_id: int | None = Query(default=None),
    limit: int = Query(default=50, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_roles(ADMIN)),
):
    q = db.query(DepartmentLog)
    if department_id is not None:
        q = q.filter(DepartmentLog.department_id == department_id)

    rows = q.order_by(DepartmentLog.timestamp.desc(), DepartmentLog.id.desc()).limit(limit).all()

    return [
        {
            "id": r.id,
            "department_id": r.department_id,
            "department_name": r.department_name,
            "manager_id": r.manager_id,
            "operation": r.operation,
            "actor_account_id": r.actor_account_id,
            "timestamp": r.timestamp,
        }
        for r in rows
    ]


@router.get("/employees")
def list_employee_logs(
    employee_id: int | None = Query(default=None),
    limit: int = Query(default=50, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_roles(ADMIN)),
):
    q = db.query(EmployeeLog)
    if employee_id is not None:
        q = q.filter(EmployeeLog.employee_id == employee_id)

    rows = q.order_by(EmployeeLog.timestamp.desc(), EmployeeLog.id.desc()).limit(limit).all()

    return [
        {
            "id": r.id,
            "employee_id": r.employee_id,
            "full_name": r.full_name,
            "email": r.email,
            "role": r.role,
            "department_id": r.department_id,
            "manager_id": r.manager_id,
            "is_active": r.is_active,
            "operation": r.operation,
            "actor_account_id": r.actor_account_id,
            "timestamp": r.timestamp,
        }
        for r in rows
    ]
