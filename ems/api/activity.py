from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ems.api.employees import employee_to_out
from ems.core.rbac import ADMIN, MANAGER, require_roles
from ems.db.session import get_db
from ems.models.account_activity import AccountActivity
from ems.models.employee import Employee
from ems.schemas.employee import EmployeeOut

router = APIRouter(prefix="/activity", tags=["activity"])


@router.get("/employees", response_model=list[EmployeeOut])
def activity_employees(
    db: Session = Depends(get_db),
    _=Depends(require_roles(ADMIN, MANAGER)),
):
    return [employee_to_out(e) for e in db.query(Employee).order_by(Employee.full_name.asc()).all()]


@router.get("/recent-activity/{employee_id}")
def recent_activity(
    employee_id: int,
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    _=Depends(require_roles(ADMIN, MANAGER)),
):
    employee = db.get(Employee, employee_id)
    if not employee or not employee.account_id:
        raise HTTPException(status_code=400, detail="UserId is required")

    rows = (
        db.query(AccountActivity)
        .filter(AccountActivity.account_id == employee.account_id)
        .order_by(AccountActivity.accessed_at.desc(), AccountActivity.id.desc())
        .limit(limit)
        .all()
    )
    return {
        "account_id": employee.account_id,
        "activities": [
            {
                "id": r.id,
                "method": r.method,
                "path": r.path,
                "accessed_at": r.accessed_at,
            }
            for r in rows
        ],
    }
