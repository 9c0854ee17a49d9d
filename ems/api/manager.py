from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ems.api.employees import employee_to_out
from ems.api.leaves import leave_to_out, pending_for_team
from ems.core.access import get_employee_for_account, resolve_manager_name
from ems.core.rbac import MANAGER, require_roles
from ems.db.session import get_db
from ems.models.account import Account
from ems.models.employee import Employee
from ems.models.leave import LeaveRequest
from ems.schemas.employee import EmployeeOut, EmployeeProfileOut
from ems.schemas.leave import LeaveActionResult, LeaveRequestOut
from ems.services import leaves as leave_service

router = APIRouter(prefix="/manager", tags=["manager"])


def _manager_or_404(db: Session, account: Account) -> Employee:
    manager = get_employee_for_account(db, account)
    if not manager:
        raise HTTPException(status_code=404, detail="Manager not found.")
    return manager


@router.get("/profile", response_model=EmployeeProfileOut)
def manager_profile(
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(MANAGER)),
):
    manager = _manager_or_404(db, current_account)
    return EmployeeProfileOut(
        employee=employee_to_out(manager),
        manager_name=resolve_manager_name(db, manager),
    )


@router.get("/approve-list", response_model=list[LeaveRequestOut])
def pending_approvals(
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(MANAGER)),
):
    manager = _manager_or_404(db, current_account)
    return [leave_to_out(l) for l in pending_for_team(db, manager)]


@router.get("/approvals/{leave_id}", response_model=LeaveRequestOut)
def approval_details(
    leave_id: int,
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(MANAGER)),
):
    leave = db.get(LeaveRequest, leave_id)
    if not leave:
        raise HTTPException(status_code=404, detail="Leave request not found")
    return leave_to_out(leave)


@router.post("/approvals/{leave_id}", response_model=LeaveActionResult)
def approve_or_reject(
    leave_id: int,
    status: str | None = Query(default=None, max_length=20, description="Approved or Rejected"),
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(MANAGER)),
):
    leave = leave_service.approve_or_reject(db, leave_id, status)
    return LeaveActionResult(message="Leave status updated successfully.", leave=leave_to_out(leave))


@router.get("/subordinates", response_model=list[EmployeeOut])
def subordinates(
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(MANAGER)),
):
    manager = _manager_or_404(db, current_account)
    rows = (
        db.query(Employee)
        .filter(Employee.manager_id == manager.id)
        .order_by(Employee.full_name.asc())
        .all()
    )
    return [employee_to_out(e) for e in rows]
