from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ems.core.access import get_employee_for_account
from ems.core.rbac import ADMIN, MANAGER, require_roles
from ems.core.security import get_current_account
from ems.db.session import get_db
from ems.models.account import Account
from ems.models.employee import Employee
from ems.models.leave import LEAVE_APPROVED, LEAVE_PENDING, LeaveRequest
from ems.schemas.leave import (
    LeaveActionResult,
    LeaveApply,
    LeaveBalanceOut,
    LeaveRequestOut,
    LeaveStatusUpdate,
)
from ems.services import leaves as leave_service
from ems.services.leave_accounting import calculate_business_days, get_balance

router = APIRouter(prefix="/leave", tags=["leave"])


def leave_to_out(l: LeaveRequest) -> LeaveRequestOut:
    return LeaveRequestOut(
        id=l.id,
        employee_id=l.employee_id,
        employee_name=l.employee.full_name if l.employee else None,
        start_date=l.start_date,
        end_date=l.end_date,
        reason=l.reason,
        status=l.status,
        request_date=l.request_date,
        business_days=calculate_business_days(l.start_date, l.end_date),
    )


def pending_for_team(db: Session, manager: Employee) -> list[LeaveRequest]:
    team_ids = [r[0] for r in db.query(Employee.id).filter(Employee.manager_id == manager.id).all()]
    if not team_ids:
        return []
    return (
        db.query(LeaveRequest)
        .filter(LeaveRequest.status == LEAVE_PENDING, LeaveRequest.employee_id.in_(team_ids))
        .order_by(LeaveRequest.request_date.asc())
        .all()
    )


@router.post("/apply", response_model=LeaveActionResult, status_code=status.HTTP_201_CREATED)
def apply_leave(
    payload: LeaveApply,
    db: Session = Depends(get_db),
    _: Account = Depends(get_current_account),
):
    leave = leave_service.apply_leave(db, payload)
    if leave.status == LEAVE_APPROVED:
        message = "Leave applied and approved successfully."
    else:
        message = "Leave application submitted successfully."
    return LeaveActionResult(message=message, leave=leave_to_out(leave))


@router.get("/my/{employee_id}", response_model=list[LeaveRequestOut])
def my_leaves(
    employee_id: int,
    db: Session = Depends(get_db),
    _: Account = Depends(get_current_account),
):
    rows = (
        db.query(LeaveRequest)
        .filter(LeaveRequest.employee_id == employee_id)
        .order_by(LeaveRequest.request_date.desc())
        .all()
    )
    return [leave_to_out(l) for l in rows]


@router.get("/balance/{employee_id}", response_model=LeaveBalanceOut)
def leave_balance(
    employee_id: int,
    db: Session = Depends(get_db),
    _: Account = Depends(get_current_account),
):
    balance = get_balance(db, employee_id)
    if not balance:
        raise HTTPException(status_code=404, detail="Leave balance not found")
    return LeaveBalanceOut(
        employee_id=balance.employee_id,
        total_leaves=balance.total_leaves,
        leaves_taken=balance.leaves_taken,
        remaining=balance.remaining,
    )


@router.get("/pending", response_model=list[LeaveRequestOut])
def pending_leaves(
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    rows = (
        db.query(LeaveRequest)
        .filter(LeaveRequest.status == LEAVE_PENDING)
        .order_by(LeaveRequest.request_date.asc())
        .all()
    )
    return [leave_to_out(l) for l in rows]


@router.get("/manager-leave-approval", response_model=list[LeaveRequestOut])
def manager_leave_approval(
    employee_id: int | None = Query(default=None, description="Manager employee id; defaults to the caller"),
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    """
    Pending requests of the manager's direct reports.
    """
    if employee_id is not None:
        manager = db.get(Employee, employee_id)
    else:
        manager = get_employee_for_account(db, current_account)
    if not manager:
        raise HTTPException(status_code=404, detail="Manager not found.")
    return [leave_to_out(l) for l in pending_for_team(db, manager)]


@router.get("/{leave_id}", response_model=LeaveRequestOut)
def get_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    leave = db.get(LeaveRequest, leave_id)
    if not leave:
        raise HTTPException(status_code=404, detail="Leave request not found")
    return leave_to_out(leave)


@router.post("/{leave_id}/status", response_model=LeaveActionResult)
def set_leave_status(
    leave_id: int,
    payload: LeaveStatusUpdate,
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    leave = leave_service.approve_or_reject(db, leave_id, payload.status)
    return LeaveActionResult(
        message=f"Leave status updated to {leave.status}",
        leave=leave_to_out(leave),
    )
