import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ems.core.errors import InsufficientBalanceFailure, NotFoundFailure, ValidationFailure
from ems.models.employee import Employee
from ems.models.leave import LEAVE_APPROVED, LEAVE_PENDING, LeaveRequest
from ems.schemas.leave import LeaveApply
from ems.services.leave_accounting import (
    calculate_business_days,
    deduct_leave,
    ensure_balance,
    get_balance,
)

logger = logging.getLogger(__name__)


def _insufficient(db: Session, employee_id: int, requested: int) -> InsufficientBalanceFailure:
    balance = get_balance(db, employee_id)
    remaining = max(balance.remaining, 0) if balance is not None else 0
    logger.warning(
        "Insufficient leave balance for employee %s: remaining=%s requested=%s",
        employee_id, remaining, requested,
    )
    return InsufficientBalanceFailure(
        f"Insufficient balance. Available leave: {remaining}, Requested leave: {requested}",
        remaining=remaining,
        requested=requested,
    )


def apply_leave(db: Session, payload: LeaveApply) -> LeaveRequest:
    if payload.start_date > payload.end_date:
        raise ValidationFailure("End date must be after start date.")

    days = calculate_business_days(payload.start_date, payload.end_date)
    if days <= 0:
        raise ValidationFailure("Invalid leave period.")

    employee = db.get(Employee, payload.employee_id)
    if employee is None:
        raise NotFoundFailure("Employee not found.")

    status = LEAVE_APPROVED if payload.status == LEAVE_APPROVED else LEAVE_PENDING

    if ensure_balance(db, employee.id, days) is None:
        raise _insufficient(db, employee.id, days)

    leave = LeaveRequest(
        employee_id=employee.id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        status=status,
        request_date=datetime.utcnow(),
    )
    db.add(leave)
    db.flush()

    if status == LEAVE_APPROVED:
        deduct_leave(db, employee.id, leave.start_date, leave.end_date)

    logger.info("Leave %s filed for employee %s (%s day(s), %s)", leave.id, employee.id, days, status)
    return leave


def approve_or_reject(db: Session, leave_id: int, status: str | None) -> LeaveRequest:
    """
    Set a leave request's status.

    Only the edge into Approved touches the balance: days are re-counted,
    capacity re-checked and then deducted. Approving an already approved
    request, or any other status value, is written through as-is.
    """
    if status is None or not status.strip():
        raise ValidationFailure("Status is required.")

    leave = db.get(LeaveRequest, leave_id)
    if leave is None:
        raise NotFoundFailure("Leave request not found")

    if status.strip().lower() == LEAVE_APPROVED.lower():
        if leave.status != LEAVE_APPROVED:
            days = calculate_business_days(leave.start_date, leave.end_date)
            if db.get(Employee, leave.employee_id) is None:
                raise NotFoundFailure("Employee not found.")
            if ensure_balance(db, leave.employee_id, days) is None:
                raise _insufficient(db, leave.employee_id, days)
            deduct_leave(db, leave.employee_id, leave.start_date, leave.end_date)
        leave.status = LEAVE_APPROVED
    else:
        leave.status = status

    db.flush()
    logger.info("Leave %s status set to %s", leave.id, leave.status)
    return leave
