import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from ems.core.errors import InternalFailure
from ems.models.employee import Employee
from ems.models.leave import LeaveBalance

logger = logging.getLogger(__name__)


def calculate_business_days(start: date, end: date) -> int:
    """Days in [start, end] that are not Saturday or Sunday; 0 for an inverted range."""
    if start > end:
        return 0

    days = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


def get_balance(db: Session, employee_id: int) -> LeaveBalance | None:
    return db.query(LeaveBalance).filter(LeaveBalance.employee_id == employee_id).one_or_none()


def ensure_balance(db: Session, employee_id: int, requested_days: int) -> LeaveBalance | None:
    """
    Returns the employee's balance if it can cover requested_days, None otherwise.

    An employee without a balance record gets one seeded from their quota
    (taken = 0). That first grant is returned without a capacity check.
    """
    balance = get_balance(db, employee_id)
    if balance is not None:
        if balance.remaining >= requested_days:
            return balance
        return None

    employee = db.get(Employee, employee_id)
    if employee is None:
        return None

    balance = LeaveBalance(
        employee_id=employee_id,
        total_leaves=employee.leave_balance,
        leaves_taken=0,
    )
    db.add(balance)
    db.flush()
    logger.info("Provisioned leave balance for employee %s (%s days)", employee_id, balance.total_leaves)
    return balance


def deduct_leave(db: Session, employee_id: int, start: date, end: date) -> LeaveBalance:
    days = calculate_business_days(start, end)
    balance = ensure_balance(db, employee_id, days) if days > 0 else None
    if balance is None:
        logger.error(
            "Could not deduct %s day(s) for employee %s (%s..%s)", days, employee_id, start, end
        )
        raise InternalFailure("Failed to update leave balance.")

    balance.leaves_taken += days
    db.flush()
    return balance


def adjust_total(db: Session, employee_id: int, delta: int) -> LeaveBalance | None:
    """Add a quota delta to the balance total; quota edits never reset what was taken."""
    balance = get_balance(db, employee_id)
    if balance is None or delta == 0:
        return balance
    balance.total_leaves += delta
    db.flush()
    return balance
