"""
Service-level tests for business-day counting and the leave balance.
"""
from datetime import date

import pytest

from ems.core.errors import InternalFailure
from ems.services import leave_accounting
from tests.helpers import (
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    create_department,
    create_employee,
    ensure_roles,
    get_balance,
)


def test_business_days_single_day():
    assert leave_accounting.calculate_business_days(MONDAY, MONDAY) == 1
    assert leave_accounting.calculate_business_days(SATURDAY, SATURDAY) == 0
    assert leave_accounting.calculate_business_days(SUNDAY, SUNDAY) == 0


def test_business_days_full_week_and_weekend_span():
    assert leave_accounting.calculate_business_days(MONDAY, FRIDAY) == 5
    # Friday .. next Monday spans a weekend
    assert leave_accounting.calculate_business_days(FRIDAY, date(2024, 1, 8)) == 2
    assert leave_accounting.calculate_business_days(MONDAY, date(2024, 1, 14)) == 10


def test_business_days_inverted_range_is_zero():
    assert leave_accounting.calculate_business_days(FRIDAY, MONDAY) == 0


def test_ensure_balance_provisions_from_quota(db_session):
    ensure_roles(db_session)
    dept = create_department(db_session, "Ops")
    emp = create_employee(db_session, "Nia New", "nia@local.test", dept, role="Manager", quota=3, with_balance=False)

    # first grant is returned even when the request exceeds the quota
    balance = leave_accounting.ensure_balance(db_session, emp.id, 10)
    assert balance is not None
    assert balance.total_leaves == 3
    assert balance.leaves_taken == 0


def test_ensure_balance_existing_record(db_session):
    ensure_roles(db_session)
    dept = create_department(db_session, "Ops")
    emp = create_employee(db_session, "Otto", "otto@local.test", dept, role="Manager", quota=5, taken=3)

    assert leave_accounting.ensure_balance(db_session, emp.id, 2) is not None
    assert leave_accounting.ensure_balance(db_session, emp.id, 3) is None


def test_ensure_balance_unknown_employee(db_session):
    assert leave_accounting.ensure_balance(db_session, 999, 1) is None


def test_deduct_leave_adds_business_days(db_session):
    ensure_roles(db_session)
    dept = create_department(db_session, "Ops")
    emp = create_employee(db_session, "Otto", "otto@local.test", dept, role="Manager", quota=10)

    balance = leave_accounting.deduct_leave(db_session, emp.id, MONDAY, FRIDAY)
    assert balance.leaves_taken == 5
    assert balance.remaining == 5


def test_deduct_leave_fails_when_balance_cannot_cover(db_session):
    ensure_roles(db_session)
    dept = create_department(db_session, "Ops")
    emp = create_employee(db_session, "Otto", "otto@local.test", dept, role="Manager", quota=2)

    with pytest.raises(InternalFailure) as exc:
        leave_accounting.deduct_leave(db_session, emp.id, MONDAY, FRIDAY)
    assert exc.value.status_code == 500
    assert exc.value.message == "Failed to update leave balance."
    assert get_balance(db_session, emp).leaves_taken == 0


def test_deduct_leave_fails_on_weekend_only_range(db_session):
    ensure_roles(db_session)
    dept = create_department(db_session, "Ops")
    emp = create_employee(db_session, "Otto", "otto@local.test", dept, role="Manager", quota=2)

    with pytest.raises(InternalFailure):
        leave_accounting.deduct_leave(db_session, emp.id, SATURDAY, SUNDAY)


def test_adjust_total_keeps_taken(db_session):
    ensure_roles(db_session)
    dept = create_department(db_session, "Ops")
    emp = create_employee(db_session, "Otto", "otto@local.test", dept, role="Manager", quota=10, taken=4)

    balance = leave_accounting.adjust_total(db_session, emp.id, 5)
    assert balance.total_leaves == 15
    assert balance.leaves_taken == 4

    balance = leave_accounting.adjust_total(db_session, emp.id, -3)
    assert balance.total_leaves == 12
