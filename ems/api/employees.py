from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ems.core.access import get_employee_for_account, resolve_manager_name
from ems.core.rbac import ADMIN, MANAGER, require_roles
from ems.core.security import get_current_account
from ems.db.session import get_db
from ems.models.account import Account
from ems.models.department import Department
from ems.models.employee import Employee
from ems.models.leave import LEAVE_APPROVED, LeaveRequest
from ems.models.rbac import Role
from ems.schemas.employee import (
    CurrentMonthInfoOut,
    EmployeeCreate,
    EmployeeFormOptions,
    EmployeeOut,
    EmployeeProfileOut,
    EmployeeUpdate,
    ManagerDetailsOut,
)
from ems.schemas.pagination import PaginatedResponse, PaginationMeta
from ems.api.departments import department_to_out
from ems.api.leaves import leave_to_out
from ems.services import employees as employee_service

router = APIRouter(prefix="/employees", tags=["employees"])


def employee_to_out(e: Employee) -> EmployeeOut:
    return EmployeeOut(
        id=e.id,
        full_name=e.full_name,
        email=e.email,
        phone_number=e.phone_number,
        role=e.role,
        role_id=e.role_id,
        is_active=e.is_active,
        department_id=e.department_id,
        department_name=e.department.name if e.department else None,
        manager_id=e.manager_id,
        account_id=e.account_id,
        leave_balance=e.leave_balance,
    )


def month_bounds(today: date) -> tuple[date, date]:
    start = today.replace(day=1)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


def leaves_this_month(db: Session, employee_id: int) -> list[LeaveRequest]:
    start, end = month_bounds(date.today())
    return (
        db.query(LeaveRequest)
        .filter(
            LeaveRequest.employee_id == employee_id,
            LeaveRequest.start_date >= start,
            LeaveRequest.start_date < end,
        )
        .order_by(LeaveRequest.start_date.asc())
        .all()
    )


def _current_employee_or_404(db: Session, account: Account) -> Employee:
    employee = get_employee_for_account(db, account)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found for current user.")
    return employee


@router.get("")
def list_employees(
    search: str | None = Query(default=None, description="Search by name or email"),
    limit: int = Query(default=100, ge=1, le=500, description="Maximum number of results"),
    offset: int = Query(default=0, ge=0, description="Number of results to skip"),
    include_pagination: bool = Query(default=False, description="Include pagination metadata"),
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    """
    List all employees with their department name.

    Use ?include_pagination=true to get pagination metadata.
    """
    query = db.query(Employee)

    if search:
        search_term = f"%{search.lower()}%"
        query = query.filter(
            (Employee.full_name.ilike(search_term))
            | (Employee.email.ilike(search_term))
        )

    total = query.count()

    employees = query.order_by(Employee.full_name.asc()).offset(offset).limit(limit).all()
    items = [employee_to_out(e) for e in employees]

    if include_pagination:
        return PaginatedResponse(
            items=items,
            pagination=PaginationMeta(
                total=total,
                limit=limit,
                offset=offset,
                has_more=(offset + len(items) < total),
            ),
        )
    return items


@router.get("/filter", response_model=list[EmployeeOut])
def filter_employees(
    department_id: int | None = Query(default=None),
    role: str | None = Query(default=None),
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN)),
):
    q = db.query(Employee)
    if department_id is not None:
        q = q.filter(Employee.department_id == department_id)
    if role:
        q = q.filter(Employee.role == role)
    return [employee_to_out(e) for e in q.order_by(Employee.full_name.asc()).all()]


@router.get("/form-options", response_model=EmployeeFormOptions)
def form_options(
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    departments = db.query(Department).order_by(Department.name.asc()).all()
    employees = db.query(Employee).order_by(Employee.full_name.asc()).all()
    roles = [r[0] for r in db.query(Role.name).order_by(Role.name.asc()).all()]
    return EmployeeFormOptions(
        departments=[department_to_out(d) for d in departments],
        managers=[employee_to_out(e) for e in employees],
        roles=roles,
    )


@router.get("/managers", response_model=list[ManagerDetailsOut])
def list_managers(
    db: Session = Depends(get_db),
    _: Account = Depends(get_current_account),
):
    managers = db.query(Employee).filter(Employee.role == MANAGER).order_by(Employee.full_name.asc()).all()
    out = []
    for m in managers:
        department = (
            db.query(Department)
            .filter(Department.manager_id == m.id)
            .order_by(Department.id.asc())
            .first()
        )
        out.append(
            ManagerDetailsOut(
                employee_id=m.id,
                full_name=m.full_name,
                email=m.email,
                department_id=department.id if department else None,
                department_name=department.name if department else None,
            )
        )
    return out


@router.get("/my-leaves")
def my_leaves(
    employee_id: int | None = Query(default=None, description="Defaults to the caller's employee record"),
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account),
):
    """Leave requests starting in the current month."""
    if employee_id is None:
        employee = _current_employee_or_404(db, current_account)
    else:
        employee = db.get(Employee, employee_id)
        if not employee:
            raise HTTPException(status_code=404, detail="Employee record not found.")
    return [leave_to_out(l) for l in leaves_this_month(db, employee.id)]


@router.get("/profile", response_model=EmployeeProfileOut)
def profile(
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account),
):
    employee = _current_employee_or_404(db, current_account)
    return EmployeeProfileOut(
        employee=employee_to_out(employee),
        manager_name=resolve_manager_name(db, employee),
    )


@router.get("/current-month-info", response_model=CurrentMonthInfoOut)
def current_month_info(
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account),
):
    """
    Current month summary for the caller: requests starting this month,
    calendar days of approved leave, and what is left of the yearly quota.
    """
    employee = _current_employee_or_404(db, current_account)
    monthly = leaves_this_month(db, employee.id)

    days_on_leave = sum(
        (l.end_date - l.start_date).days + 1 for l in monthly if l.status == LEAVE_APPROVED
    )

    return CurrentMonthInfoOut(
        employee=employee_to_out(employee),
        manager_name=resolve_manager_name(db, employee),
        current_month=date.today().strftime("%B %Y"),
        leave_requests=[leave_to_out(l) for l in monthly],
        days_on_leave=days_on_leave,
        remaining_leave_balance=employee.leave_balance - days_on_leave,
    )


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    employee = db.get(Employee, employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee_to_out(employee)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    employee = employee_service.create_employee(db, payload, actor=current_account)
    return employee_to_out(employee)


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    employee = employee_service.update_employee(db, employee_id, payload, actor=current_account)
    return employee_to_out(employee)


@router.delete("/{employee_id}")
def delete_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(ADMIN)),
):
    employee_service.delete_employee(db, employee_id, actor=current_account)
    return {"message": "Employee deleted and changes updated successfully."}
