from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from ems.core.rbac import ADMIN, get_account_role_names, require_roles
from ems.db.session import get_db
from ems.models.account import Account
from ems.models.department import Department
from ems.models.employee import Employee
from ems.models.leave import LEAVE_APPROVED, LEAVE_PENDING, LEAVE_REJECTED, LeaveRequest
from ems.schemas.stats import DashboardStats, DepartmentHeadcount, RecentEmployee

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardStats)
def dashboard(
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(ADMIN)),
):
    leaves_by_status = dict(
        db.query(LeaveRequest.status, func.count(LeaveRequest.id))
        .group_by(LeaveRequest.status)
        .all()
    )

    headcounts = (
        db.query(Department.name, func.count(Employee.id))
        .outerjoin(Employee, Employee.department_id == Department.id)
        .group_by(Department.id, Department.name)
        .order_by(Department.name.asc())
        .all()
    )

    recent = db.query(Employee).order_by(Employee.id.desc()).limit(5).all()
    role_names = sorted(get_account_role_names(db, current_account))

    return DashboardStats(
        current_user_name=current_account.full_name,
        current_role=role_names[0] if role_names else None,
        total_employees=db.query(Employee).count(),
        active_employees=db.query(Employee).filter(Employee.is_active.is_(True)).count(),
        total_departments=db.query(Department).count(),
        total_leave_requests=sum(leaves_by_status.values()),
        approved_leaves=leaves_by_status.get(LEAVE_APPROVED, 0),
        pending_leaves=leaves_by_status.get(LEAVE_PENDING, 0),
        rejected_leaves=leaves_by_status.get(LEAVE_REJECTED, 0),
        recent_employees=[
            RecentEmployee(id=e.id, full_name=e.full_name, role=e.role, department_id=e.department_id)
            for e in recent
        ],
        department_stats=[DepartmentHeadcount(name=name, employee_count=count) for name, count in headcounts],
    )
