from pydantic import BaseModel


class DepartmentHeadcount(BaseModel):
    name: str
    employee_count: int


class RecentEmployee(BaseModel):
    id: int
    full_name: str
    role: str
    department_id: int


class DashboardStats(BaseModel):
    """Admin dashboard counters"""
    current_user_name: str
    current_role: str | None
    total_employees: int = 0
    active_employees: int = 0
    total_departments: int = 0
    total_leave_requests: int = 0
    approved_leaves: int = 0
    pending_leaves: int = 0
    rejected_leaves: int = 0
    recent_employees: list[RecentEmployee] = []
    department_stats: list[DepartmentHeadcount] = []
