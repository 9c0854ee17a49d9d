from pydantic import BaseModel, Field

from ems.schemas.department import DepartmentOut
from ems.schemas.leave import LeaveRequestOut


class EmployeeCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=320)
    phone_number: str | None = Field(default=None, max_length=50)
    role: str
    is_active: bool = True
    department_id: int
    leave_balance: int = Field(default=0, ge=0, description="Yearly leave quota in days")


class EmployeeUpdate(EmployeeCreate):
    id: int


class EmployeeOut(BaseModel):
    id: int
    full_name: str
    email: str
    phone_number: str | None
    role: str
    role_id: int | None
    is_active: bool
    department_id: int
    department_name: str | None
    manager_id: int | None
    account_id: int | None
    leave_balance: int


class EmployeeFormOptions(BaseModel):
    """Lookups needed to render the create/edit employee form"""
    departments: list[DepartmentOut]
    managers: list[EmployeeOut]
    roles: list[str]


class ManagerDetailsOut(BaseModel):
    employee_id: int
    full_name: str
    email: str
    department_id: int | None
    department_name: str | None


class EmployeeProfileOut(BaseModel):
    employee: EmployeeOut
    manager_name: str


class CurrentMonthInfoOut(BaseModel):
    employee: EmployeeOut
    manager_name: str
    current_month: str  # e.g. "October 2026"
    leave_requests: list[LeaveRequestOut]
    days_on_leave: int
    remaining_leave_balance: int
