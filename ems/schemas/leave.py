from datetime import date, datetime
from pydantic import BaseModel, Field


class LeaveApply(BaseModel):
    employee_id: int
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=2000)
    status: str | None = None  # only "Approved" is honoured; anything else files as Pending


class LeaveStatusUpdate(BaseModel):
    status: str | None = Field(default=None, max_length=20)


class LeaveRequestOut(BaseModel):
    id: int
    employee_id: int
    employee_name: str | None
    start_date: date
    end_date: date
    reason: str | None
    status: str
    request_date: datetime
    business_days: int


class LeaveBalanceOut(BaseModel):
    employee_id: int
    total_leaves: int
    leaves_taken: int
    remaining: int


class LeaveActionResult(BaseModel):
    message: str
    leave: LeaveRequestOut
