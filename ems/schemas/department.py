from pydantic import BaseModel, Field


class DepartmentCreate(BaseModel):
    # blank names are rejected by the service with a 400, not by the schema
    name: str = Field(default="", max_length=200)
    manager_id: int | None = None


class DepartmentUpdate(DepartmentCreate):
    id: int


class DepartmentOut(BaseModel):
    id: int
    name: str
    manager_id: int | None
    manager_name: str | None
