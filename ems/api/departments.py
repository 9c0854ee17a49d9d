from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ems.core.rbac import ADMIN, MANAGER, require_roles
from ems.db.session import get_db
from ems.models.account import Account
from ems.models.department import Department
from ems.schemas.department import DepartmentCreate, DepartmentOut, DepartmentUpdate
from ems.services import departments as department_service

router = APIRouter(prefix="/departments", tags=["departments"])


def department_to_out(d: Department) -> DepartmentOut:
    return DepartmentOut(
        id=d.id,
        name=d.name,
        manager_id=d.manager_id,
        manager_name=d.manager_name,
    )


@router.get("", response_model=list[DepartmentOut])
def list_departments(
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    rows = db.query(Department).order_by(Department.name.asc()).all()
    return [department_to_out(d) for d in rows]


@router.get("/{department_id}", response_model=DepartmentOut)
def get_department(
    department_id: int,
    db: Session = Depends(get_db),
    _: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    department = db.get(Department, department_id)
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")
    return department_to_out(department)


@router.post("", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED)
def create_department(
    payload: DepartmentCreate,
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    """
    Create a department, optionally with a manager.

    The manager is promoted to the Manager role and moved into the new department.
    """
    department = department_service.create_department(db, payload, actor=current_account)
    return department_to_out(department)


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(
    department_id: int,
    payload: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    department = department_service.update_department(db, department_id, payload, actor=current_account)
    return department_to_out(department)


@router.delete("/{department_id}")
def delete_department(
    department_id: int,
    db: Session = Depends(get_db),
    current_account: Account = Depends(require_roles(ADMIN, MANAGER)),
):
    department_service.delete_department(db, department_id, actor=current_account)
    return {"message": "Department deleted successfully."}
