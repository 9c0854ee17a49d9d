from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ems.core.access import get_employee_for_account
from ems.core.rbac import get_account_role_names
from ems.core.security import get_current_account
from ems.db.session import get_db
from ems.models.account import Account

router = APIRouter(tags=["auth"])


@router.get("/me")
def me(
    current_account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Get current account information including linked employee ID"""
    employee = get_employee_for_account(db, current_account)
    return {
        "id": current_account.id,
        "email": current_account.email,
        "full_name": current_account.full_name,
        "is_active": current_account.is_active,
        "roles": sorted(get_account_role_names(db, current_account)),
        "employee_id": employee.id if employee else None,
    }
