from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ems.core.security import get_current_account
from ems.db.session import get_db
from ems.models.account import Account
from ems.models.rbac import Role, AccountRole

ADMIN = "Admin"
MANAGER = "Manager"
EMPLOYEE = "Employee"

ROLE_NAMES = [ADMIN, MANAGER, EMPLOYEE]


def find_role_by_name(db: Session, name: str | None) -> Role | None:
    """Role catalog lookup; None when the name is unknown."""
    if not name:
        return None
    return db.query(Role).filter(Role.name == name).one_or_none()


def get_account_role_names(db: Session, account: Account) -> set[str]:
    rows = (
        db.query(Role.name)
        .join(AccountRole, AccountRole.role_id == Role.id)
        .filter(AccountRole.account_id == account.id)
        .all()
    )
    return {r[0] for r in rows}


def set_account_role(db: Session, account_id: int, role: Role) -> None:
    """Replace every role of the account with a single one."""
    db.query(AccountRole).filter(AccountRole.account_id == account_id).delete(synchronize_session="fetch")
    db.add(AccountRole(account_id=account_id, role_id=role.id))
    db.flush()


def require_roles(*required: str):
    """
    Usage:
      Depends(require_roles("Admin"))
      Depends(require_roles("Admin", "Manager"))  # any-of
    """
    required_set = set(required)

    def _dep(
        db: Session = Depends(get_db),
        account: Account = Depends(get_current_account),
    ) -> Account:
        role_names = get_account_role_names(db, account)
        if not (role_names & required_set):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: You do not have permission.",
            )
        return account

    return _dep
