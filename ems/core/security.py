from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ems.db.session import get_db
from ems.models.account import Account
from ems.models.account_activity import AccountActivity


def get_current_account(
    request: Request,
    x_user_email: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> Account:
    """
    DEV AUTH: pass X-User-Email header to simulate logged-in account.
    Example: X-User-Email: admin@local.test

    Every resolved request is appended to the account's activity trail.
    """
    if not x_user_email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access. Please login.",
        )

    account = (
        db.query(Account)
        .filter(func.lower(Account.email) == x_user_email.strip().lower())
        .one_or_none()
    )
    if not account or not account.is_active or account.is_locked:
        raise HTTPException(status_code=401, detail="Invalid, inactive or locked account")

    db.add(AccountActivity(account_id=account.id, method=request.method, path=request.url.path))
    return account
