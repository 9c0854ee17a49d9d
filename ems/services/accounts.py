"""Narrow view of the external account directory used by the employee lifecycle."""
import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ems.models.account import Account

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_account_by_email(db: Session, email: str) -> Account | None:
    return (
        db.query(Account)
        .filter(func.lower(Account.email) == normalize_email(email))
        .one_or_none()
    )


def lock_account(db: Session, account: Account) -> Account:
    """Block any further login for the account; the row itself is kept."""
    account.is_locked = True
    account.locked_at = datetime.utcnow()
    db.flush()
    logger.info("Account %s locked", account.id)
    return account
