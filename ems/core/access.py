from sqlalchemy.orm import Session

from ems.models.account import Account
from ems.models.employee import Employee


def get_employee_for_account(db: Session, account: Account) -> Employee | None:
    return db.query(Employee).filter(Employee.account_id == account.id).one_or_none()


def resolve_manager_name(db: Session, employee: Employee) -> str:
    if employee.manager_id is None:
        return "N/A"
    manager = db.get(Employee, employee.manager_id)
    return manager.full_name if manager else "N/A"
