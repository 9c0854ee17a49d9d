from ems.models.account import Account
from ems.models.account_activity import AccountActivity
from ems.models.audit_log import DepartmentLog, EmployeeLog
from ems.models.department import Department
from ems.models.employee import Employee
from ems.models.leave import LeaveBalance, LeaveRequest
from ems.models.rbac import Role, AccountRole

__all__ = [ "Account", "AccountActivity", "DepartmentLog", "EmployeeLog",
           "Department", "Employee", "LeaveBalance", "LeaveRequest",
           "Role", "AccountRole" ]
