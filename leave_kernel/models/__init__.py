"""ORM models for the leave kernel."""

from leave_kernel.models.leave_application import LeaveApplicationModel
from leave_kernel.models.leave_balance import LeaveBalanceModel
from leave_kernel.models.staff import RoleModel, StaffMemberModel

__all__ = [
    "LeaveApplicationModel",
    "LeaveBalanceModel",
    "RoleModel",
    "StaffMemberModel",
]
