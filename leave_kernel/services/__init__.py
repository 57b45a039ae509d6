"""Services for the leave kernel (write side)."""

from leave_kernel.services.leave_balance_service import LeaveBalanceService
from leave_kernel.services.leave_submission_service import LeaveSubmissionService
from leave_kernel.services.leave_workflow_service import LeaveWorkflowService
from leave_kernel.services.role_resolver import StaffRoleResolver
from leave_kernel.services.staff_directory_service import StaffDirectoryService

__all__ = [
    "LeaveBalanceService",
    "LeaveSubmissionService",
    "LeaveWorkflowService",
    "StaffDirectoryService",
    "StaffRoleResolver",
]
