"""Selectors for the leave kernel (read side)."""

from leave_kernel.selectors.leave_selector import LeaveSelector
from leave_kernel.selectors.staff_selector import StaffSelector
from leave_kernel.selectors.summary_selector import LeaveSummarySelector

__all__ = [
    "LeaveSelector",
    "LeaveSummarySelector",
    "StaffSelector",
]
