"""
Module: leave_kernel.selectors.summary_selector
Responsibility: Per-staff leave summary for one year -- entitlements next
    to approved days taken.
Architecture position: Kernel > Selectors.  The arithmetic lives in the
    pure ``leave_kernel.domain.summary``; this module only gathers rows.

Invariants enforced:
    - Only Approved applications starting within ``year`` count as taken.
    - A staff member with no balance row gets zero entitlements.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import select

from leave_kernel.domain.leave import LeaveStatus
from leave_kernel.domain.summary import LeaveSummaryRow, summarize
from leave_kernel.models.leave_application import LeaveApplicationModel
from leave_kernel.models.leave_balance import LeaveBalanceModel
from leave_kernel.models.staff import StaffMemberModel
from leave_kernel.selectors.base import BaseSelector


class LeaveSummarySelector(BaseSelector[LeaveBalanceModel]):
    def summary(self, year: int, division_id: UUID | None = None) -> list[LeaveSummaryRow]:
        staff_stmt = select(StaffMemberModel).order_by(StaffMemberModel.name, StaffMemberModel.id)
        if division_id is not None:
            staff_stmt = staff_stmt.where(StaffMemberModel.division_id == division_id)
        staff = self.session.execute(staff_stmt).scalars().all()
        staff_ids = [m.id for m in staff]
        if not staff_ids:
            return []

        balances = self.session.execute(
            select(LeaveBalanceModel).where(
                LeaveBalanceModel.year == year,
                LeaveBalanceModel.staff_id.in_(staff_ids),
            )
        ).scalars().all()

        applications = self.session.execute(
            select(LeaveApplicationModel).where(
                LeaveApplicationModel.status == LeaveStatus.APPROVED.value,
                LeaveApplicationModel.requester_id.in_(staff_ids),
                LeaveApplicationModel.start_date >= date(year, 1, 1),
                LeaveApplicationModel.start_date <= date(year, 12, 31),
            )
        ).scalars().all()

        return summarize(
            [(m.id, m.name, m.division_id) for m in staff],
            [b.to_dto() for b in balances],
            [a.to_dto() for a in applications],
        )
