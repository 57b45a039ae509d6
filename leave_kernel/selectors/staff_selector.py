"""
Module: leave_kernel.selectors.staff_selector
Responsibility: Read access to the staff directory as ``StaffEntry`` values.
Architecture position: Kernel > Selectors.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from leave_kernel.domain.participants import StaffEntry
from leave_kernel.exceptions import StaffMemberNotFoundError
from leave_kernel.models.staff import StaffMemberModel
from leave_kernel.selectors.base import BaseSelector


class StaffSelector(BaseSelector[StaffMemberModel]):
    def get(self, staff_id: UUID) -> StaffEntry:
        member = self.session.get(StaffMemberModel, staff_id)
        if member is None:
            raise StaffMemberNotFoundError(str(staff_id))
        return member.to_entry()

    def directory(self, division_id: UUID | None = None) -> list[StaffEntry]:
        """All staff, ordered by name, optionally limited to one division."""
        stmt = select(StaffMemberModel).order_by(StaffMemberModel.name, StaffMemberModel.id)
        if division_id is not None:
            stmt = stmt.where(StaffMemberModel.division_id == division_id)
        return [m.to_entry() for m in self.session.execute(stmt).scalars().all()]
