"""Pure leave-summary arithmetic: entitlements vs. approved days taken."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from leave_kernel.domain.leave import LeaveApplication, LeaveCategory, LeaveStatus

ZERO = Decimal("0")

# Short and half-day leave are drawn from the casual entitlement.
CASUAL_POOL: frozenset[LeaveCategory] = frozenset({
    LeaveCategory.CASUAL,
    LeaveCategory.SHORT_LEAVE,
    LeaveCategory.MORNING_LEAVE,
    LeaveCategory.AFTERNOON_LEAVE,
    LeaveCategory.MIDDAY_LEAVE,
})
VOCATION_POOL: frozenset[LeaveCategory] = frozenset({LeaveCategory.VOCATION})


@dataclass(frozen=True)
class LeaveEntitlement:
    staff_id: UUID
    year: int
    casual: Decimal = ZERO
    vocation: Decimal = ZERO
    past: Decimal = ZERO
    medical: Decimal = ZERO


@dataclass(frozen=True)
class LeaveSummaryRow:
    staff_id: UUID
    staff_name: str
    division_id: UUID | None
    casual_taken: Decimal
    vocation_taken: Decimal
    total_casual: Decimal
    total_vocation: Decimal
    total_past: Decimal
    total_medical: Decimal

    @property
    def casual_remaining(self) -> Decimal:
        return self.total_casual - self.casual_taken

    @property
    def vocation_remaining(self) -> Decimal:
        return self.total_vocation - self.vocation_taken


def summarize(
    staff: Iterable[tuple[UUID, str, UUID | None]],
    entitlements: Iterable[LeaveEntitlement],
    applications: Iterable[LeaveApplication],
) -> list[LeaveSummaryRow]:
    """One row per staff member, in ``staff`` order.

    Only ``Approved`` applications count as taken.  A member without an
    entitlement row gets zero totals.
    """
    by_staff = {e.staff_id: e for e in entitlements}
    casual: dict[UUID, Decimal] = {}
    vocation: dict[UUID, Decimal] = {}
    for app in applications:
        if app.status is not LeaveStatus.APPROVED:
            continue
        if app.leave_type in CASUAL_POOL:
            casual[app.requester_id] = casual.get(app.requester_id, ZERO) + app.leave_days
        elif app.leave_type in VOCATION_POOL:
            vocation[app.requester_id] = vocation.get(app.requester_id, ZERO) + app.leave_days

    rows = []
    for staff_id, name, division_id in staff:
        ent = by_staff.get(staff_id)
        rows.append(LeaveSummaryRow(
            staff_id=staff_id,
            staff_name=name,
            division_id=division_id,
            casual_taken=casual.get(staff_id, ZERO),
            vocation_taken=vocation.get(staff_id, ZERO),
            total_casual=ent.casual if ent else ZERO,
            total_vocation=ent.vocation if ent else ZERO,
            total_past=ent.past if ent else ZERO,
            total_medical=ent.medical if ent else ZERO,
        ))
    return rows
