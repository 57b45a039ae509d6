"""
Module: leave_kernel.models.leave_balance
Responsibility: ORM persistence for yearly leave entitlements.

Architecture position: Kernel > Models.

Invariants enforced:
    - One row per (staff_id, year).
    - Entitlements are non-negative.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from leave_kernel.db.base import TimestampedBase, UUIDString
from leave_kernel.domain.summary import LeaveEntitlement


class LeaveBalanceModel(TimestampedBase):
    __tablename__ = "leave_balances"

    __table_args__ = (
        UniqueConstraint("staff_id", "year", name="uq_leave_balances_staff_year"),
        CheckConstraint(
            "casual >= 0 AND vocation >= 0 AND past >= 0 AND medical >= 0",
            name="ck_leave_balances_non_negative",
        ),
    )

    staff_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("staff_members.id"), nullable=False,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    casual: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    vocation: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    past: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    medical: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    def __repr__(self) -> str:
        return f"<LeaveBalance staff={self.staff_id} year={self.year}>"

    def to_dto(self) -> LeaveEntitlement:
        return LeaveEntitlement(
            staff_id=self.staff_id,
            year=self.year,
            casual=Decimal(self.casual),
            vocation=Decimal(self.vocation),
            past=Decimal(self.past),
            medical=Decimal(self.medical),
        )
