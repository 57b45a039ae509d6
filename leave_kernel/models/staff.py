"""
Module: leave_kernel.models.staff
Responsibility: ORM persistence for roles and staff members -- the
    directory that participant resolution and role resolution read.

Architecture position: Kernel > Models.  May import from db/base.py and
    pure domain types only.

Invariants enforced:
    - Role names are unique; escalation and eligibility match on them.
    - Role permissions are stored raw (JSON) and only ever leave this
      layer through ``parse_permissions``.
    - staff_type is constrained to the StaffType values.

Failure modes:
    - IntegrityError on a duplicate role name or staff e-mail.
    - InvalidPermissionError from ``RoleModel.permission_set`` when stored
      JSON names an unknown resource or action.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leave_kernel.db.base import TimestampedBase, UUIDString
from leave_kernel.domain.leave import StaffType
from leave_kernel.domain.participants import StaffEntry
from leave_kernel.domain.permissions import PermissionSet, parse_permissions

_STAFF_TYPES = ", ".join(f"'{t.value}'" for t in StaffType)


class RoleModel(TimestampedBase):
    """A named role with its raw permission grants."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    permissions: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict,
    )

    def __repr__(self) -> str:
        return f"<Role {self.name}>"

    def permission_set(self) -> PermissionSet:
        return parse_permissions(self.permissions)


class StaffMemberModel(TimestampedBase):
    """
    A staff member and their current role assignment.

    Contract:
        ``role`` is read fresh on every workflow decision; nothing caches
        a member's role between calls.
    """

    __tablename__ = "staff_members"

    __table_args__ = (
        CheckConstraint(
            f"staff_type IN ({_STAFF_TYPES})",
            name="ck_staff_members_valid_staff_type",
        ),
        Index("ix_staff_members_division", "division_id"),
        Index("ix_staff_members_role", "role_id"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    role_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("roles.id"), nullable=True,
    )
    division_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    staff_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StaffType.OFFICE.value,
    )
    designation_grade: Mapped[str | None] = mapped_column(String(100), nullable=True)

    role: Mapped[RoleModel | None] = relationship(RoleModel, lazy="joined")

    def __repr__(self) -> str:
        return f"<StaffMember {self.name} role={self.role.name if self.role else None}>"

    def to_entry(self) -> StaffEntry:
        """Convert to the directory entry used by participant resolution."""
        return StaffEntry(
            staff_id=self.id,
            name=self.name,
            role_name=self.role.name if self.role else None,
            division_id=self.division_id,
            staff_type=StaffType(self.staff_type),
            designation_grade=self.designation_grade,
        )
