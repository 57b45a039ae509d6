"""
leave_kernel.services.staff_directory_service -- Roles and staff records.

Responsibility:
    Defines roles (validated permission grants), registers staff members
    and assigns roles.  Role permissions enter the system only through
    ``parse_permissions`` and are stored in canonical form.

Architecture position:
    Kernel > Services.

Failure modes:
    - InvalidPermissionError for malformed permission data.
    - RoleNotFoundError / StaffMemberNotFoundError for unknown ids.
    - InvalidLeaveRequestError for an empty role or staff name.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from uuid import UUID

from sqlalchemy import select

from leave_kernel.domain.leave import StaffType
from leave_kernel.domain.participants import StaffEntry
from leave_kernel.domain.permissions import parse_permissions
from leave_kernel.exceptions import (
    InvalidLeaveRequestError,
    RoleNotFoundError,
    StaffMemberNotFoundError,
)
from leave_kernel.logging_config import get_logger
from leave_kernel.models.staff import RoleModel, StaffMemberModel
from leave_kernel.services.base import BaseService

logger = get_logger("services.staff_directory")


class StaffDirectoryService(BaseService[StaffMemberModel]):
    """Write side of the staff directory."""

    def define_role(
        self,
        name: str,
        permissions: Mapping[str, Iterable[str]] | Iterable[str] | None = None,
    ) -> UUID:
        """Create the role ``name``, or replace its permissions if it exists.

        Returns:
            The role id.
        """
        if not name or not name.strip():
            raise InvalidLeaveRequestError("name", "role name must not be empty")
        grants = parse_permissions(permissions)

        role = self.session.execute(
            select(RoleModel).where(RoleModel.name == name.strip())
        ).scalar_one_or_none()
        if role is None:
            role = RoleModel(name=name.strip(), permissions=grants.to_raw())
            self.session.add(role)
        else:
            role.permissions = grants.to_raw()
        self.session.flush()

        logger.info(
            "role_defined",
            extra={"role_id": str(role.id), "role_name": role.name},
        )
        return role.id

    def register_staff(
        self,
        name: str,
        *,
        email: str | None = None,
        role_id: UUID | None = None,
        division_id: UUID | None = None,
        staff_type: StaffType | str = StaffType.OFFICE,
        designation_grade: str | None = None,
    ) -> StaffEntry:
        if not name or not name.strip():
            raise InvalidLeaveRequestError("name", "staff name must not be empty")
        try:
            staff_type = StaffType(staff_type)
        except ValueError:
            raise InvalidLeaveRequestError(
                "staff_type", f"unknown staff type {staff_type!r}",
            ) from None
        if role_id is not None:
            self._load_role(role_id)

        member = StaffMemberModel(
            name=name.strip(),
            email=email,
            role_id=role_id,
            division_id=division_id,
            staff_type=staff_type.value,
            designation_grade=designation_grade,
        )
        self.session.add(member)
        self.session.flush()
        self.session.refresh(member)

        logger.info(
            "staff_member_registered",
            extra={"staff_id": str(member.id), "staff_type": staff_type.value},
        )
        return member.to_entry()

    def assign_role(self, staff_id: UUID, role_id: UUID | None) -> StaffEntry:
        """Bind ``staff_id`` to ``role_id`` (``None`` clears the role)."""
        member = self.session.get(StaffMemberModel, staff_id)
        if member is None:
            raise StaffMemberNotFoundError(str(staff_id))

        member.role = self._load_role(role_id) if role_id is not None else None
        self.session.flush()

        logger.info(
            "staff_role_assigned",
            extra={
                "staff_id": str(staff_id),
                "role_id": str(role_id) if role_id else None,
            },
        )
        return member.to_entry()

    def _load_role(self, role_id: UUID) -> RoleModel:
        role = self.session.get(RoleModel, role_id)
        if role is None:
            raise RoleNotFoundError(str(role_id))
        return role
