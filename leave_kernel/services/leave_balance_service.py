"""
leave_kernel.services.leave_balance_service -- Yearly leave entitlements.

Responsibility:
    Create or update a staff member's entitlements for one year.

Architecture position:
    Kernel > Services.

Failure modes:
    - PermissionDeniedError if the acting administrator lacks
      ``leave:manage_balance``.
    - StaffMemberNotFoundError if the staff member does not exist.
    - InvalidLeaveRequestError for a negative or non-numeric entitlement.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from leave_kernel.domain.permissions import PermissionAction, Resource
from leave_kernel.domain.summary import LeaveEntitlement
from leave_kernel.exceptions import (
    InvalidLeaveRequestError,
    PermissionDeniedError,
    StaffMemberNotFoundError,
)
from leave_kernel.logging_config import get_logger
from leave_kernel.models.leave_balance import LeaveBalanceModel
from leave_kernel.models.staff import StaffMemberModel
from leave_kernel.services.base import BaseService
from leave_kernel.services.role_resolver import StaffRoleResolver

logger = get_logger("services.leave_balance")


def _entitlement(name: str, value: Decimal | int | str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise InvalidLeaveRequestError(name, f"{value!r} is not a number") from None
    if not amount.is_finite() or amount < 0:
        raise InvalidLeaveRequestError(name, "must be zero or positive")
    return amount


class LeaveBalanceService(BaseService[LeaveBalanceModel]):
    def __init__(self, session: Session, role_resolver: StaffRoleResolver | None = None):
        super().__init__(session)
        self._resolver = role_resolver or StaffRoleResolver(session)

    def set_balance(
        self,
        actor_id: UUID,
        staff_id: UUID,
        year: int,
        *,
        casual: Decimal | int | str = 0,
        vocation: Decimal | int | str = 0,
        past: Decimal | int | str = 0,
        medical: Decimal | int | str = 0,
    ) -> LeaveEntitlement:
        """Upsert ``staff_id``'s entitlements for ``year``."""
        actor = self._resolver.resolve(actor_id)
        if not actor.permissions.allows(Resource.LEAVE, PermissionAction.MANAGE_BALANCE):
            raise PermissionDeniedError(str(actor_id), "leave:manage_balance")

        if self.session.get(StaffMemberModel, staff_id) is None:
            raise StaffMemberNotFoundError(str(staff_id))

        values = {
            "casual": _entitlement("casual", casual),
            "vocation": _entitlement("vocation", vocation),
            "past": _entitlement("past", past),
            "medical": _entitlement("medical", medical),
        }

        model = self.session.execute(
            select(LeaveBalanceModel).where(
                LeaveBalanceModel.staff_id == staff_id,
                LeaveBalanceModel.year == year,
            )
        ).scalar_one_or_none()

        if model is None:
            model = LeaveBalanceModel(staff_id=staff_id, year=year, **values)
            self.session.add(model)
        else:
            for key, value in values.items():
                setattr(model, key, value)
        self.session.flush()

        logger.info(
            "leave_balance_set",
            extra={
                "staff_id": str(staff_id),
                "year": year,
                "actor_id": str(actor_id),
                **values,
            },
        )
        return model.to_dto()
