"""
StaffRoleResolver -- the actor's role binding at decision time.

Responsibility:
    Turns an actor id into an ``ActorContext`` (role name and typed
    permissions) by reading the current role assignment.  Nothing is
    cached: a role change is visible to the very next decision.

Architecture position:
    Kernel > Services.  Read-only; runs inside the caller's transaction so
    the role read and the workflow write see the same snapshot.

Failure modes:
    - InvalidPermissionError when the stored role permissions are
      malformed.  An unknown actor is NOT an error: it resolves to an
      empty context and fails authorization downstream.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from leave_kernel.domain.workflow import ActorContext
from leave_kernel.models.staff import StaffMemberModel


class StaffRoleResolver:
    """Resolves actors against the staff directory."""

    def __init__(self, session: Session):
        self._session = session

    def resolve(self, actor_id: UUID) -> ActorContext:
        member = self._session.get(StaffMemberModel, actor_id)
        if member is None or member.role is None:
            return ActorContext(actor_id=actor_id)
        return ActorContext(
            actor_id=actor_id,
            role_name=member.role.name,
            permissions=member.role.permission_set(),
        )
