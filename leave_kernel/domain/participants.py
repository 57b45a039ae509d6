"""
Participant resolution at submission time.

Responsibility:
    From the staff directory (with each member's current role name),
    derive the candidate lists offered to a requester -- acting officers,
    recommenders, approvers -- and the auto-assigned subject-in-charge.

Architecture position:
    Kernel > Domain -- pure.  The role-name sets arrive as a ``RoleNames``
    value (built from configuration by ``leave_config.bridges``).

Non-goals:
    The workflow engine never calls this at transition time; it trusts the
    participant ids recorded on the application.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from leave_kernel.domain.leave import StaffType
from leave_kernel.domain.workflow import DEFAULT_HEAD_OF_DEPARTMENT_ROLE


@dataclass(frozen=True)
class RoleNames:
    """Role names that drive eligibility and escalation."""

    head_of_department: str = DEFAULT_HEAD_OF_DEPARTMENT_ROLE
    acting_excluded: frozenset[str] = frozenset({"Division CC", "Division Head", "HOD"})
    recommenders: frozenset[str] = frozenset({"Division CC", "Division Head", "ADS"})
    approvers: frozenset[str] = frozenset({"Division Head", "ADS", "HOD"})
    field_subject_officer: str = "Leave Subject Officer (Field)"
    office_subject_officer: str = "Leave Subject Officer (Office)"
    development_subject_officer: str = "Leave Subject Officer (DO)"
    development_designation_marker: str = "do"


@dataclass(frozen=True)
class StaffEntry:
    """A staff member as seen by participant resolution."""

    staff_id: UUID
    name: str
    role_name: str | None
    division_id: UUID | None
    staff_type: StaffType
    designation_grade: str | None = None


@dataclass(frozen=True)
class ParticipantCandidates:
    acting_officers: tuple[StaffEntry, ...]
    recommenders: tuple[StaffEntry, ...]
    approvers: tuple[StaffEntry, ...]
    subject_in_charge: StaffEntry | None

    @staticmethod
    def _ids(entries: Iterable[StaffEntry]) -> frozenset[UUID]:
        return frozenset(e.staff_id for e in entries)

    def is_acting_candidate(self, staff_id: UUID) -> bool:
        return staff_id in self._ids(self.acting_officers)

    def is_recommender_candidate(self, staff_id: UUID) -> bool:
        return staff_id in self._ids(self.recommenders)

    def is_approver_candidate(self, staff_id: UUID) -> bool:
        return staff_id in self._ids(self.approvers)


def subject_officer_role(requester: StaffEntry, role_names: RoleNames) -> str:
    """Role name of the subject-in-charge for ``requester``."""
    if requester.staff_type is StaffType.FIELD:
        return role_names.field_subject_officer
    designation = (requester.designation_grade or "").lower()
    if role_names.development_designation_marker in designation:
        return role_names.development_subject_officer
    return role_names.office_subject_officer


def resolve_participants(
    requester: StaffEntry,
    directory: Iterable[StaffEntry],
    role_names: RoleNames = RoleNames(),
) -> ParticipantCandidates:
    """Compute candidate lists and the subject-in-charge for ``requester``.

    Directory order is preserved in every list; the subject-in-charge is
    the first member holding the matching role.
    """
    staff = tuple(directory)

    acting = tuple(
        s for s in staff
        if s.division_id == requester.division_id
        and s.staff_id != requester.staff_id
        and (s.role_name or "") not in role_names.acting_excluded
    )
    recommenders = tuple(s for s in staff if s.role_name in role_names.recommenders)
    approvers = tuple(s for s in staff if s.role_name in role_names.approvers)

    target = subject_officer_role(requester, role_names)
    subject = next((s for s in staff if s.role_name == target), None)

    return ParticipantCandidates(
        acting_officers=acting,
        recommenders=recommenders,
        approvers=approvers,
        subject_in_charge=subject,
    )
