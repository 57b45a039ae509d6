"""
Tests for LeaveWorkflowService.

Covers:
- The full approval chain against a real database
- Exactly one comment column written per transition
- updated_by_id recorded, updated_at server-assigned
- Not found / unknown action / invalid transition / unauthorized
- Re-applying an action after the record moved on
- Head-of-Department escalation resolved from the current role
- Requester cancellation
- Structured log events
"""

from uuid import uuid4

import pytest

from leave_kernel.domain.leave import LeaveAction, LeaveStatus
from leave_kernel.domain.workflow import Approve, Recommend
from leave_kernel.exceptions import (
    InvalidTransitionError,
    LeaveApplicationNotFoundError,
    UnauthorizedActorError,
    UnknownActionError,
)
from leave_kernel.selectors.leave_selector import LeaveSelector
from leave_kernel.services.leave_workflow_service import LeaveWorkflowService
from leave_kernel.services.staff_directory_service import StaffDirectoryService


@pytest.fixture
def service(session, role_names):
    return LeaveWorkflowService(session, hod_role_name=role_names.head_of_department)


class TestHappyPath:
    def test_full_chain_to_approved(self, service, session, submit_application, world):
        app = submit_application()
        assert app.status is LeaveStatus.PENDING_ACTING_ACCEPTANCE

        app = service.apply_action(app.id, LeaveAction.ACCEPT_ACTING, world.acting_officer_id, "Covering")
        assert app.status is LeaveStatus.PENDING
        assert app.comments.acting == "Covering"

        app = service.apply_action(app.id, Recommend("Fine by me"), world.recommender_id)
        assert app.status is LeaveStatus.RECOMMENDED
        assert app.comments.recommender == "Fine by me"

        app = service.apply_action(app.id, "Approve", world.approver_id, "Enjoy")
        assert app.status is LeaveStatus.APPROVED
        assert app.comments.approver == "Enjoy"
        assert app.comments.acting == "Covering"
        assert app.updated_by_id == world.approver_id

        session.commit()
        stored = LeaveSelector(session).get(app.id)
        assert stored.status is LeaveStatus.APPROVED

    def test_each_transition_writes_one_comment_slot(self, service, submit_application, world):
        app = submit_application()
        app = service.apply_action(app.id, LeaveAction.ACCEPT_ACTING, world.acting_officer_id, "a")
        assert (app.comments.acting, app.comments.recommender, app.comments.approver) == ("a", None, None)
        app = service.apply_action(app.id, LeaveAction.RECOMMEND, world.recommender_id, "r")
        assert (app.comments.acting, app.comments.recommender, app.comments.approver) == ("a", "r", None)

    def test_acting_rejection_is_terminal(self, service, submit_application, world):
        app = submit_application()
        app = service.apply_action(app.id, LeaveAction.REJECT_ACTING, world.acting_officer_id, "Busy")
        assert app.status is LeaveStatus.ACTING_REJECTED
        with pytest.raises(InvalidTransitionError):
            service.apply_action(app.id, LeaveAction.ACCEPT_ACTING, world.acting_officer_id)

    def test_recommender_rejection(self, service, submit_application, world):
        app = submit_application(advance_to="Pending")
        app = service.apply_action(app.id, LeaveAction.REJECT, world.recommender_id, "No cover")
        assert app.status is LeaveStatus.REJECTED
        assert app.comments.recommender == "No cover"
        assert app.comments.approver is None

    def test_updated_at_is_set_by_the_database(self, service, submit_application, world):
        app = submit_application()
        moved = service.apply_action(app.id, LeaveAction.ACCEPT_ACTING, world.acting_officer_id)
        assert moved.updated_at is not None
        assert moved.updated_at >= app.updated_at


class TestRejections:
    def test_unknown_application(self, service, world):
        with pytest.raises(LeaveApplicationNotFoundError):
            service.apply_action(uuid4(), LeaveAction.APPROVE, world.approver_id)

    def test_not_found_is_checked_before_action_name(self, service, world):
        with pytest.raises(LeaveApplicationNotFoundError):
            service.apply_action(uuid4(), "Escalate", world.approver_id)

    def test_unknown_action_carries_application_context(self, service, submit_application, world):
        app = submit_application()
        with pytest.raises(UnknownActionError) as exc_info:
            service.apply_action(app.id, "Escalate", world.acting_officer_id)
        assert exc_info.value.application_id == str(app.id)
        assert exc_info.value.current_status == LeaveStatus.PENDING_ACTING_ACCEPTANCE.value

    def test_wrong_actor_leaves_record_untouched(self, service, session, submit_application, world):
        app = submit_application(advance_to="Pending")
        with pytest.raises(UnauthorizedActorError):
            service.apply_action(app.id, LeaveAction.RECOMMEND, world.approver_id)
        stored = LeaveSelector(session).get(app.id)
        assert stored.status is LeaveStatus.PENDING
        assert stored.comments.recommender is None
        assert stored.updated_by_id == app.updated_by_id

    def test_reapplying_an_action_is_an_invalid_transition(self, service, submit_application, world):
        app = submit_application(advance_to="Recommended")
        service.apply_action(app.id, Approve(), world.approver_id)
        with pytest.raises(InvalidTransitionError):
            service.apply_action(app.id, Approve(), world.approver_id)

    def test_unknown_actor_is_unauthorized(self, service, submit_application):
        app = submit_application()
        with pytest.raises(UnauthorizedActorError):
            service.apply_action(app.id, LeaveAction.ACCEPT_ACTING, uuid4())

    def test_requester_cannot_approve_own_application(self, service, submit_application, world):
        app = submit_application(advance_to="Recommended")
        with pytest.raises(UnauthorizedActorError):
            service.apply_action(app.id, LeaveAction.APPROVE, world.requester_id)


class TestHeadOfDepartmentEscalation:
    def test_hod_approves_in_place_of_approver(self, service, submit_application, world):
        app = submit_application(advance_to="Recommended")
        app = service.apply_action(app.id, LeaveAction.APPROVE, world.hod_id, "Escalated")
        assert app.status is LeaveStatus.APPROVED
        assert app.approver_id == world.approver_id
        assert app.updated_by_id == world.hod_id
        assert app.comments.approver == "Escalated"

    def test_hod_rejects_in_place_of_approver(self, service, submit_application, world):
        app = submit_application(advance_to="Recommended")
        app = service.apply_action(app.id, LeaveAction.REJECT, world.hod_id)
        assert app.status is LeaveStatus.REJECTED

    def test_hod_cannot_act_before_recommendation(self, service, submit_application, world):
        app = submit_application(advance_to="Pending")
        with pytest.raises(UnauthorizedActorError):
            service.apply_action(app.id, LeaveAction.RECOMMEND, world.hod_id)

    def test_role_is_read_at_decision_time(self, database, submit_application, world, role_names):
        app = submit_application(advance_to="Recommended")
        with database.session_scope() as s:
            StaffDirectoryService(s).assign_role(world.hod_id, world.role_ids["Staff"])

        with database.session_scope() as s:
            with pytest.raises(UnauthorizedActorError):
                LeaveWorkflowService(s).apply_action(app.id, LeaveAction.APPROVE, world.hod_id)

        with database.session_scope() as s:
            StaffDirectoryService(s).assign_role(
                world.colleague_id, world.role_ids[role_names.head_of_department],
            )
        with database.session_scope() as s:
            moved = LeaveWorkflowService(s).apply_action(
                app.id, LeaveAction.APPROVE, world.colleague_id,
            )
        assert moved.status is LeaveStatus.APPROVED


class TestCancellation:
    @pytest.mark.parametrize("stage", ["Pending Acting Acceptance", "Pending", "Recommended"])
    def test_requester_cancels_from_non_terminal_status(self, service, submit_application, world, stage):
        app = submit_application(advance_to=stage)
        cancelled = service.cancel(app.id, world.requester_id)
        assert cancelled.status is LeaveStatus.CANCELLED
        assert cancelled.updated_by_id == world.requester_id

    @pytest.mark.parametrize("stage", ["Approved", "Rejected", "Acting Rejected"])
    def test_terminal_applications_cannot_be_cancelled(self, service, submit_application, world, stage):
        app = submit_application(advance_to=stage)
        with pytest.raises(InvalidTransitionError):
            service.cancel(app.id, world.requester_id)

    def test_only_the_requester_may_cancel(self, service, submit_application, world):
        app = submit_application()
        with pytest.raises(UnauthorizedActorError):
            service.cancel(app.id, world.hod_id)

    def test_cancelled_application_accepts_no_action(self, service, submit_application, world):
        app = submit_application()
        service.cancel(app.id, world.requester_id)
        with pytest.raises(InvalidTransitionError):
            service.apply_action(app.id, LeaveAction.ACCEPT_ACTING, world.acting_officer_id)
        with pytest.raises(InvalidTransitionError):
            service.cancel(app.id, world.requester_id)


class TestLogging:
    def test_applied_transition_is_logged(self, service, submit_application, world, captured_logs):
        app = submit_application(advance_to="Recommended")
        service.apply_action(app.id, LeaveAction.APPROVE, world.hod_id)

        records = [
            r for r in captured_logs()
            if r["message"] == "leave_transition_applied" and r["to_status"] == "Approved"
        ]
        assert len(records) == 1
        record = records[0]
        assert record["from_status"] == "Recommended"
        assert record["to_status"] == "Approved"
        assert record["via_escalation"] is True
        assert record["comment_slot"] == "approver"

    def test_rejected_transition_is_logged(self, service, submit_application, world, captured_logs):
        app = submit_application()
        with pytest.raises(UnauthorizedActorError):
            service.apply_action(app.id, LeaveAction.ACCEPT_ACTING, world.outsider_id)

        records = [r for r in captured_logs() if r["message"] == "leave_transition_rejected"]
        assert records and records[-1]["reason"] == "UNAUTHORIZED_ACTOR"
