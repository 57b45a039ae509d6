"""
Tests for the caller surface (leave_kernel.actions).

Covers:
- update_leave_status payload parsing (camelCase and snake_case keys)
- Every kernel failure reported as {success: false, error, code}
- Storage and unexpected failures reported, never raised
- Failed calls leave storage unchanged
- Submission and cancellation through the handler
- Correlation fields on log records
"""

from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from leave_kernel.actions import STORAGE_FAILURE, UNEXPECTED_ERROR, ActionResult
from leave_kernel.domain.leave import LeaveAction, LeaveStatus
from leave_kernel.selectors.leave_selector import LeaveSelector
from leave_kernel.services.leave_workflow_service import LeaveWorkflowService


def _stored_status(database, application_id):
    with database.session_scope() as s:
        return LeaveSelector(s).get(application_id).status


class TestUpdateLeaveStatus:
    def test_camel_case_payload(self, handler, database, submit_application, world):
        app = submit_application()
        result = handler.update_leave_status({
            "applicationId": str(app.id),
            "action": "Accept Acting",
            "actorId": str(world.acting_officer_id),
            "comment": "Happy to cover",
        })
        assert result.success
        assert result.to_dict() == {"success": True, "applicationId": str(app.id)}
        assert result.application.comments.acting == "Happy to cover"
        assert _stored_status(database, app.id) is LeaveStatus.PENDING

    def test_snake_case_payload_without_comment(self, handler, submit_application, world):
        app = submit_application(advance_to="Pending")
        result = handler.update_leave_status({
            "application_id": app.id,
            "action": "Recommend",
            "actor_id": world.recommender_id,
        })
        assert result.success
        assert result.application.status is LeaveStatus.RECOMMENDED
        assert result.application.comments.recommender is None

    def test_enum_action_in_payload(self, handler, submit_application, world, captured_logs):
        app = submit_application(advance_to="Pending")
        result = handler.update_leave_status({
            "applicationId": app.id,
            "action": LeaveAction.RECOMMEND,
            "actorId": world.recommender_id,
        })
        assert result.success, result.error
        assert result.application.status is LeaveStatus.RECOMMENDED
        applied = [
            r for r in captured_logs()
            if r["message"] == "leave_transition_applied" and r["to_status"] == "Recommended"
        ]
        assert [r["action"] for r in applied] == ["Recommend"]

    def test_typed_apply_action_accepts_enum(self, handler, submit_application, world):
        app = submit_application(advance_to="Recommended")
        result = handler.apply_action(app.id, LeaveAction.APPROVE, world.approver_id)
        assert result.success
        assert result.application.status is LeaveStatus.APPROVED

    @pytest.mark.parametrize("payload", [None, "applicationId=1", ["Approve"], 42])
    def test_payload_must_be_a_mapping(self, handler, payload, captured_logs):
        result = handler.update_leave_status(payload)
        assert not result.success
        assert result.code == "INVALID_LEAVE_REQUEST"
        assert "payload" in result.error
        assert any(r["message"] == "leave_action_payload_rejected" for r in captured_logs())

    @pytest.mark.parametrize("missing", ["applicationId", "action", "actorId"])
    def test_missing_field(self, handler, missing):
        payload = {"applicationId": str(uuid4()), "action": "Approve", "actorId": str(uuid4())}
        del payload[missing]
        result = handler.update_leave_status(payload)
        assert not result.success
        assert result.code == "INVALID_LEAVE_REQUEST"
        assert missing in result.error

    def test_malformed_id(self, handler, captured_logs):
        result = handler.update_leave_status(
            {"applicationId": "not-a-uuid", "action": "Approve", "actorId": str(uuid4())}
        )
        assert result.code == "INVALID_LEAVE_REQUEST"
        assert any(r["message"] == "leave_action_payload_rejected" for r in captured_logs())

    def test_unknown_action(self, handler, database, submit_application, world):
        app = submit_application()
        result = handler.update_leave_status({
            "applicationId": str(app.id),
            "action": "Escalate",
            "actorId": str(world.acting_officer_id),
        })
        assert result.to_dict() == {
            "success": False,
            "error": result.error,
            "code": "UNKNOWN_ACTION",
        }
        assert "Escalate" in result.error
        assert _stored_status(database, app.id) is LeaveStatus.PENDING_ACTING_ACCEPTANCE

    def test_not_found(self, handler, world):
        result = handler.apply_action(uuid4(), "Approve", world.approver_id)
        assert result.code == "LEAVE_APPLICATION_NOT_FOUND"

    def test_unauthorized_leaves_record_unchanged(self, handler, database, submit_application, world):
        app = submit_application(advance_to="Recommended")
        result = handler.apply_action(app.id, "Approve", world.colleague_id, "sneaky")
        assert result.code == "UNAUTHORIZED_ACTOR"
        assert _stored_status(database, app.id) is LeaveStatus.RECOMMENDED

    def test_invalid_transition(self, handler, submit_application, world):
        app = submit_application(advance_to="Approved")
        result = handler.apply_action(app.id, "Reject", world.approver_id)
        assert result.code == "INVALID_TRANSITION"

    def test_head_of_department_through_handler(self, handler, submit_application, world):
        app = submit_application(advance_to="Recommended")
        result = handler.apply_action(app.id, "Reject", world.hod_id, "Not now")
        assert result.success
        assert result.application.status is LeaveStatus.REJECTED
        assert result.application.approver_id == world.approver_id


class TestFailureReporting:
    def test_storage_failure(self, handler, submit_application, world, monkeypatch, captured_logs):
        app = submit_application(advance_to="Recommended")

        def broken(self, *args, **kwargs):
            raise OperationalError("UPDATE leave_applications", {}, Exception("disk I/O error"))

        monkeypatch.setattr(LeaveWorkflowService, "apply_action", broken)
        result = handler.apply_action(app.id, "Approve", world.approver_id)
        assert not result.success
        assert result.code == STORAGE_FAILURE
        assert any(r["message"] == "leave_action_storage_failure" for r in captured_logs())

    def test_unexpected_failure(self, handler, submit_application, world, monkeypatch):
        app = submit_application(advance_to="Recommended")

        def broken(self, *args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(LeaveWorkflowService, "apply_action", broken)
        result = handler.apply_action(app.id, "Approve", world.approver_id)
        assert result == ActionResult.failed("boom", UNEXPECTED_ERROR)


class TestSubmitAndCancel:
    def test_submit(self, handler, leave_request, world):
        result = handler.submit_application(world.requester_id, leave_request())
        assert result.success
        assert result.application.status is LeaveStatus.PENDING_ACTING_ACCEPTANCE
        assert result.to_dict()["applicationId"] == str(result.application.id)

    def test_submit_validation_failure(self, handler, leave_request, world):
        result = handler.submit_application(world.requester_id, leave_request(reason="  "))
        assert result.code == "INVALID_LEAVE_REQUEST"

    def test_cancel(self, handler, database, submit_application, world):
        app = submit_application(advance_to="Pending")
        result = handler.cancel_application(app.id, world.requester_id)
        assert result.success
        assert _stored_status(database, app.id) is LeaveStatus.CANCELLED

    def test_cancel_by_someone_else(self, handler, submit_application, world):
        app = submit_application()
        result = handler.cancel_application(app.id, world.acting_officer_id)
        assert result.code == "UNAUTHORIZED_ACTOR"


class TestLogCorrelation:
    def test_records_carry_call_context(self, handler, submit_application, world, captured_logs):
        app = submit_application(advance_to="Pending")
        handler.apply_action(app.id, "Recommend", world.recommender_id)

        applied = [
            r for r in captured_logs()
            if r["message"] == "leave_transition_applied" and r["action"] == "Recommend"
        ]
        assert len(applied) == 1
        record = applied[0]
        assert record["application_id"] == str(app.id)
        assert record["actor_id"] == str(world.recommender_id)
        assert record["action"] == "Recommend"
        assert record["correlation_id"]

    def test_context_cleared_after_call(self, handler, world):
        from leave_kernel.logging_config import LogContext

        handler.apply_action(uuid4(), "Approve", world.approver_id)
        assert LogContext.get_all() == {}
