"""Tests for the generation workflow state machine."""
from __future__ import annotations

import pytest

from adgen.domain.workflow import InvalidTransitionError, WorkflowRun, WorkflowState


def _run(**kwargs):
    return WorkflowRun(action="image", user_id="user-1", cost=5, reservation_id="res-1", **kwargs)


class TestWorkflowRun:

    def test_happy_path(self):
        run = _run()

        run.advance(WorkflowState.ASSETS_UPLOADED)
        run.project_id = "project-1"
        run.advance(WorkflowState.RECORD_CREATED)
        run.advance(WorkflowState.GENERATED)
        run.advance(WorkflowState.FINALIZED)

        assert run.is_terminal
        assert run.history == [
            WorkflowState.RESERVED,
            WorkflowState.ASSETS_UPLOADED,
            WorkflowState.RECORD_CREATED,
            WorkflowState.GENERATED,
            WorkflowState.FINALIZED,
        ]

    def test_cannot_skip_generation(self):
        run = _run(project_id="project-1")
        run.advance(WorkflowState.RECORD_CREATED)

        with pytest.raises(InvalidTransitionError):
            run.advance(WorkflowState.FINALIZED)

    def test_record_requires_project_id(self):
        with pytest.raises(InvalidTransitionError, match="project id"):
            _run().advance(WorkflowState.RECORD_CREATED)

    def test_advance_to_failed_requires_fail(self):
        with pytest.raises(InvalidTransitionError):
            _run().advance(WorkflowState.FAILED)

    def test_fail_before_record_only_refunds(self):
        run = _run()
        run.advance(WorkflowState.ASSETS_UPLOADED)

        compensation = run.fail("Upload 1 rejected")

        assert run.state == WorkflowState.FAILED
        assert run.failed_from == WorkflowState.ASSETS_UPLOADED
        assert run.error == "Upload 1 rejected"
        assert compensation.refund_reservation is True
        assert compensation.mark_project_failed is False

    @pytest.mark.parametrize("reached", [WorkflowState.RECORD_CREATED, WorkflowState.GENERATED])
    def test_fail_after_record_marks_project(self, reached):
        run = _run(project_id="project-1")
        run.advance(WorkflowState.RECORD_CREATED)
        if reached == WorkflowState.GENERATED:
            run.advance(WorkflowState.GENERATED)

        compensation = run.fail("Failed to generate image")

        assert compensation.mark_project_failed is True
        assert compensation.refund_reservation is True

    def test_terminal_runs_cannot_fail(self):
        run = _run()
        run.fail("first")

        with pytest.raises(InvalidTransitionError):
            run.fail("second")

        finished = _run(project_id="project-1")
        finished.advance(WorkflowState.RECORD_CREATED)
        finished.advance(WorkflowState.GENERATED)
        finished.advance(WorkflowState.FINALIZED)
        with pytest.raises(InvalidTransitionError):
            finished.fail("late")

    def test_running_run_owes_nothing(self):
        compensation = _run().compensation()

        assert compensation.refund_reservation is False
        assert compensation.mark_project_failed is False
