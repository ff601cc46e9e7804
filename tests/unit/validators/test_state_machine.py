from __future__ import annotations

import pytest

from rentflow.models import GenerationStatus, UploadStatus
from rentflow.orchestration.state_machine import (
    GENERATION_LOG_MACHINE,
    UPLOAD_MACHINE,
    InvalidTransitionError,
    StateMachine,
)


def test_state_machine_allows_valid_transition():
    sm = StateMachine({"new": {"running"}, "running": {"completed"}})
    assert sm.can_transition("new", "running") is True
    sm.assert_transition("new", "running")


def test_state_machine_rejects_invalid_transition():
    sm = StateMachine({"new": {"running"}})
    with pytest.raises(InvalidTransitionError):
        sm.assert_transition("new", "completed")


def test_generation_log_review_can_finalize_or_fail():
    pending = GenerationStatus.PENDING_REVIEW.value
    assert GENERATION_LOG_MACHINE.can_transition(pending, GenerationStatus.FINALIZED.value)
    assert GENERATION_LOG_MACHINE.can_transition(pending, GenerationStatus.FAILED.value)
    assert not GENERATION_LOG_MACHINE.is_terminal(pending)


@pytest.mark.parametrize("terminal", [GenerationStatus.FINALIZED, GenerationStatus.FAILED])
def test_generation_log_terminal_states_never_move(terminal):
    assert GENERATION_LOG_MACHINE.is_terminal(terminal.value)
    for target in GenerationStatus:
        assert not GENERATION_LOG_MACHINE.can_transition(terminal.value, target.value)


def test_failed_log_cannot_be_finalized():
    with pytest.raises(InvalidTransitionError):
        GENERATION_LOG_MACHINE.assert_transition(GenerationStatus.FAILED.value, GenerationStatus.FINALIZED.value)


def test_upload_machine_transitions():
    assert UPLOAD_MACHINE.can_transition(UploadStatus.PENDING_REVIEW.value, UploadStatus.PROCESSED.value)
    assert UPLOAD_MACHINE.can_transition(UploadStatus.PENDING_REVIEW.value, UploadStatus.FAILED.value)
    assert UPLOAD_MACHINE.is_terminal(UploadStatus.PROCESSED.value)
    with pytest.raises(InvalidTransitionError):
        UPLOAD_MACHINE.assert_transition(UploadStatus.PROCESSED.value, UploadStatus.PENDING_REVIEW.value)
