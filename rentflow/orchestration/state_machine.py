"""Canonical state transition helpers for billing entities."""

from __future__ import annotations

from rentflow.models.enums import GenerationStatus, UploadStatus


class InvalidTransitionError(ValueError):
    """Raised when a disallowed state transition is attempted."""


class StateMachine:
    """Transition table keyed by status value; terminal states map to nothing."""

    def __init__(self, transitions: dict[str, set[str]]) -> None:
        self._transitions = transitions

    def can_transition(self, current: str, target: str) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {current} -> {target}")

    def is_terminal(self, state: str) -> bool:
        return not self._transitions.get(state)


GENERATION_LOG_MACHINE = StateMachine(
    {
        GenerationStatus.PENDING_REVIEW.value: {
            GenerationStatus.FINALIZED.value,
            GenerationStatus.FAILED.value,
        },
        GenerationStatus.FINALIZED.value: set(),
        GenerationStatus.FAILED.value: set(),
    }
)

UPLOAD_MACHINE = StateMachine(
    {
        UploadStatus.PENDING_REVIEW.value: {
            UploadStatus.PROCESSED.value,
            UploadStatus.FAILED.value,
        },
        UploadStatus.PROCESSED.value: set(),
        UploadStatus.FAILED.value: set(),
    }
)
