"""Domain error codes for the event setup module."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from event_setup.domain.validation import StepResult


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_STEP = "INVALID_STEP"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
    LOOKUP_FAILED = "LOOKUP_FAILED"
    SUBMISSION_IN_PROGRESS = "SUBMISSION_IN_PROGRESS"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when user input blocks an operation. Always recoverable."""

    def __init__(self, message: str, errors: Iterable[str] = ()) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)
        self.errors = tuple(errors) or (message,)


class StepValidationError(ValidationError):
    """Raised when the wizard cannot advance past a step."""

    def __init__(self, step: int, result: "StepResult") -> None:
        super().__init__(
            message=f"Step {step} has errors that must be fixed before continuing",
            errors=result.errors,
        )
        self.step = step
        self.result = result


class InvalidStepError(DomainError):
    """Raised when a step number is outside the wizard."""

    def __init__(self, step: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STEP,
            message="Unknown wizard step",
        )
        self.step = step


class PersistenceError(DomainError):
    """Raised when the event storage collaborator fails. Draft state is kept."""

    def __init__(self, message: str = "Something went wrong. Please try again.") -> None:
        super().__init__(code=ErrorCode.PERSISTENCE_FAILED, message=message)


class LookupFailure(DomainError):
    """Raised when a staff search, token issuance or token check finds nothing."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.LOOKUP_FAILED, message=message)


class SubmissionInProgressError(DomainError):
    """Raised when an action is triggered while its previous request is in flight."""

    def __init__(self, action: str) -> None:
        super().__init__(
            code=ErrorCode.SUBMISSION_IN_PROGRESS,
            message="This request is already being processed",
        )
        self.action = action


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )
