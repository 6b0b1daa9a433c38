"""Value types shared by the save pipeline."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports import SaveableUnit

type UnitId = str

UNIT_LEVEL_FIELD = "__all__"
DEFAULT_SUBMISSION_ERROR = "Submission failed"


@dataclass(frozen=True, slots=True)
class FieldError:
    """One failed constraint within a unit."""

    field: str
    message: str


@dataclass(slots=True)
class ValidationResult:
    valid: bool
    errors: list[FieldError] = field(default_factory=list[FieldError])

    def __post_init__(self) -> None:
        if self.valid and self.errors:
            raise ValueError("A valid result cannot carry field errors")
        if not self.valid and not self.errors:
            raise ValueError("An invalid result must carry at least one field error")

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def failed(cls, errors: list[FieldError]) -> ValidationResult:
        return cls(valid=False, errors=list(errors))


@dataclass(slots=True)
class FormValidationSummary:
    """Field errors of one unit that failed validation."""

    unit_id: UnitId
    display_name: str
    errors: list[FieldError]


@dataclass(slots=True, kw_only=True)
class SubmitResult:
    """Outcome of persisting one unit.

    ``error`` is populated iff ``success`` is false; ``status_code`` is set by
    transport-backed submitters so failures can be classified as retryable.
    """

    success: bool
    unit_id: UnitId
    error: str | None = None
    data: object = None
    status_code: int | None = None

    def __post_init__(self) -> None:
        if self.success:
            self.error = None
        elif not self.error:
            self.error = DEFAULT_SUBMISSION_ERROR


type Validator = Callable[[], Awaitable[ValidationResult]]
type Submitter = Callable[[], Awaitable[SubmitResult]]


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """Capabilities of one registered unit.

    The entry stores the two capability callables directly, so any object shape
    that can produce them qualifies as a unit.
    """

    unit_id: UnitId
    display_name: str
    validate: Validator
    submit: Submitter

    @classmethod
    def from_unit(cls, unit_id: UnitId, display_name: str, unit: SaveableUnit) -> RegistryEntry:
        return cls(
            unit_id=unit_id,
            display_name=display_name,
            validate=unit.validate,
            submit=unit.submit,
        )


class SubmissionStatus(StrEnum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class SaveState(StrEnum):
    """Where a save cycle currently is."""

    IDLE = "idle"
    VALIDATING = "validating"
    VALIDATION_FAILED = "validation_failed"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True)
class SubmissionSummary:
    status: SubmissionStatus
    successful_units: list[UnitId] = field(default_factory=list[UnitId])
    failed_units: list[SubmitResult] = field(default_factory=list[SubmitResult])

    @property
    def failed_unit_ids(self) -> list[UnitId]:
        return [result.unit_id for result in self.failed_units]
