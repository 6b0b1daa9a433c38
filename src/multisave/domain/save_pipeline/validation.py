"""Validation phase: check every dirty unit before anything is persisted."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from multisave.domain.types import (
    UNIT_LEVEL_FIELD,
    FieldError,
    FormValidationSummary,
    ValidationResult,
)

from .fanout import resolve_dirty_entries, settle_all

if TYPE_CHECKING:
    from multisave.domain.dirty_set import DirtySet
    from multisave.domain.registry import UnitRegistry
    from multisave.domain.types import UnitId

log = getLogger(__name__)

VALIDATION_TIMEOUT_MESSAGE = "Validation timed out"


@dataclass(slots=True)
class ValidationPhaseResult:
    all_valid: bool
    summaries: list[FormValidationSummary] = field(default_factory=list[FormValidationSummary])
    validated: int = 0


@dataclass(slots=True)
class ValidationPhaseRunner:
    """Fan out ``validate()`` over the dirty, registered units and aggregate a verdict."""

    timeout_seconds: float | None = None

    async def run(self, dirty_set: DirtySet, registry: UnitRegistry) -> ValidationPhaseResult:
        entries = resolve_dirty_entries(dirty_set, registry)
        settled = await settle_all(
            {unit_id: entry.validate for unit_id, entry in entries.items()},
            expect=ValidationResult,
            on_error=_raised,
            on_timeout=_timed_out,
            timeout=self.timeout_seconds,
        )

        summaries = [
            FormValidationSummary(
                unit_id=unit_id,
                display_name=entries[unit_id].display_name,
                errors=list(result.errors),
            )
            for unit_id, result in settled
            if not result.valid
        ]
        if summaries:
            log.info(
                "Validation failed for %d of %d units: %s",
                len(summaries),
                len(settled),
                ", ".join(summary.unit_id for summary in summaries),
            )
        return ValidationPhaseResult(
            all_valid=not summaries, summaries=summaries, validated=len(settled)
        )


def _raised(unit_id: UnitId, exc: BaseException) -> ValidationResult:  # noqa: ARG001
    message = str(exc) or type(exc).__name__
    return ValidationResult.failed([FieldError(field=UNIT_LEVEL_FIELD, message=message)])


def _timed_out(unit_id: UnitId) -> ValidationResult:  # noqa: ARG001
    return ValidationResult.failed(
        [FieldError(field=UNIT_LEVEL_FIELD, message=VALIDATION_TIMEOUT_MESSAGE)]
    )
