"""Submission phase: persist every dirty unit and reconcile the dirty set."""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from multisave.domain.types import SubmissionStatus, SubmissionSummary, SubmitResult

from .fanout import resolve_dirty_entries, settle_all

if TYPE_CHECKING:
    from multisave.domain.dirty_set import DirtySet
    from multisave.domain.registry import UnitRegistry
    from multisave.domain.types import UnitId

log = getLogger(__name__)

SUBMISSION_TIMEOUT_MESSAGE = "Submission timed out"
UNKNOWN_ERROR_MESSAGE = "Unknown error"


@dataclass(slots=True)
class SubmissionPhaseRunner:
    """Fan out ``submit()`` over the dirty, registered units.

    Partial failure is not rolled back: successful units are marked clean, failed
    units stay dirty so the next save re-submits exactly those.
    """

    timeout_seconds: float | None = None

    async def run(self, dirty_set: DirtySet, registry: UnitRegistry) -> SubmissionSummary:
        entries = resolve_dirty_entries(dirty_set, registry)
        settled = await settle_all(
            {unit_id: entry.submit for unit_id, entry in entries.items()},
            expect=SubmitResult,
            on_error=_raised,
            on_timeout=_timed_out,
            timeout=self.timeout_seconds,
        )

        successful: list[UnitId] = []
        failed: list[SubmitResult] = []
        for unit_id, result in settled:
            keyed = result if result.unit_id == unit_id else replace(result, unit_id=unit_id)
            if keyed.success:
                successful.append(unit_id)
            else:
                failed.append(keyed)

        dirty_set.mark_many_clean(successful)

        status = SubmissionStatus.ERROR if failed else SubmissionStatus.SUCCESS
        if failed:
            log.info(
                "Submitted %d units, %d failed: %s",
                len(settled),
                len(failed),
                ", ".join(result.unit_id for result in failed),
            )
        return SubmissionSummary(status=status, successful_units=successful, failed_units=failed)


def _raised(unit_id: UnitId, exc: BaseException) -> SubmitResult:
    return SubmitResult(success=False, unit_id=unit_id, error=str(exc) or UNKNOWN_ERROR_MESSAGE)


def _timed_out(unit_id: UnitId) -> SubmitResult:
    return SubmitResult(success=False, unit_id=unit_id, error=SUBMISSION_TIMEOUT_MESSAGE)
