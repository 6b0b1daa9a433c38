"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator

from multisave.adapters.http import HttpUnitSubmitter
from multisave.config import SaveConfig, SubmissionConfig, get_save_config
from multisave.domain.error_store import ErrorStore
from multisave.domain.save_pipeline import SaveCoordinator, drain_stragglers
from multisave.domain.units import TrackedUnit

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from multisave.adapters.http_resilience import ResilientClient
    from multisave.config.http_resilience import ResilienceConfig
    from multisave.domain.errors import FormSubmissionError, FormValidationError, NetworkError
    from multisave.domain.types import UnitId

log = getLogger(__name__)


class UnitPayload(BaseModel):
    """One unit's pending edits as read from a payload file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    unit_id: str = Field(min_length=1)
    display_name: str = ""
    endpoint: str = Field(min_length=1)
    data: dict[str, object] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _default_display_name(self) -> UnitPayload:
        if not self.display_name:
            self.display_name = self.unit_id
        return self


class PayloadFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    units: list[UnitPayload]

    @model_validator(mode="after")
    def _unique_unit_ids(self) -> PayloadFile:
        seen: set[str] = set()
        for unit in self.units:
            if unit.unit_id in seen:
                raise ValueError(f"Duplicate unit id: {unit.unit_id}")
            seen.add(unit.unit_id)
        return self


def load_payloads(path: Path) -> list[UnitPayload]:
    """Parse a payload file; raises ``pydantic.ValidationError`` on bad input."""

    return PayloadFile.model_validate_json(path.read_text(encoding="utf-8")).units


@dataclass(slots=True)
class PushReport:
    """Outcome of pushing a batch of payloads through one save cycle."""

    saved: bool
    successful_units: list[UnitId] = field(default_factory=list)
    pending_units: list[UnitId] = field(default_factory=list)
    unchanged_units: list[UnitId] = field(default_factory=list)
    validation_errors: tuple[FormValidationError, ...] = ()
    submission_errors: tuple[FormSubmissionError, ...] = ()
    network_error: NetworkError | None = None


def build_coordinator(
    config: SaveConfig | None = None,
    *,
    clock: Callable[[], float] | None = None,
) -> SaveCoordinator:
    """Create an isolated coordinator for one editing session."""

    errors = ErrorStore(clock=clock) if clock is not None else ErrorStore()
    return SaveCoordinator(config=config or get_save_config(), errors=errors)


def push_payloads(
    payloads: Sequence[UnitPayload],
    *,
    submission: SubmissionConfig,
    save: SaveConfig | None = None,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> PushReport:
    """Submit every payload as a dirty unit in a single save cycle."""

    return asyncio.run(
        _push_payloads_async(
            payloads, submission=submission, save=save, client_factory=client_factory
        )
    )


async def _push_payloads_async(
    payloads: Sequence[UnitPayload],
    *,
    submission: SubmissionConfig,
    save: SaveConfig | None,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None,
) -> PushReport:
    coordinator = build_coordinator(save)
    config = SubmissionConfig(
        base_url=submission.base_url,
        endpoints={
            **submission.endpoints,
            **{payload.unit_id: payload.endpoint for payload in payloads},
        },
        resilience=submission.resilience,
    )
    submitter = (
        HttpUnitSubmitter(config, client_factory=client_factory)
        if client_factory is not None
        else HttpUnitSubmitter(config)
    )

    log.info("Pushing %d units to %s", len(payloads), config.base_url)
    unchanged: list[UnitId] = []
    async with submitter:
        for payload in payloads:
            unit = TrackedUnit(payload.unit_id, payload.display_name, submitter=submitter)
            unit.attach(coordinator)
            unit.replace(payload.data)
            if not unit.is_dirty:
                unchanged.append(unit.unit_id)
        if unchanged:
            log.warning("Skipping units without changes: %s", ", ".join(unchanged))
        saved = await coordinator.save_all_changes()
        # units abandoned at the deadline still hold the shared client
        await drain_stragglers()

    summary = coordinator.last_submission_summary
    report = PushReport(
        saved=saved,
        successful_units=list(summary.successful_units) if summary else [],
        pending_units=coordinator.dirty_unit_ids(),
        unchanged_units=unchanged,
        validation_errors=coordinator.validation_errors,
        submission_errors=coordinator.submission_errors,
        network_error=coordinator.network_error,
    )
    log.info(
        f"Finished push: saved={report.saved}, successful={len(report.successful_units)}, "
        f"pending={len(report.pending_units)}"
    )
    return report
