"""Top-level save cycle: validation gate, then submission, then reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from multisave.config.save import SaveConfig
from multisave.domain.dirty_set import DirtySet
from multisave.domain.error_mapping import (
    create_network_error,
    to_submission_error,
    to_validation_error,
)
from multisave.domain.error_store import ErrorStore
from multisave.domain.errors import Severity
from multisave.domain.registry import UnitRegistry
from multisave.domain.types import SaveState, SubmissionStatus

from .submission import SubmissionPhaseRunner
from .validation import ValidationPhaseRunner

if TYPE_CHECKING:
    from multisave.domain.errors import (
        FormSubmissionError,
        FormValidationError,
        NetworkError,
        Notification,
    )
    from multisave.domain.types import (
        FormValidationSummary,
        RegistryEntry,
        SubmissionSummary,
        UnitId,
    )

log = getLogger(__name__)

SAVED_TITLE = "Saved"
SAVED_MESSAGE = "All changes have been saved successfully."


@dataclass(slots=True)
class SaveCoordinator:
    """Own the dirty set, the registry and the error store of one editing session.

    Create one instance per session and hand it to the units; :meth:`reset`
    returns it to a pristine state. :meth:`save_all_changes` never raises.
    Runners without a deadline of their own take ``config.phase_timeout_seconds``.
    """

    config: SaveConfig = field(default_factory=SaveConfig)
    errors: ErrorStore = field(default_factory=ErrorStore)
    dirty_set: DirtySet = field(default_factory=DirtySet)
    registry: UnitRegistry = field(default_factory=UnitRegistry)
    validation_runner: ValidationPhaseRunner = field(default_factory=ValidationPhaseRunner)
    submission_runner: SubmissionPhaseRunner = field(default_factory=SubmissionPhaseRunner)

    _state: SaveState = field(default=SaveState.IDLE, init=False)
    _is_validating: bool = field(default=False, init=False)
    _submission_status: SubmissionStatus = field(default=SubmissionStatus.IDLE, init=False)
    _validation_summaries: tuple[FormValidationSummary, ...] = field(default=(), init=False)
    _submission_summary: SubmissionSummary | None = field(default=None, init=False)
    _in_flight: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        timeout = self.config.phase_timeout_seconds
        if self.validation_runner.timeout_seconds is None:
            self.validation_runner.timeout_seconds = timeout
        if self.submission_runner.timeout_seconds is None:
            self.submission_runner.timeout_seconds = timeout

    # -- unit-facing contract ------------------------------------------------------

    def register(self, entry: RegistryEntry) -> None:
        self.registry.register(entry)

    def unregister(self, unit_id: UnitId) -> None:
        self.registry.unregister(unit_id)

    def report_dirty(self, unit_id: UnitId, is_dirty: bool) -> None:
        self.dirty_set.report(unit_id, is_dirty)

    # -- presentation-facing snapshots ---------------------------------------------

    def is_dirty(self) -> bool:
        return self.dirty_set.is_dirty()

    def dirty_unit_ids(self) -> list[UnitId]:
        return list(self.dirty_set.ids())

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def is_validating(self) -> bool:
        return self._is_validating

    @property
    def submission_status(self) -> SubmissionStatus:
        return self._submission_status

    @property
    def last_validation_summaries(self) -> tuple[FormValidationSummary, ...]:
        return self._validation_summaries

    @property
    def last_submission_summary(self) -> SubmissionSummary | None:
        return self._submission_summary

    @property
    def validation_errors(self) -> tuple[FormValidationError, ...]:
        return self.errors.validation_errors

    @property
    def submission_errors(self) -> tuple[FormSubmissionError, ...]:
        return self.errors.submission_errors

    @property
    def network_error(self) -> NetworkError | None:
        return self.errors.network_error

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return self.errors.notifications

    def dismiss_notification(self, notification_id: str) -> None:
        self.errors.dismiss_notification(notification_id)

    def clear_all_errors(self) -> None:
        self.errors.clear_all_errors()

    def reset_submission_state(self) -> None:
        self._submission_status = SubmissionStatus.IDLE
        self._submission_summary = None

    def reset(self) -> None:
        """Forget every unit, edit and error; only valid between save cycles."""

        if self._in_flight:
            raise RuntimeError("Cannot reset a coordinator while a save is in flight")
        self.dirty_set.reset_all()
        self.registry.clear()
        self.errors.clear_all_errors()
        self.reset_submission_state()
        self._validation_summaries = ()
        self._state = SaveState.IDLE

    # -- save cycle ----------------------------------------------------------------

    async def save_all_changes(self) -> bool:
        """Validate, then submit, every dirty unit; return True iff all of it succeeded."""

        if self._in_flight:
            log.warning("Save requested while another save is in flight; ignoring")
            return False

        self._in_flight = True
        try:
            return await self._run_cycle()
        finally:
            self._in_flight = False
            self._is_validating = False
            self._state = SaveState.IDLE

    async def _run_cycle(self) -> bool:
        self.errors.clear_all_errors()
        self._validation_summaries = ()
        log.info("Starting save of %d dirty units", len(self.dirty_set))

        try:
            self._state = SaveState.VALIDATING
            self._is_validating = True
            try:
                verdict = await self.validation_runner.run(self.dirty_set, self.registry)
            finally:
                self._is_validating = False

            if not verdict.all_valid:
                self._state = SaveState.VALIDATION_FAILED
                self._validation_summaries = tuple(verdict.summaries)
                self.errors.set_validation_errors(
                    to_validation_error(summary) for summary in verdict.summaries
                )
                log.warning("Save blocked: %d units failed validation", len(verdict.summaries))
                return False

            self._state = SaveState.SUBMITTING
            self._submission_status = SubmissionStatus.SUBMITTING
            summary = await self.submission_runner.run(self.dirty_set, self.registry)
        except Exception as exc:
            log.exception("Save cycle aborted by an unexpected error")
            self._state = SaveState.ERROR
            if self._submission_status is SubmissionStatus.SUBMITTING:
                self._submission_status = SubmissionStatus.ERROR
            self.errors.set_network_error(create_network_error(exc))
            return False

        self._submission_summary = summary
        self._submission_status = summary.status

        if summary.failed_units:
            self._state = SaveState.ERROR
            self.errors.set_submission_errors(
                to_submission_error(result, self.registry.display_name_for(result.unit_id))
                for result in summary.failed_units
            )
            log.warning(
                "Save finished with %d failed and %d saved units",
                len(summary.failed_units),
                len(summary.successful_units),
            )
            return False

        self._state = SaveState.SUCCESS
        self.errors.add_notification(
            severity=Severity.INFO,
            title=SAVED_TITLE,
            message=SAVED_MESSAGE,
            dismissible=True,
            auto_dismiss=self.config.notification_seconds,
        )
        log.info("Saved %d units", len(summary.successful_units))
        return True
