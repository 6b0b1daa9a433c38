"""Aggregation point for save errors and user-facing notifications."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from .errors import Notification, Severity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .errors import FormSubmissionError, FormValidationError, NetworkError
    from .types import UnitId

log = getLogger(__name__)


@dataclass(slots=True)
class _Expiry:
    notification_id: str
    deadline: float


class ErrorStore:
    """Four independently settable slots plus a derived ``has_errors`` flag.

    Notifications with ``auto_dismiss`` expire against ``clock`` (monotonic
    seconds). Expired entries are purged before every read and write, and both
    purging and :meth:`dismiss_notification` only ever remove an entry that is
    still present, so each notification disappears exactly once.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._validation_errors: tuple[FormValidationError, ...] = ()
        self._submission_errors: tuple[FormSubmissionError, ...] = ()
        self._network_error: NetworkError | None = None
        self._notifications: dict[str, Notification] = {}
        self._expiries: list[_Expiry] = []
        self.last_error_timestamp: datetime | None = None

    # -- read side -----------------------------------------------------------------

    @property
    def validation_errors(self) -> tuple[FormValidationError, ...]:
        return self._validation_errors

    @property
    def submission_errors(self) -> tuple[FormSubmissionError, ...]:
        return self._submission_errors

    @property
    def network_error(self) -> NetworkError | None:
        return self._network_error

    @property
    def notifications(self) -> tuple[Notification, ...]:
        self._purge_expired()
        return tuple(self._notifications.values())

    @property
    def has_errors(self) -> bool:
        return bool(
            self._validation_errors or self._submission_errors or self._network_error is not None
        )

    # -- validation errors ---------------------------------------------------------

    def set_validation_errors(self, errors: Iterable[FormValidationError]) -> None:
        self._validation_errors = tuple(errors)
        if self._validation_errors:
            self._touch()

    def clear_validation_errors(self) -> None:
        self._validation_errors = ()

    def clear_validation_errors_for_unit(self, unit_id: UnitId) -> None:
        self._validation_errors = tuple(
            error for error in self._validation_errors if error.unit_id != unit_id
        )

    # -- submission errors ---------------------------------------------------------

    def set_submission_errors(self, errors: Iterable[FormSubmissionError]) -> None:
        self._submission_errors = tuple(errors)
        if self._submission_errors:
            self._touch()

    def add_submission_error(self, error: FormSubmissionError) -> None:
        self._submission_errors = (*self._submission_errors, error)
        self._touch()

    def clear_submission_errors(self) -> None:
        self._submission_errors = ()

    def clear_submission_error_for_unit(self, unit_id: UnitId) -> None:
        self._submission_errors = tuple(
            error for error in self._submission_errors if error.unit_id != unit_id
        )

    # -- network error -------------------------------------------------------------

    def set_network_error(self, error: NetworkError | None) -> None:
        self._network_error = error
        if error is not None:
            self._touch()

    def clear_network_error(self) -> None:
        self._network_error = None

    # -- notifications -------------------------------------------------------------

    def add_notification(
        self,
        *,
        severity: Severity,
        title: str,
        message: str,
        unit_id: UnitId | None = None,
        dismissible: bool = True,
        auto_dismiss: float | None = None,
    ) -> str:
        """Append a notification and return its id."""

        self._purge_expired()
        notification = Notification(
            id=uuid4().hex,
            severity=severity,
            title=title,
            message=message,
            unit_id=unit_id,
            dismissible=dismissible,
            auto_dismiss=auto_dismiss,
        )
        self._notifications[notification.id] = notification
        if auto_dismiss:
            self._expiries.append(_Expiry(notification.id, self._clock() + auto_dismiss))
        return notification.id

    def dismiss_notification(self, notification_id: str) -> None:
        self._purge_expired()
        self._remove_notification(notification_id)

    def clear_all_notifications(self) -> None:
        self._notifications = {}
        self._expiries = []

    # -- global --------------------------------------------------------------------

    def clear_errors_for_unit(self, unit_id: UnitId) -> None:
        self.clear_validation_errors_for_unit(unit_id)
        self.clear_submission_error_for_unit(unit_id)

    def clear_all_errors(self) -> None:
        self._validation_errors = ()
        self._submission_errors = ()
        self._network_error = None
        self.clear_all_notifications()

    def _touch(self) -> None:
        self.last_error_timestamp = datetime.now(tz=UTC)

    def _remove_notification(self, notification_id: str) -> bool:
        if self._notifications.pop(notification_id, None) is None:
            return False
        self._expiries = [
            expiry for expiry in self._expiries if expiry.notification_id != notification_id
        ]
        return True

    def _purge_expired(self) -> None:
        if not self._expiries:
            return
        now = self._clock()
        for expiry in [expiry for expiry in self._expiries if expiry.deadline <= now]:
            if self._remove_notification(expiry.notification_id):
                log.debug("Notification %s expired", expiry.notification_id)
