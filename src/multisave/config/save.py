"""Save-cycle defaults for the coordinator."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_seconds_env

DEFAULT_NOTIFICATION_SECONDS = 3.0


@dataclass(frozen=True, slots=True)
class SaveConfig:
    """Tunables for one :class:`~multisave.domain.save_pipeline.SaveCoordinator`.

    ``phase_timeout_seconds`` bounds each fan-out phase. ``None`` waits for every
    unit to settle, which is the default.
    """

    notification_seconds: float | None = DEFAULT_NOTIFICATION_SECONDS
    phase_timeout_seconds: float | None = None


def get_save_config() -> SaveConfig:
    return SaveConfig(
        notification_seconds=optional_seconds_env(
            "MULTISAVE_NOTIFICATION_SECONDS", DEFAULT_NOTIFICATION_SECONDS
        ),
        phase_timeout_seconds=optional_seconds_env("MULTISAVE_PHASE_TIMEOUT_SECONDS", None),
    )
