"""HTTP submission configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

SUBMISSION_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class SubmissionConfig:
    """Where and how unit payloads are posted.

    ``endpoints`` maps a unit id to a path relative to ``base_url``.
    """

    base_url: str
    endpoints: Mapping[str, str] = field(default_factory=dict)
    resilience: ResilienceConfig = field(
        default_factory=lambda: _default_resilience_config()
    )

    def endpoint_for(self, unit_id: str) -> str | None:
        return self.endpoints.get(unit_id)


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="submission",
        timeout_seconds=SUBMISSION_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"Content-Type": "application/json"},
    )


def get_submission_config(
    *,
    endpoints: Mapping[str, str] | None = None,
    base_url: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> SubmissionConfig:
    if base_url is None:
        base_url = require_env_vars(("MULTISAVE_API_BASE_URL",))["MULTISAVE_API_BASE_URL"]
    return SubmissionConfig(
        base_url=base_url,
        endpoints=dict(endpoints or {}),
        resilience=resilience or _default_resilience_config(),
    )
