"""Submit unit payloads to an HTTP API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from multisave.adapters.http_resilience import ResilientClient
from multisave.domain.types import SubmitResult

from .schema import SubmissionResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from multisave.config.http_resilience import ResilienceConfig
    from multisave.config.submission import SubmissionConfig
    from multisave.domain.types import UnitId

log = getLogger(__name__)


class SubmissionAPIError(RuntimeError):
    """Raised when the submission API answers with an unreadable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpUnitSubmitter:
    """POST a unit's payload as JSON to its configured endpoint.

    Every failure mode resolves to a failed :class:`SubmitResult`; nothing is
    raised to the submission phase. Use as an async context manager to share one
    client across the concurrent submits of a save cycle, otherwise each call
    opens its own client.
    """

    config: SubmissionConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> HttpUnitSubmitter:
        self._client = self.client_factory(self.config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def __call__(self, unit_id: UnitId, data: Mapping[str, object]) -> SubmitResult:
        endpoint = self.config.endpoint_for(unit_id)
        if endpoint is None:
            return SubmitResult(success=False, unit_id=unit_id, error=f"Unknown unit id: {unit_id}")

        url = self.url_for(endpoint)
        try:
            if self._client is not None:
                response = await self._client.post(url, json=dict(data))
            else:
                async with self.client_factory(self.config.resilience) as client:
                    response = await client.post(url, json=dict(data))
        except httpx.HTTPError as exc:
            log.warning(f"Submitting {unit_id} to {url} failed: {exc}")
            return SubmitResult(success=False, unit_id=unit_id, error=str(exc) or "Network error")

        try:
            payload = self._parse(response)
        except SubmissionAPIError as exc:
            return SubmitResult(
                success=False, unit_id=unit_id, error=str(exc), status_code=exc.status_code
            )

        if not response.is_success or not payload.success:
            return SubmitResult(
                success=False,
                unit_id=unit_id,
                error=payload.error or f"Server returned {response.status_code}",
                status_code=response.status_code,
            )
        return SubmitResult(
            success=True, unit_id=unit_id, data=payload, status_code=response.status_code
        )

    def url_for(self, endpoint: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    @staticmethod
    def _parse(response: httpx.Response) -> SubmissionResponse:
        try:
            return SubmissionResponse.model_validate(response.json())
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
            log.error(f"Unexpected submission payload (HTTP {response.status_code}): {exc}")
            raise SubmissionAPIError(
                f"Unexpected response payload (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from exc
