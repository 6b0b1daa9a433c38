from __future__ import annotations

import pytest

from multisave.config import SaveConfig
from multisave.domain.error_store import ErrorStore
from multisave.domain.save_pipeline import SaveCoordinator
from tests.helpers.units import FakeClock


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MULTISAVE_API_BASE_URL",
        "MULTISAVE_NOTIFICATION_SECONDS",
        "MULTISAVE_PHASE_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def coordinator(clock: FakeClock) -> SaveCoordinator:
    return SaveCoordinator(config=SaveConfig(), errors=ErrorStore(clock=clock))
