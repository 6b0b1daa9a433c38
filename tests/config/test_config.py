from __future__ import annotations

import pytest

from multisave.config import (
    DEFAULT_NOTIFICATION_SECONDS,
    ConfigurationError,
    MissingConfigurationError,
    SaveConfig,
    get_save_config,
    get_submission_config,
    optional_seconds_env,
    require_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert exc.value.names == ("MISSING_A", "MISSING_B")
    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_optional_seconds_env_parses_and_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_SECONDS", raising=False)
    assert optional_seconds_env("EXAMPLE_SECONDS", 1.5) == 1.5

    monkeypatch.setenv("EXAMPLE_SECONDS", "0.25")
    assert optional_seconds_env("EXAMPLE_SECONDS", None) == 0.25


@pytest.mark.parametrize("raw", ["soon", "-1"])
def test_optional_seconds_env_rejects_bad_values(
    monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    monkeypatch.setenv("EXAMPLE_SECONDS", raw)

    with pytest.raises(ConfigurationError) as exc:
        optional_seconds_env("EXAMPLE_SECONDS", None)

    assert "EXAMPLE_SECONDS" in str(exc.value)


def test_get_save_config_defaults() -> None:
    config = get_save_config()

    assert config == SaveConfig()
    assert config.notification_seconds == DEFAULT_NOTIFICATION_SECONDS
    assert config.phase_timeout_seconds is None


def test_get_save_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MULTISAVE_NOTIFICATION_SECONDS", "5")
    monkeypatch.setenv("MULTISAVE_PHASE_TIMEOUT_SECONDS", "30")

    config = get_save_config()

    assert config.notification_seconds == 5.0
    assert config.phase_timeout_seconds == 30.0


def test_get_submission_config_requires_base_url() -> None:
    with pytest.raises(MissingConfigurationError) as exc:
        get_submission_config()

    assert "MULTISAVE_API_BASE_URL" in str(exc.value)


def test_get_submission_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MULTISAVE_API_BASE_URL", "https://api.example.test")

    config = get_submission_config(endpoints={"profile": "/profile"})

    assert config.base_url == "https://api.example.test"
    assert config.endpoint_for("profile") == "/profile"
    assert config.endpoint_for("other") is None
    assert config.resilience.ratelimit is not None


def test_explicit_base_url_wins_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MULTISAVE_API_BASE_URL", "https://env.example.test")

    config = get_submission_config(base_url="https://cli.example.test")

    assert config.base_url == "https://cli.example.test"
