"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_seconds_env, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .save import DEFAULT_NOTIFICATION_SECONDS, SaveConfig, get_save_config
from .submission import SubmissionConfig, get_submission_config

__all__ = [
    "DEFAULT_NOTIFICATION_SECONDS",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SaveConfig",
    "SubmissionConfig",
    "configure_logging",
    "get_save_config",
    "get_submission_config",
    "optional_seconds_env",
    "require_env_var",
    "require_env_vars",
]
