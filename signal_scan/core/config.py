"""Poller configuration loaded from environment variables.

All configuration values have defaults matching the public results
viewer (poll every 2 seconds, give up after 30 pending responses, cosmetic
progress capped at 90).

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value cannot be parsed or is out of its valid range.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from signal_scan.core.exceptions import ValidationError


class ConfigValidationError(ValidationError):
    """Raised when a configuration value is unparseable or out of range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        reason: Description of the accepted values.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.reason = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class PollerConfig:
    """Immutable poller configuration.

    Loaded once at startup and threaded through the watcher into every
    session it creates.

    Attributes:
        api_base_url: Base URL of the results API (empty for same-origin).
        poll_interval_seconds: Delay between a pending response and the next fetch.
        max_attempts: Maximum status fetches per session before timing out.
        progress_tick_seconds: Delay between cosmetic progress increments.
        progress_step_min: Smallest progress increment per tick.
        progress_step_max: Largest progress increment per tick.
        progress_ceiling: Progress never rises above this while in flight.
        request_timeout_seconds: HTTP timeout for a single status fetch.
    """

    api_base_url: str = ""
    poll_interval_seconds: float = 2.0
    max_attempts: int = 30
    progress_tick_seconds: float = 0.6
    progress_step_min: int = 2
    progress_step_max: int = 7
    progress_ceiling: int = 90
    request_timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        _validate(self)

    @classmethod
    def from_env(cls) -> PollerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value cannot be parsed
                (e.g. ``MAX_POLL_ATTEMPTS=abc``) or is out of range.
        """
        return cls(
            api_base_url=os.getenv("SIGNAL_SCAN_API_BASE_URL", ""),
            poll_interval_seconds=_env_number("POLL_INTERVAL_SECONDS", "2.0", float),
            max_attempts=_env_number("MAX_POLL_ATTEMPTS", "30", int),
            progress_tick_seconds=_env_number("PROGRESS_TICK_SECONDS", "0.6", float),
            progress_step_min=_env_number("PROGRESS_STEP_MIN", "2", int),
            progress_step_max=_env_number("PROGRESS_STEP_MAX", "7", int),
            progress_ceiling=_env_number("PROGRESS_CEILING", "90", int),
            request_timeout_seconds=_env_number("REQUEST_TIMEOUT_SECONDS", "30", float),
        )


def _env_number(key: str, default: str, parse: type[int] | type[float]) -> Any:
    """Read *key* from the environment and parse it with *parse*."""
    raw = os.getenv(key, default)
    try:
        return parse(raw)
    except ValueError as exc:
        kind = "an integer" if parse is int else "a number"
        raise ConfigValidationError(key, raw, f"must be {kind}") from exc


def _validate(config: PollerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.poll_interval_seconds <= 0:
        raise ConfigValidationError(
            "POLL_INTERVAL_SECONDS",
            config.poll_interval_seconds,
            "must be > 0 (seconds)",
        )

    if config.max_attempts < 1:
        raise ConfigValidationError(
            "MAX_POLL_ATTEMPTS",
            config.max_attempts,
            "must be >= 1",
        )

    if config.progress_tick_seconds <= 0:
        raise ConfigValidationError(
            "PROGRESS_TICK_SECONDS",
            config.progress_tick_seconds,
            "must be > 0 (seconds)",
        )

    if config.progress_step_min < 1:
        raise ConfigValidationError(
            "PROGRESS_STEP_MIN",
            config.progress_step_min,
            "must be >= 1",
        )

    if config.progress_step_max < config.progress_step_min:
        raise ConfigValidationError(
            "PROGRESS_STEP_MAX",
            config.progress_step_max,
            f"must be >= PROGRESS_STEP_MIN ({config.progress_step_min})",
        )

    if not 0 < config.progress_ceiling < 100:
        raise ConfigValidationError(
            "PROGRESS_CEILING",
            config.progress_ceiling,
            "must be between 1 and 99 (percentage)",
        )

    if config.request_timeout_seconds <= 0:
        raise ConfigValidationError(
            "REQUEST_TIMEOUT_SECONDS",
            config.request_timeout_seconds,
            "must be > 0 (seconds)",
        )
