"""Config schema and accessor."""

from __future__ import annotations

import os
from typing import Any

from loguru import logger

from eventail.core.constants import DEFAULT_PRIORITY, LINEAR_SCAN_THRESHOLD, Priority
from eventail.core.errors import EventailConfigurationError

# Env keys that override config (loaded once per reload)
_ENV_OVERRIDE_KEYS = (
    "EVENTAIL_DEFAULT_PRIORITY",
    "EVENTAIL_LINEAR_SCAN_THRESHOLD",
    "EVENTAIL_LOG_LEVEL",
)

CONFIG_KEYS = ("default_priority", "linear_scan_threshold", "log_level")

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _load_env_overrides() -> dict[str, str]:
    """Load env overrides once per reload."""
    return {k: os.environ.get(k, "") for k in _ENV_OVERRIDE_KEYS}


def _parse_number(val: Any) -> Priority | None:
    """Parse an int or float; None if val is not numeric."""
    if isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        return val
    if isinstance(val, str) and val.strip():
        text = val.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return None
    return None


class Config:
    """Config accessor; env overrides win over file values."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}
        self._env: dict[str, str] = _load_env_overrides()

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data."""
        self._data = data or {}
        self._env = _load_env_overrides()
        if validate:
            self._validate()
        logger.debug(
            "Config reloaded: default_priority={} linear_scan_threshold={}",
            self.default_priority,
            self.linear_scan_threshold,
        )

    def _validate(self) -> None:
        """Validate config values; raise EventailConfigurationError on failure."""
        raw_priority = self._env.get("EVENTAIL_DEFAULT_PRIORITY") or self._data.get("default_priority")
        if raw_priority is not None and _parse_number(raw_priority) is None:
            raise EventailConfigurationError(
                "default_priority must be a number",
                code="invalid_default_priority",
                details={"value": raw_priority},
            )

        raw_threshold = self._env.get("EVENTAIL_LINEAR_SCAN_THRESHOLD") or self._data.get(
            "linear_scan_threshold"
        )
        if raw_threshold is not None:
            threshold = _parse_number(raw_threshold)
            if not isinstance(threshold, int) or threshold < 1:
                raise EventailConfigurationError(
                    "linear_scan_threshold must be a positive integer",
                    code="invalid_linear_scan_threshold",
                    details={"value": raw_threshold},
                )

        if self.log_level not in _LOG_LEVELS:
            raise EventailConfigurationError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}",
                code="invalid_log_level",
                details={"value": self.log_level},
            )

    @property
    def default_priority(self) -> Priority:
        """Priority given to listeners registered without one."""
        parsed = _parse_number(self._env.get("EVENTAIL_DEFAULT_PRIORITY", ""))
        if parsed is not None:
            return parsed
        parsed = _parse_number(self._data.get("default_priority"))
        return DEFAULT_PRIORITY if parsed is None else parsed

    @property
    def linear_scan_threshold(self) -> int:
        parsed = _parse_number(self._env.get("EVENTAIL_LINEAR_SCAN_THRESHOLD", ""))
        if isinstance(parsed, int) and parsed >= 1:
            return parsed
        parsed = _parse_number(self._data.get("linear_scan_threshold"))
        if isinstance(parsed, int) and parsed >= 1:
            return parsed
        return LINEAR_SCAN_THRESHOLD

    @property
    def log_level(self) -> str:
        env_val = self._env.get("EVENTAIL_LOG_LEVEL", "")
        if env_val.strip():
            return env_val.strip().upper()
        return str(self._data.get("log_level", "INFO")).upper()


# Global config instance (reloaded by __main__ or embedding applications)
cfg: Config = Config({})
