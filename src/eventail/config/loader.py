"""Config loading: YAML file plus .env overlay."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from eventail.config.schema import CONFIG_KEYS
from eventail.core.errors import EventailConfigurationError


def load_config(path: str | Path) -> dict[str, Any]:
    """Load registry settings from a YAML file; unknown keys are dropped with a warning."""
    path = Path(path)
    if not path.exists():
        logger.warning("Config file not found: {}", path)
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse config {}: {}", path, exc)
        raise EventailConfigurationError(
            f"Config file {path} is not valid YAML",
            code="invalid_yaml",
            details={"path": str(path)},
            original_error=exc,
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file {} has invalid structure (expected dict)", path)
        return {}

    unknown = sorted(str(key) for key in data if key not in CONFIG_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys in {}: {}", path, ", ".join(unknown))
    return {key: value for key, value in data.items() if key in CONFIG_KEYS}


def load_config_with_env(path: str | Path) -> dict[str, Any]:
    """Load .env into the process environment, then the YAML settings."""
    from dotenv import load_dotenv

    load_dotenv()
    return load_config(path)
