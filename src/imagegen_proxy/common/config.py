"""Provider configuration loading.

Values come from an optional YAML file (``fal:`` section) and are overridden by
``FAL_*`` environment variables.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from imagegen_proxy.common.errors import ConfigurationError

DEFAULT_MODEL_ID = "fal-ai/flux-pro/v1.1-ultra"
DEFAULT_TIMEOUT_SECONDS = 60.0

ENV_KEYS = {
    "api_key": "FAL_API_KEY",
    "api_url": "FAL_API_URL",
    "model_id": "FAL_MODEL_ID",
    "timeout_seconds": "FAL_TIMEOUT_SECONDS",
}


@dataclass(frozen=True)
class FalSettings:
    """Read-only settings for the FAL.ai forwarding client."""
    api_key: str | None
    api_url: str | None
    model_id: str = DEFAULT_MODEL_ID
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def masked_api_key(self) -> str:
        if not self.api_key:
            return "NULL"
        return "***" + self.api_key[-4:]


def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    section = data.get("fal", {}) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'fal' section in {path} must be a mapping")
    return section


def load_settings(cfg_path: str | None = None) -> FalSettings:
    """
    Build FalSettings from a YAML file and the environment.

    Args:
        cfg_path: Optional YAML path. Missing files are an error when a path is
            given explicitly.

    Returns:
        Settings; api_url may still be None, which FalClient rejects.
    """
    values: dict[str, Any] = {}
    if cfg_path is not None:
        if not Path(cfg_path).exists():
            raise ConfigurationError(f"Config file not found at {cfg_path}")
        values.update(load_cfg(cfg_path))

    for key, env_name in ENV_KEYS.items():
        env_value = os.getenv(env_name)
        if env_value:
            values[key] = env_value

    raw_timeout = values.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid timeout_seconds: {raw_timeout!r}") from e
    if timeout <= 0:
        raise ConfigurationError(f"timeout_seconds must be positive, got {timeout}")

    return FalSettings(
        api_key=_as_text("api_key", values.get("api_key")),
        api_url=_as_text("api_url", values.get("api_url")),
        model_id=_as_text("model_id", values.get("model_id")) or DEFAULT_MODEL_ID,
        timeout_seconds=timeout,
    )


def _as_text(key: str, value: Any) -> str | None:
    # YAML turns unquoted keys like 12345 into ints.
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ConfigurationError(f"{key} must be a string, got {type(value).__name__}")
    return str(value)
