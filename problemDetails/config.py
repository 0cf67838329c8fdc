from __future__ import annotations

"""Loader for HTTP client and logging settings."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from problemDetails import __version__

CONFIG_ENV = "PROBLEM_DETAILS_CONFIG"
TIMEOUT_ENV = "PROBLEM_DETAILS_TIMEOUT"
MAX_ATTEMPTS_ENV = "PROBLEM_DETAILS_MAX_ATTEMPTS"


class ConfigError(ValueError):
    """Raised when a config file cannot be interpreted."""


@dataclass(slots=True)
class ClientConfig:
    """Runtime settings with conservative defaults."""

    timeout_seconds: float = 10.0
    max_attempts: int = 3
    user_agent: str = field(default_factory=lambda: f"problemDetails/{__version__}")
    log_sample_rate: float = 1.0
    log_max_details_bytes: int = 4096


def _coerce_float(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _positive(value: float, default: float) -> float:
    return value if value > 0 else default


def config_path(path: Path | None = None) -> Path | None:
    if path is not None:
        return path
    env = os.getenv(CONFIG_ENV)
    return Path(env) if env else None


def _read(path: Path | None) -> Mapping[str, Any]:
    if path is None or not path.exists():
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return raw


def load_config(path: Path | None = None) -> ClientConfig:
    """Load settings from YAML, then apply environment overrides.

    The file location comes from ``path`` or ``PROBLEM_DETAILS_CONFIG``; a
    missing file yields the defaults. Values that cannot be coerced keep
    their defaults.
    """
    defaults = ClientConfig()
    raw = _read(config_path(path))
    client = raw.get("client") or {}
    logging_cfg = raw.get("logging") or {}
    if not isinstance(client, Mapping) or not isinstance(logging_cfg, Mapping):
        raise ConfigError("'client' and 'logging' sections must be mappings")

    file_timeout = _positive(_coerce_float(client.get("timeout_seconds"), defaults.timeout_seconds), defaults.timeout_seconds)
    timeout = _positive(_coerce_float(os.getenv(TIMEOUT_ENV), file_timeout), file_timeout)
    file_attempts = max(1, _coerce_int(client.get("max_attempts"), defaults.max_attempts))
    attempts = _positive(_coerce_int(os.getenv(MAX_ATTEMPTS_ENV), file_attempts), file_attempts)
    user_agent = client.get("user_agent")
    sample_rate = _coerce_float(logging_cfg.get("sample_rate"), defaults.log_sample_rate)
    max_details = _coerce_int(logging_cfg.get("max_details_bytes"), defaults.log_max_details_bytes)
    return ClientConfig(
        timeout_seconds=timeout,
        max_attempts=attempts,
        user_agent=user_agent if isinstance(user_agent, str) and user_agent else defaults.user_agent,
        log_sample_rate=max(0.0, min(1.0, sample_rate)),
        log_max_details_bytes=max(0, max_details),
    )


__all__ = ["ClientConfig", "ConfigError", "load_config"]
