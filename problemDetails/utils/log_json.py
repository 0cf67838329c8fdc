from __future__ import annotations

"""Structured JSON event logger with redaction of sensitive values."""

import json
import logging
import random
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, MutableMapping

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
TOKEN_RE = re.compile(r"(?:bearer\s+)?[A-Za-z0-9\-_=]{20,}", re.IGNORECASE)
URL_QUERY_RE = re.compile(r"https?://[^\s?]+\?[^\s]+")
PATH_RE = re.compile(r"(?<![:/\w])(?:[A-Za-z]:\\[^\s]+|/(?:home|root|Users|tmp|var)/[^\s]+)")
GUID_RE = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")

# Promoted to the top level of every entry instead of living under details.
_TOP_LEVEL_KEYS = ("trace_id", "route", "latency_ms", "status")


def scrub(value: str) -> str:
    """Redact emails, tokens, query strings, local paths and GUIDs."""
    value = EMAIL_RE.sub("[redacted]", value)
    value = URL_QUERY_RE.sub(lambda m: m.group(0).split("?")[0], value)
    value = GUID_RE.sub("[guid]", value)
    value = TOKEN_RE.sub("[redacted]", value)
    value = PATH_RE.sub("[path]", value)
    return value


def sanitize(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {str(k): sanitize(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize(v) for v in obj]
    if isinstance(obj, (int, float, bool)) or obj is None:
        return obj
    return scrub(str(obj))


def truncate(details: Mapping[str, Any] | Iterable[Any], max_bytes: int) -> Any:
    if max_bytes <= 0:
        return details
    serialized = json.dumps(details, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    blob = serialized.encode("utf-8")
    if len(blob) <= max_bytes:
        return details
    preview = blob[:max_bytes].decode("utf-8", errors="ignore")
    return {"note": "truncated", "preview": preview}


class JsonLogger:
    """Emit one JSON line per event with consistent keys.

    Handlers are left to the application; without one, warnings and errors
    reach stderr through the logging module's last-resort handler.
    """

    def __init__(
        self,
        service: str,
        *,
        logger: logging.Logger | None = None,
        max_details_bytes: int = 4096,
        sample_rate: float = 1.0,
    ) -> None:
        self._service = service
        self._logger = logger or logging.getLogger(f"problemdetails.{service}")
        self._max_details_bytes = max(0, int(max_details_bytes))
        self._sample_rate = max(0.0, min(1.0, float(sample_rate)))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def info(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit(logging.INFO, event, fields)

    def warning(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit(logging.WARNING, event, fields)

    def error(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit(logging.ERROR, event, fields)

    def should_sample(self) -> bool:
        if self._sample_rate >= 1.0:
            return True
        return random.random() <= self._sample_rate

    def _emit(self, level: int, event: str, fields: MutableMapping[str, Any]) -> dict[str, Any] | None:
        if not self._logger.isEnabledFor(level) or not self.should_sample():
            return None
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "service": self._service,
            "event": event,
        }
        for key in _TOP_LEVEL_KEYS:
            value = fields.pop(key, None)
            if value is not None:
                entry[key] = value
        if fields:
            entry["details"] = truncate(sanitize(fields), self._max_details_bytes)
        self._logger.log(level, json.dumps(entry, ensure_ascii=False, sort_keys=True, separators=(",", ":")))
        return entry


__all__ = ["JsonLogger", "sanitize", "scrub", "truncate"]
