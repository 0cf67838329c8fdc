"""Extract RFC 7807 problem details from an untyped response body.

Each resolver reads one member from the decoded body and checks its runtime
type before using it. A member of the wrong type counts as missing, so a
resolver falls back to its default instead of raising. None of the functions
here perform I/O or log.
"""
from __future__ import annotations

import copy
import math
from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple, Type, Union

from problemDetails.models import DEFAULT_STATUS, DEFAULT_TITLE, ProblemDetails

_MISSING = object()
_PRIMITIVES = (str, bytes, bytearray, int, float, complex, bool)


def get_member(result: Any, name: str) -> Any:
    """Return member ``name`` of ``result`` or a sentinel when it has none.

    Mappings expose their keys and other objects their attributes. ``None``
    and primitives expose nothing.
    """
    if result is None or isinstance(result, _PRIMITIVES):
        return _MISSING
    try:
        if isinstance(result, Mapping):
            return result[name] if name in result else _MISSING
        return getattr(result, name, _MISSING)
    except Exception:  # noqa: BLE001 - a failing lookup reads as an absent member
        return _MISSING


_Kind = Union[Type[Any], Tuple[Type[Any], ...]]


def _typed_member(result: Any, name: str, kind: _Kind) -> Any:
    value = get_member(result, name)
    # bool is an int subclass but never a JSON number
    if value is _MISSING or isinstance(value, bool) or not isinstance(value, kind):
        return _MISSING
    return value


def has_member(result: Any, name: str, kind: _Kind) -> bool:
    """True when ``result`` exposes ``name`` and its value is a ``kind``."""
    return _typed_member(result, name, kind) is not _MISSING


def _get_string(result: Any, name: str) -> Optional[str]:
    value = _typed_member(result, name, str)
    return None if value is _MISSING else value


def get_title(result: Any, fallback_title: str | None = None) -> str:
    """Return ``title``, then ``statusText``, then the fallback.

    ``statusText`` covers bodies that only echo the transport status line.
    Without a usable fallback the title is ``"Server Error"``.
    """
    title = _get_string(result, "title")
    if title is not None:
        return title
    status_text = _get_string(result, "statusText")
    if status_text is not None:
        return status_text
    if isinstance(fallback_title, str):
        return fallback_title
    return DEFAULT_TITLE


def get_status(result: Any) -> int:
    """Return the numeric ``status`` member, or 500.

    Numeric strings are not coerced. Floats are accepted only when integral.
    """
    status = _typed_member(result, "status", (int, float))
    if status is _MISSING:
        return DEFAULT_STATUS
    if isinstance(status, float):
        if not math.isfinite(status) or not status.is_integer():
            return DEFAULT_STATUS
        return int(status)
    return status


def get_type(result: Any) -> Optional[str]:
    return _get_string(result, "type")


def get_detail(result: Any) -> Optional[str]:
    return _get_string(result, "detail")


def get_trace_id(result: Any) -> Optional[str]:
    return _get_string(result, "traceId")


def get_instance(result: Any) -> Optional[str]:
    return _get_string(result, "instance")


def get_errors(result: Any) -> Optional[Dict[str, Any]]:
    """Return a snapshot of the ``errors`` mapping.

    Values are deep-copied without checking that they are lists of strings,
    so later changes to ``result`` do not reach the returned record.
    """
    errors = _typed_member(result, "errors", Mapping)
    if errors is _MISSING:
        return None
    try:
        return {str(key): copy.deepcopy(value) for key, value in errors.items()}
    except Exception:  # noqa: BLE001 - an uncopyable mapping reads as absent
        return None


def extract(result: Any, fallback_title: str | None = None) -> ProblemDetails:
    """Build a :class:`ProblemDetails` from a decoded response body.

    ``result`` may be anything: a parsed JSON document, a response-like
    object, ``None`` or a primitive. The call never raises. Without usable
    members the record carries ``status=500`` and ``title="Server Error"``.
    """
    return ProblemDetails(
        title=get_title(result, fallback_title),
        status=get_status(result),
        type=get_type(result),
        detail=get_detail(result),
        trace_id=get_trace_id(result),
        instance=get_instance(result),
        errors=get_errors(result),
    )


__all__ = [
    "extract",
    "get_detail",
    "get_errors",
    "get_instance",
    "get_member",
    "get_status",
    "get_title",
    "get_trace_id",
    "get_type",
    "has_member",
]
