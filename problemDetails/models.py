from __future__ import annotations

"""RFC 7807 problem details record."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TITLE = "Server Error"
DEFAULT_STATUS = 500


class ProblemDetails(BaseModel):
    """Problem details extracted from an unsuccessful response.

    See https://datatracker.ietf.org/doc/html/rfc7807

    Instances are frozen. Build them with :func:`problemDetails.extract` or
    :meth:`from_response` so that missing or mistyped members are defaulted
    instead of rejected.

    Freezing stops field reassignment only. ``errors`` is a snapshot of the
    input but stays a plain dict, so it is mutable one level down and the
    record is not hashable.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    __hash__ = None  # type: ignore[assignment]

    title: str = Field(DEFAULT_TITLE, description="Short human-readable summary of the problem.")
    status: int = Field(DEFAULT_STATUS, description="HTTP status code.")
    type: Optional[str] = Field(default=None, description="URI reference identifying the problem type.")
    detail: Optional[str] = Field(
        default=None,
        description="Human-readable explanation specific to this occurrence.",
    )
    trace_id: Optional[str] = Field(
        default=None,
        alias="traceId",
        description="Correlation ID for tracing this request in server logs.",
    )
    instance: Optional[str] = Field(
        default=None,
        description="URI reference identifying the specific occurrence of the problem.",
    )
    errors: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Validation failures keyed by field name.",
    )

    @classmethod
    def from_response(cls, result: Any, fallback_title: str | None = None) -> "ProblemDetails":
        """Build a record from a decoded response body of any shape.

        ``fallback_title`` is used when the body carries neither ``title``
        nor ``statusText``.
        """
        from problemDetails.extract import extract

        return extract(result, fallback_title)

    @property
    def is_default(self) -> bool:
        """True when nothing beyond the defaults could be extracted."""
        return self == ProblemDetails()

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire form with absent members omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def error_messages(self) -> List[str]:
        """Flatten ``errors`` into ``"field: message"`` lines.

        Entries that are not lists of strings are skipped.
        """
        if not self.errors:
            return []
        lines: List[str] = []
        for name, messages in self.errors.items():
            if not isinstance(messages, (list, tuple)):
                continue
            lines.extend(f"{name}: {message}" for message in messages if isinstance(message, str))
        return lines


__all__ = ["DEFAULT_STATUS", "DEFAULT_TITLE", "ProblemDetails"]
