from __future__ import annotations

"""Package metadata and the public extraction surface."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("problemDetails")
except PackageNotFoundError:  # pragma: no cover - package not installed
    __version__ = "0.1.0"

from problemDetails.extract import extract
from problemDetails.models import DEFAULT_STATUS, DEFAULT_TITLE, ProblemDetails

__all__ = [
    "DEFAULT_STATUS",
    "DEFAULT_TITLE",
    "ProblemDetails",
    "__version__",
    "extract",
]
