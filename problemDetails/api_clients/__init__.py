"""HTTP collaborators that feed response bodies to the extractor."""

from .http_client import PROBLEM_MEDIA_TYPE, ProblemDetailsClient, ProblemDetailsError, problem_from_response

__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "ProblemDetailsClient",
    "ProblemDetailsError",
    "problem_from_response",
]
