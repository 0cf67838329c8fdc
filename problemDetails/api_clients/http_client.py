"""HTTP client that turns failure responses into :class:`ProblemDetails`."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from problemDetails.config import ClientConfig, load_config
from problemDetails.extract import extract, get_status, has_member
from problemDetails.models import DEFAULT_STATUS, ProblemDetails
from problemDetails.utils.log_json import JsonLogger

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemDetailsError(RuntimeError):
    """Raised when a request returns a failure status.

    The normalized body is available as :attr:`problem`.
    """

    def __init__(self, problem: ProblemDetails) -> None:
        self.problem = problem
        message = f"{problem.status} {problem.title}"
        if problem.detail:
            message = f"{message}: {problem.detail}"
        super().__init__(message)

    @property
    def status(self) -> int:
        return self.problem.status


def problem_from_response(resp: requests.Response, fallback_title: str | None = None) -> ProblemDetails:
    """Normalize the body of a failed response.

    Usable members of a JSON object body take precedence. The transport
    status code and reason phrase replace a ``status`` or ``statusText``
    that is missing or has the wrong type, so ``{"status": "404"}`` on a
    404 response still yields 404.
    """
    try:
        body = resp.json()
    except ValueError:
        body = None
    envelope: Dict[str, Any] = dict(body) if isinstance(body, dict) else {}
    if get_status(envelope) == DEFAULT_STATUS and envelope.get("status") != DEFAULT_STATUS:
        envelope["status"] = resp.status_code
    if resp.reason and not has_member(envelope, "statusText", str):
        envelope["statusText"] = resp.reason
    return extract(envelope, fallback_title)


@dataclass(slots=True)
class ProblemDetailsClient:
    """Convenience wrapper around :class:`requests.Session`.

    Parameters
    ----------
    base_url:
        Root URL prepended to every request path.
    api_key:
        Optional bearer token for authenticated requests.
    session:
        Optional :class:`requests.Session` for connection pooling.
    timeout:
        Request timeout in seconds (defaults to the loaded config).
    max_attempts:
        Attempts per request when the transport fails.
    fallback_title:
        Title used when a failure body carries no title or reason phrase.
    """

    base_url: str
    api_key: Optional[str] = None
    session: Optional[requests.Session] = None
    timeout: Optional[float] = None
    max_attempts: Optional[int] = None
    fallback_title: Optional[str] = None
    config: ClientConfig = field(default_factory=load_config)
    _session: requests.Session = field(init=False, repr=False)
    _owns_session: bool = field(init=False, repr=False)
    _logger: JsonLogger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._owns_session = self.session is None
        self._session = self.session or requests.Session()
        if self.timeout is None:
            self.timeout = self.config.timeout_seconds
        if self.max_attempts is None:
            self.max_attempts = self.config.max_attempts
        self._logger = JsonLogger(
            "http-client",
            max_details_bytes=self.config.log_max_details_bytes,
            sample_rate=self.config.log_sample_rate,
        )

    # ------------------------------------------------------------------#
    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait_time = getattr(retry_state.next_action, "sleep", None) if retry_state.next_action else None
        self._logger.warning(
            "api.retry",
            route=retry_state.kwargs.get("url"),
            attempt=retry_state.attempt_number,
            wait_seconds=wait_time,
            error=str(exc) if exc else None,
        )

    def _send(self, method: str, *, url: str, **kwargs: Any) -> requests.Response:
        return self._session.request(method, url, timeout=self.timeout, **kwargs)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded body.

        Raises :class:`ProblemDetailsError` for statuses of 400 and above.
        Transport errors are retried and re-raised once attempts run out.
        """
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}" if path else self.base_url
        headers = {
            "Accept": f"application/json, {PROBLEM_MEDIA_TYPE}",
            "User-Agent": self.config.user_agent,
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        self._logger.info("api.request", route=url, method=method.upper())
        start = time.perf_counter()
        retrying = Retrying(
            reraise=True,
            stop=stop_after_attempt(self.max_attempts or 1),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(requests.RequestException),
            before_sleep=self._log_retry,
        )
        resp = retrying(
            self._send,
            method.upper(),
            url=url,
            params=params,
            json=json,
            headers=headers,
        )
        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        if resp.status_code >= 400:
            problem = problem_from_response(resp, self.fallback_title)
            self._logger.warning(
                "api.problem",
                route=url,
                status=problem.status,
                latency_ms=latency_ms,
                trace_id=problem.trace_id,
                title=problem.title,
                type=problem.type,
            )
            raise ProblemDetailsError(problem)
        self._logger.info("api.response", route=url, status=resp.status_code, latency_ms=latency_ms)
        content_type = resp.headers.get("Content-Type", "").lower()
        if "json" not in content_type:
            return resp.text
        try:
            return resp.json()
        except ValueError:
            self._logger.error("api.invalid_json", route=url, status=resp.status_code)
            return resp.text

    def get(self, path: str = "", *, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str = "", *, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()


__all__ = ["PROBLEM_MEDIA_TYPE", "ProblemDetailsClient", "ProblemDetailsError", "problem_from_response"]
