from __future__ import annotations

from typing import Any

import pytest

from problemDetails import config as config_module


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    """Keep the developer's environment out of config resolution."""

    for name in (config_module.CONFIG_ENV, config_module.TIMEOUT_ENV, config_module.MAX_ATTEMPTS_ENV):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def validation_problem() -> dict[str, Any]:
    return {
        "type": "https://tools.ietf.org/html/rfc7231#section-6.5.1",
        "title": "One or more validation errors occurred.",
        "status": 400,
        "detail": "See the errors member for details.",
        "traceId": "00-0af7651916cd43dd8448eb211c80319c-b7ad6b7169203331-00",
        "instance": "/accounts/register",
        "errors": {
            "password": ["Length less than 8", "No capital letter"],
            "email": ["Email is already in use"],
        },
    }
