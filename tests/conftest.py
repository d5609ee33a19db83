"""Shared pytest fixtures."""

import json
from collections.abc import Callable

import httpx
import pytest

from log_config import SecretFilter
from settings import Settings


IMAGE_URL = "https://p3-aiop-sign.byteimg.com/tos/abc.png?x-expires=1&x-signature=x"


@pytest.fixture
def settings() -> Settings:
    """Settings with complete credentials."""
    return Settings(access_key="AK", secret_key="SK", timeout=5.0)


@pytest.fixture
def no_credentials() -> Settings:
    """Settings with no credentials configured."""
    return Settings()


@pytest.fixture
def upstream() -> Callable[..., tuple[httpx.AsyncClient, list[httpx.Request]]]:
    """Factory for an httpx client backed by a fake visual API.

    Returns (client, captured_requests). The fake answers every request
    with the given status and body.
    """

    def factory(
        status_code: int = 200, body: object | str | None = None
    ) -> tuple[httpx.AsyncClient, list[httpx.Request]]:
        if body is None:
            body = {
                "code": 10000,
                "data": {"image_urls": [IMAGE_URL]},
                "ResponseMetadata": {"RequestId": "req-1"},
            }
        text = body if isinstance(body, str) else json.dumps(body)
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(status_code, text=text)

        return httpx.AsyncClient(transport=httpx.MockTransport(handler)), captured

    return factory


@pytest.fixture(autouse=True)
def clear_secrets() -> None:
    """Reset the secret redaction registry between tests."""
    SecretFilter.clear_secrets()
