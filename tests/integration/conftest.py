from __future__ import annotations

import os

import httpx
import pytest

DEFAULT_ENDPOINT = "http://localhost:4566"


def _localstack_up(endpoint_url: str) -> bool:
    try:
        resp = httpx.get(endpoint_url.rstrip("/") + "/_localstack/health", timeout=1.5)
    except httpx.HTTPError:
        return False
    return resp.is_success


@pytest.fixture(scope="session", autouse=True)
def localstack_env() -> None:
    """Point boto3 at LocalStack unless the environment says otherwise."""

    os.environ.setdefault("USE_LOCALSTACK", "true")
    os.environ.setdefault("ENDPOINT_URL", DEFAULT_ENDPOINT)
    os.environ.setdefault("AWS_REGION", "us-east-1")
    # LocalStack accepts any credentials, but boto3 needs some.
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")


@pytest.fixture(scope="session")
def require_localstack(localstack_env: None) -> str:
    endpoint_url = os.environ.get("ENDPOINT_URL", DEFAULT_ENDPOINT)
    if _localstack_up(endpoint_url):
        return endpoint_url

    msg = f"LocalStack not reachable at {endpoint_url}"
    if os.getenv("CI") or os.getenv("REQUIRE_LOCALSTACK"):
        pytest.fail(msg, pytrace=False)
    pytest.skip(msg)
