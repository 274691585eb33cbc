"""Pytest fixtures for NextEvent SDK tests"""

import json
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from nextevent.client import Client
from nextevent.core.config import Env
from nextevent.models.token import Token
from nextevent.rest.client import RestClient
from nextevent.services.iam import IAM_TOKEN_KEY
from nextevent.store.memory import MemoryStore

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "nextevent_responses"

APP_ID = "app1"
APP_URL = "https://app1.nextevent.test"
IAM_TOKEN_URL = "https://iam.nextevent.com/oauth/basic"
PAYMENT_IPN_URL = "https://payment.nextevent.com/payment/ipn/external"


def load_fixture(name: str) -> Any:
    """Load a JSON response fixture by file name (without .json)"""
    return json.loads((FIXTURES_DIR / f"{name}.json").read_text())


# =============================================================================
# Fake application API
# =============================================================================


class FakeAPI:
    """httpx MockTransport handler serving queued responses per route

    Routes are matched on method and path; the last queued response of a
    route is repeated once the queue is drained.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Any = None,
        headers: dict[str, str] | None = None,
        text: str | None = None,
    ) -> "FakeAPI":
        spec = {
            "status_code": status_code,
            "json": json,
            "headers": headers,
            "text": text,
        }
        self.routes.setdefault((method, path), []).append(spec)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"detail": "route not mocked"})
        spec = queue.pop(0) if len(queue) > 1 else queue[0]
        if spec["text"] is not None:
            return httpx.Response(
                spec["status_code"], text=spec["text"], headers=spec["headers"]
            )
        if spec["json"] is None:
            return httpx.Response(spec["status_code"], headers=spec["headers"])
        return httpx.Response(
            spec["status_code"], json=spec["json"], headers=spec["headers"]
        )

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and r.url.path == path
        ]

    def http_client(self) -> httpx.Client:
        return RestClient.build_http_client(
            APP_URL, transport=httpx.MockTransport(self.handler)
        )


# =============================================================================
# Global Test Setup
# =============================================================================


@pytest.fixture(autouse=True)
def reset_env():
    """Env is process wide, restore the defaults after every test"""
    Env.reset()
    yield
    Env.reset()


@pytest.fixture
def fixture_loader() -> Callable[[str], Any]:
    return load_fixture


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def valid_iam_token(memory_store: MemoryStore) -> Token:
    """Cached IAM token so tests don't hit the IAM service"""
    token = Token(
        access_token="cached-iam-token",
        expires_at=time.time() + 3600,
        scope=f"identity_info {APP_ID}",
    )
    memory_store.set(IAM_TOKEN_KEY, token.to_string())
    return token


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def rest_client(fake_api: FakeAPI) -> RestClient:
    return RestClient(fake_api.http_client())


@pytest.fixture
def sdk_client(
    fake_api: FakeAPI, memory_store: MemoryStore, valid_iam_token: Token
) -> Client:
    """Client talking to the fake API with a cached IAM token"""
    return Client(
        app_id=APP_ID,
        app_url=APP_URL,
        auth_username="sdk-user",
        auth_password="sdk-password",
        cache=memory_store,
        http_client=fake_api.http_client(),
    )


@pytest.fixture
def sample_payment_data() -> dict[str, Any]:
    return load_fixture("payment")


@pytest.fixture
def sample_customer() -> dict[str, Any]:
    return {
        "email": "thomas.muster@example.com",
        "name": "Thomas Muster",
        "company": "Musterfirma",
        "address": {
            "street": "Musterstr. 1",
            "pobox": "",
            "zip": "3001",
            "city": "Bern",
            "country": "ch",
        },
    }
