"""Shared fixtures: a fake Zoraxy behind httpx.MockTransport and an app wired to it."""

import json
import time
from typing import Callable, Dict, List, Set

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from blocklist_manager.core.config import Settings
from blocklist_manager.core.zoraxy_client import ZoraxyClient
from main import create_app

API_KEY = "test-api-key"
ZORAXY_URL = "http://localhost:8000"


def _json_response(value) -> httpx.Response:
    # json=None would send an empty body, Zoraxy sends a literal null
    return httpx.Response(
        200, content=json.dumps(value).encode(), headers={"Content-Type": "application/json"}
    )


class FakeZoraxy:
    """Records every request and answers like the Zoraxy plugin API."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.failing_ips: Set[str] = set()
        self.status_override: Dict[str, int] = {}
        self.access_rules = [
            {
                "ID": "default",
                "Name": "Default",
                "Desc": "Default access rule",
                "BlacklistEnabled": True,
                "WhitelistEnabled": False,
            },
            {
                "ID": "abc",
                "Name": "Office",
                "Desc": "",
                "BlacklistEnabled": False,
                "WhitelistEnabled": True,
            },
        ]
        self.blacklists: Dict[str, List[str]] = {"default": ["192.0.2.1", "192.0.2.2"]}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.status_override:
            return httpx.Response(self.status_override[path], text="upstream unhappy")

        if path == ZoraxyClient.ADD_IP_PATH:
            if request.url.params["ip"] in self.failing_ips:
                return httpx.Response(500, text="invalid ip")
            return httpx.Response(200, json="OK")
        if path == ZoraxyClient.LIST_ACCESS_RULES_PATH:
            return _json_response(self.access_rules)
        if path == ZoraxyClient.LIST_BLACKLIST_PATH:
            # unknown rule -> Go nil slice -> null
            return _json_response(self.blacklists.get(request.url.params["id"]))
        return httpx.Response(404, text="404 page not found")

    @property
    def added(self) -> List[tuple]:
        return [
            (r.url.params["id"], r.url.params["ip"])
            for r in self.requests
            if r.url.path == ZoraxyClient.ADD_IP_PATH
        ]


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        time.sleep(0.01)


@pytest.fixture
def fake_zoraxy() -> FakeZoraxy:
    return FakeZoraxy()


@pytest_asyncio.fixture
async def http_client(fake_zoraxy):
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_zoraxy)) as client:
        yield client


@pytest.fixture
def zoraxy_client(http_client) -> ZoraxyClient:
    return ZoraxyClient(ZORAXY_URL, API_KEY, http_client)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, api_key=API_KEY, zoraxy_port=8000, port=9100)


@pytest.fixture
def app(settings, http_client):
    return create_app(settings, http_client=http_client)


@pytest.fixture
def client(app) -> TestClient:
    # Context manager keeps one event loop alive across requests, so detached
    # import tasks keep running between calls.
    with TestClient(app) as c:
        yield c


def guard_free(app) -> Callable[[], bool]:
    return lambda: not app.state.import_guard.locked()
