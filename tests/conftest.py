from contextlib import contextmanager
from unittest.mock import MagicMock, patch

import aiohttp
import pytest

from resolution import Resolution

RPC_ENV_VARS = ("ENS_RPC_URL", "CNS_RPC_URL", "ZNS_RPC_URL", "UD_API_URL")

OWNER = "0x8aaD44321A86b170879d7A244c1e8d360c99DdA8"
RESOLVER = "0xb66DcE2DA6afAAa98F2013446dBCB0f4B0ab2842"
NULL_ADDRESS = "0x0000000000000000000000000000000000000000"


@pytest.fixture(autouse=True)
def default_urls(monkeypatch):
    """Keep developer .env overrides out of the tests"""
    for name in RPC_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def resolution():
    return Resolution()


@pytest.fixture
def api_resolution():
    return Resolution(blockchain=False, api={"url": "https://resolver.test/api/v1"})


class FakeResponse:
    """Stands in for aiohttp's response context manager"""

    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                MagicMock(), (), status=self.status, message="Server error"
            )

    async def json(self, content_type="application/json"):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Records requests and answers them with the queued responses in order"""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def _respond(self, method, url, kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        return self.responses.pop(0)

    def post(self, url, **kwargs):
        return self._respond("POST", url, kwargs)

    def get(self, url, **kwargs):
        return self._respond("GET", url, kwargs)


@contextmanager
def fake_http(*responses):
    """Serve each aiohttp request from the given FakeResponse objects"""
    session = FakeSession(responses)
    with patch("aiohttp.ClientSession", return_value=session):
        yield session
