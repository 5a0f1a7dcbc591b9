"""Shared fixtures for NsApi tests."""

import pytest

from nsapi.api.client import NsApi
from nsapi.types.response import RawResponse, ResponseMetadata


class FakeTransport:
    """Records queries and replays canned responses in order."""

    base_url = "https://fake.test/cgi-bin/api.cgi"

    def __init__(self):
        self.requests: list[tuple[str, dict[str, str]]] = []
        self.responses: list = []
        self.default = "<NATION><NAME>Testlandia</NAME></NATION>"
        self.closed = False

    def respond(self, *responses):
        self.responses.extend(responses)

    @property
    def queries(self) -> list[str]:
        return [query for query, _ in self.requests]

    async def fetch(self, query, headers=None):
        self.requests.append((query, dict(headers or {})))
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            response = RawResponse(text=response, metadata=ResponseMetadata(status_code=200))
        return response

    async def aclose(self):
        self.closed = True


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def api(transport):
    return NsApi(
        "Testlandia",
        api_delay=0.0,
        recruit_telegram_delay=0.0,
        non_recruit_telegram_delay=0.0,
        allow_immediate_requests=True,
        test_mode=True,
        transport=transport,
    )
