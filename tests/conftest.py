"""
Shared fixtures for channel tests.

Outbound HTTP is served by ``httpx.MockTransport`` so no test touches the
network; every request a channel makes is recorded for inspection.
"""

import json
from typing import Any, Optional

import httpx
import pytest

from pushgate.transport import HttpTransport


class RecordingHandler:
    """MockTransport handler that records requests and returns a canned response."""

    def __init__(self, status_code: int = 200, json_body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self.json_body = {"code": 0, "msg": "success"} if json_body is None and text is None else json_body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def transport(handler):
    return HttpTransport(transport=httpx.MockTransport(handler))


def make_transport(handler: RecordingHandler) -> HttpTransport:
    return HttpTransport(transport=httpx.MockTransport(handler))
