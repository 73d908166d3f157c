"""Shared test fixtures for the notioncli test suite."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from notioncli.client import NotionClient
from notioncli.config import CliConfig

PAGE_ID = "2fb74f324ab980f583dfc93c885072e7"
PAGE_UUID = "2fb74f32-4ab9-80f5-83df-c93c885072e7"
PARENT_ID = "11111111222233334444555555555555"
PARENT_UUID = "11111111-2222-3333-4444-555555555555"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """``httpx.MockTransport`` handler that replays canned responses.

    *responses* is consumed in order; each entry is either an
    ``httpx.Response`` or a callable taking the request.  Every request is
    recorded in :attr:`requests` with its decoded JSON body.
    """

    def __init__(self, *responses: httpx.Response | Handler) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request {request.method} {request.url}")
        nxt = self._responses.pop(0)
        return nxt(request) if callable(nxt) else nxt

    def body(self, index: int) -> Any:
        content = self.requests[index].content
        return json.loads(content) if content else None

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]


def json_response(status: int = 200, body: Any = None, **headers: str) -> httpx.Response:
    return httpx.Response(status, json=body if body is not None else {}, headers=headers)


def list_response(results: list[dict], has_more: bool = False, next_cursor: str | None = None):
    return json_response(
        200,
        {"object": "list", "results": results, "has_more": has_more, "next_cursor": next_cursor},
    )


@pytest.fixture
def config() -> CliConfig:
    """Default test configuration with a dummy key."""
    return CliConfig(api_key="secret_test_token_1234")


@pytest.fixture
def no_sleep():
    """Patch out the transport's sleep and expose the mock."""
    with patch("notioncli.notion_api.transport.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def make_client(config: CliConfig, no_sleep) -> Callable[..., tuple[NotionClient, RecordingHandler]]:
    """Build a :class:`NotionClient` whose HTTP traffic goes to a RecordingHandler."""
    clients: list[NotionClient] = []

    def factory(*responses: httpx.Response | Handler, **kwargs: Any):
        handler = RecordingHandler(*responses)
        kwargs.setdefault("retry_notice", lambda *_: None)
        client = NotionClient(config, http_transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client, handler

    yield factory
    for client in clients:
        client.close()
