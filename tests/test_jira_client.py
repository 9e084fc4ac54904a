import base64
import json
from typing import List

import httpx
import pytest

from jira_aging.adapters.jira.client import JiraClient, cache_key
from jira_aging.infrastructure.cache.in_memory import InMemoryResponseCache

PAGE = {
    "startAt": 0,
    "maxResults": 50,
    "total": 1,
    "issues": [
        {
            "id": "10001",
            "key": "ABC-1",
            "changelog": {
                "histories": [
                    {
                        "id": "1",
                        "author": {"name": "alice"},
                        "created": "2018-11-05T14:10:25.073-0600",
                        "items": [{"field": "status", "toString": "In Progress"}],
                    }
                ]
            },
        }
    ],
}


class RecordingHandler:
    def __init__(self, status_code: int = 200, body: bytes = json.dumps(PAGE).encode()) -> None:
        self.status_code = status_code
        self.body = body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body)


def make_client(handler, cache=None) -> JiraClient:
    return JiraClient(
        base_url="https://jira.example.com",
        username="alice",
        password="secret",
        cache=cache,
        transport=httpx.MockTransport(handler),
    )


def test_fetch_page_requests_board_issues_with_changelog():
    handler = RecordingHandler()

    with make_client(handler) as client:
        page = client.fetch_page(board_id=2924, start_at=50)

    assert page.issues[0].key == "ABC-1"
    request = handler.requests[0]
    assert request.url.path == "/rest/agile/1.0/board/2924/issue"
    assert request.url.params["fields"] == "changelog"
    assert request.url.params["expand"] == "changelog"
    assert request.url.params["startAt"] == "50"
    expected = base64.b64encode(b"alice:secret").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"


def test_fetch_page_stores_body_and_reuses_cache():
    handler = RecordingHandler()
    cache = InMemoryResponseCache()
    client = make_client(handler, cache=cache)

    first = client.fetch_page(board_id=2924, start_at=0)
    second = client.fetch_page(board_id=2924, start_at=0)

    assert len(handler.requests) == 1
    assert cache.keys() == ["board.2924.issue.0.json"]
    assert first == second


def test_fetch_page_serves_cached_body_without_network():
    handler = RecordingHandler()
    cache = InMemoryResponseCache()
    cache.put(cache_key(1, 0), json.dumps({**PAGE, "total": 9}).encode())

    page = make_client(handler, cache=cache).fetch_page(board_id=1, start_at=0)

    assert page.total == 9
    assert handler.requests == []


@pytest.mark.parametrize("status_code", [302, 401, 500])
def test_error_status_raises_connection_error_and_is_not_cached(status_code):
    handler = RecordingHandler(status_code=status_code, body=b"nope")
    cache = InMemoryResponseCache()

    with pytest.raises(ConnectionError) as excinfo:
        make_client(handler, cache=cache).fetch_page(board_id=1, start_at=0)

    assert str(status_code) in str(excinfo.value)
    assert cache.keys() == []


def test_transport_failure_raises_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ConnectionError) as excinfo:
        make_client(handler).fetch_page(board_id=1, start_at=0)

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_timeout_raises_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(ConnectionError, match="Timeout"):
        make_client(handler).fetch_page(board_id=1, start_at=0)


def test_malformed_body_raises_value_error():
    handler = RecordingHandler(body=b"<html>login</html>")

    with pytest.raises(ValueError):
        make_client(handler).fetch_page(board_id=1, start_at=0)
