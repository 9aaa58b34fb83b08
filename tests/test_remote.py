import asyncio

import httpx
import pytest

from meetsync.errors import RemoteFetchError
from meetsync.services.remote import RemoteClient

from conftest import meeting


def _client(handler, token="secret"):
    return RemoteClient("http://remote.test/api", token=token, transport=httpx.MockTransport(handler))


def test_fetch_categorized_meetings_parses_categories():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"data": [{"id": 1, "name": "Sales", "meetings": [meeting("evt-1", "2024-01-01")]}]})

    categories = asyncio.run(_client(handler).fetch_categorized_meetings(100))

    assert seen == {
        "path": "/api/categories-with-meetings/",
        "params": {"num_meetings": "100"},
        "auth": "Bearer secret",
    }
    assert categories[0].meetings[0].event_id == "evt-1"
    assert categories[0].meetings[0].category_id == 1


def test_uncategorized_with_null_data_is_empty():
    def handler(request):
        assert request.url.path == "/api/uncategorized-meetings/"
        return httpx.Response(200, json={"data": None})

    assert asyncio.run(_client(handler, token=None).fetch_uncategorized_meetings(5)) == []


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"detail": "boom"}),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"items": []}),
        httpx.Response(200, json={"data": [{"id": 1, "meetings": [{"no_event_id": True}]}]}),
    ],
)
def test_failures_raise_remote_fetch_error(response):
    with pytest.raises(RemoteFetchError):
        asyncio.run(_client(lambda request: response).fetch_categorized_meetings())


def test_network_errors_raise_remote_fetch_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RemoteFetchError):
        asyncio.run(_client(handler).fetch_user_recordings("u1"))


def test_fetch_user_recordings_skips_non_objects():
    def handler(request):
        assert request.url.params["user_id"] == "u1"
        return httpx.Response(200, json={"data": [meeting("evt-1", "2024-01-01"), "junk"]})

    rows = asyncio.run(_client(handler).fetch_user_recordings("u1"))
    assert [r["event_id"] for r in rows] == ["evt-1"]


def test_meeting_with_null_date_does_not_reject_the_payload():
    def handler(request):
        return httpx.Response(
            200,
            json={"data": [{"id": 1, "name": "Sales", "meetings": [meeting("evt-1", None, None), meeting("evt-2", "2024-01-01")]}]},
        )

    categories = asyncio.run(_client(handler).fetch_categorized_meetings())
    assert [m.event_id for m in categories[0].meetings] == ["evt-1", "evt-2"]
    assert categories[0].meetings[0].meeting_date is None
