from unittest.mock import MagicMock, patch

import pytest
import requests

from CWLV.logstore.client import AsyncLogStoreClient, LogStoreClient
from CWLV.logstore.errors import (
    AuthFailed,
    NotFound,
    PermissionDenied,
    TransientFailure,
)
from CWLV.logstore.models import SearchCriteria


def response(status=200, body=None, json_error=False):
    mock = MagicMock()
    mock.status_code = status
    mock.ok = status < 400
    if json_error:
        mock.json.side_effect = ValueError("no json")
    else:
        mock.json.return_value = body if body is not None else {}
    return mock


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return LogStoreClient("http://logs.local/", timeout=5, session=session)


class TestRequests:
    def test_list_groups_page(self, client, session):
        session.request.return_value = response(body={
            "logGroups": [{"logGroupName": "/svc/a"}, {"logGroupName": "/svc/b"}],
            "nextToken": "50",
        })

        page = client.list_groups_page()

        assert [g.name for g in page.items] == ["/svc/a", "/svc/b"]
        assert page.next_token == "50"
        session.request.assert_called_once_with(
            "GET", "http://logs.local/groups", headers=client.headers, timeout=5, params=None
        )

    def test_list_groups_passes_token(self, client, session):
        session.request.return_value = response(body={"logGroups": []})
        page = client.list_groups_page("50")
        assert page.items == []
        assert page.next_token is None
        assert session.request.call_args.kwargs["params"] == {"nextToken": "50"}

    def test_list_streams_page(self, client, session):
        session.request.return_value = response(body={"logStreams": [{"logStreamName": "s1"}]})

        page = client.list_streams_page("/aws/lambda/fn", "tok")

        args, kwargs = session.request.call_args
        assert args == ("PUT", "http://logs.local/groups/%2Faws%2Flambda%2Ffn/streams")
        assert kwargs["json"] == {"logGroupName": "/aws/lambda/fn", "nextToken": "tok"}
        assert [s.name for s in page.items] == ["s1"]

    def test_search(self, client, session):
        session.request.return_value = response(body={"events": [
            {"timestamp": 1, "message": "ERROR a", "logStreamName": "s1", "eventId": "1"},
        ]})

        events = client.search(SearchCriteria(group_name="/svc/a", filter_pattern="ERROR", limit=50))

        assert [e.message for e in events] == ["ERROR a"]
        assert session.request.call_args.kwargs["json"] == {
            "logGroupName": "/svc/a", "filterPattern": "ERROR", "limit": 50,
        }


class TestErrors:
    @pytest.mark.parametrize("status,body,error_type", [
        (401, {"error": "bad", "kind": "AuthFailed"}, AuthFailed),
        (401, {"error": "denied", "kind": "PermissionDenied"}, PermissionDenied),
        (500, {"error": "gone", "kind": "NotFound"}, NotFound),
        (500, {"error": "boom", "kind": "TransientFailure"}, TransientFailure),
        (403, {}, PermissionDenied),
        (404, {"detail": "Not Found"}, NotFound),
        (502, {"kind": "Unknown"}, TransientFailure),
    ])
    def test_error_responses(self, client, session, status, body, error_type):
        session.request.return_value = response(status=status, body=body)
        with pytest.raises(error_type):
            client.list_groups_page()

    def test_error_message_from_body(self, client, session):
        session.request.return_value = response(status=401, body={"error": "Access denied", "kind": "PermissionDenied"})
        with pytest.raises(PermissionDenied) as exc_info:
            client.search(SearchCriteria(group_name="/svc/a"))
        assert exc_info.value.message == "Access denied"

    def test_error_without_json_body(self, client, session):
        session.request.return_value = response(status=401, json_error=True)
        with pytest.raises(AuthFailed):
            client.list_groups_page()

    @pytest.mark.parametrize("exc", [
        requests.exceptions.Timeout(),
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.TooManyRedirects(),
    ])
    def test_transport_failures_are_transient(self, client, session, exc):
        session.request.side_effect = exc
        with pytest.raises(TransientFailure) as exc_info:
            client.list_groups_page()
        assert exc_info.value.cause is exc

    def test_malformed_success_body(self, client, session):
        session.request.return_value = response(json_error=True)
        with pytest.raises(TransientFailure):
            client.list_groups_page()


def test_default_session_created():
    with patch("CWLV.logstore.client.requests.Session") as session_cls:
        client = LogStoreClient("http://logs.local")
    assert client.session is session_cls.return_value
    assert client.base_url == "http://logs.local"


@pytest.mark.asyncio
async def test_async_client_delegates(client, session):
    session.request.return_value = response(body={"logGroups": [{"logGroupName": "/svc/a"}]})
    page = await AsyncLogStoreClient(client).list_groups_page()
    assert [g.name for g in page.items] == ["/svc/a"]
