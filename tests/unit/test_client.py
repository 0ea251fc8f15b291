"""Tests for the HTTP client.

Requests are routed through an httpx mock transport into a real dispatcher,
so both ends of the wire format are exercised.
"""

from __future__ import annotations

import json

import httpx
import pytest

from jsonrpc_dispatch.client import JsonRpcClient
from jsonrpc_dispatch.exceptions import (
    AccessDenied,
    ConnectionFailure,
    InvalidArguments,
    JsonRpcErrorCode,
    ProcedureNotFound,
    ProtocolError,
)

URL = "http://testserver/rpc/"


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def transport(dispatcher, requests_seen):
    """Mock transport answering with the test dispatcher."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        body = dispatcher.dispatch(request.content)
        if not body:
            return httpx.Response(204)
        return httpx.Response(
            200, content=body, headers={"Content-Type": "application/json"}
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def client(transport):
    with JsonRpcClient(URL, http_client=httpx.Client(transport=transport)) as client:
        yield client


def client_for(handler, **kwargs):
    return JsonRpcClient(
        URL, http_client=httpx.Client(transport=httpx.MockTransport(handler)), **kwargs
    )


@pytest.mark.unit
class TestExecute:
    """Test single calls."""

    def test_positional_call(self, client):
        assert client.execute("addition", [3, 5]) == 8

    def test_named_call(self, client):
        assert client.execute("random", {"start": 1, "end": 10}) == {
            "start": 1,
            "end": 10,
        }

    def test_call_without_params(self, client, requests_seen):
        assert client.execute("ping") == "pong"

        sent = json.loads(requests_seen[0].content)
        assert "params" not in sent

    def test_request_format(self, client, requests_seen):
        client.execute("addition", [1, 2])

        request = requests_seen[0]
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {
            "jsonrpc": "2.0",
            "method": "addition",
            "params": [1, 2],
            "id": 1,
        }

    def test_ids_are_unique(self, client, requests_seen):
        client.execute("ping")
        client.execute("ping")

        ids = [json.loads(r.content)["id"] for r in requests_seen]
        assert ids == [1, 2]

    def test_attribute_call(self, client):
        assert client.addition(3, 5) == 8
        assert client.random(start=1, end=2) == {"start": 1, "end": 2}

    def test_attribute_call_rejects_mixed_arguments(self, client):
        with pytest.raises(TypeError):
            client.random(1, end=2)

    def test_private_attribute_is_not_a_procedure(self, client):
        with pytest.raises(AttributeError):
            client._missing


@pytest.mark.unit
class TestErrorMapping:
    """Test mapping of error responses to exceptions."""

    def test_procedure_not_found(self, client):
        with pytest.raises(ProcedureNotFound) as exc_info:
            client.execute("foo")

        assert exc_info.value.rpc_id == 1
        assert exc_info.value.code == JsonRpcErrorCode.METHOD_NOT_FOUND

    def test_invalid_arguments(self, client):
        with pytest.raises(InvalidArguments) as exc_info:
            client.execute("addition", [1])

        assert exc_info.value.data == "Wrong number of arguments"

    def test_server_error(self, client):
        with pytest.raises(ProtocolError) as exc_info:
            client.execute("fail")

        assert exc_info.value.code == JsonRpcErrorCode.SERVER_ERROR
        assert exc_info.value.message == "Server error"
        assert exc_info.value.data == "boom"

    def test_application_error(self, client):
        with pytest.raises(ProtocolError) as exc_info:
            client.execute("refuse", [5])

        assert exc_info.value.code == 4001
        assert exc_info.value.data == {"amount": 5}
        assert exc_info.value.rpc_id is None


@pytest.mark.unit
class TestNotify:
    """Test notifications."""

    def test_notification_has_no_id(self, client, requests_seen):
        assert client.notify("update", [42]) is None

        assert "id" not in json.loads(requests_seen[0].content)

    def test_failing_notification_is_silent(self, client):
        assert client.notify("fail") is None


@pytest.mark.unit
class TestBatch:
    """Test batch mode."""

    def test_results_in_queued_order(self, client, requests_seen):
        client.batch()
        assert client.is_batch is True
        client.execute("addition", [1, 2])
        client.execute("ping")
        client.random(start=3, end=4)

        results = client.send()

        assert results == [3, "pong", {"start": 3, "end": 4}]
        assert len(requests_seen) == 1
        assert client.is_batch is False

    def test_execute_returns_client_while_batching(self, client, requests_seen):
        client.batch()

        assert client.execute("ping") is client
        assert requests_seen == []

    def test_empty_batch(self, client, requests_seen):
        client.batch()

        assert client.send() == []
        assert requests_seen == []

    def test_send_without_batch(self, client):
        with pytest.raises(ProtocolError):
            client.send()

    def test_failed_call_raises(self, client):
        client.batch()
        client.execute("ping")
        client.execute("foo")

        with pytest.raises(ProcedureNotFound):
            client.send()

    def test_null_id_error_is_raised(self, client):
        client.batch()
        client.execute("ping")
        client.execute("refuse", [1])

        with pytest.raises(ProtocolError) as exc_info:
            client.send()

        assert exc_info.value.code == 4001

    def test_missing_response(self):
        def handler(request):
            return httpx.Response(200, json=[{"jsonrpc": "2.0", "id": 1, "result": 1}])

        client = client_for(handler)
        client.batch()
        client.execute("a")
        client.execute("b")

        with pytest.raises(ProtocolError, match="Missing response"):
            client.send()


@pytest.mark.unit
class TestTransport:
    """Test HTTP level failures."""

    @pytest.mark.parametrize("status", [401, 403])
    def test_access_denied(self, status):
        client = client_for(lambda request: httpx.Response(status))

        with pytest.raises(AccessDenied):
            client.execute("ping")

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ConnectionFailure):
            client_for(handler).execute("ping")

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ConnectionFailure):
            client_for(handler).execute("ping")

    def test_empty_response(self):
        client = client_for(lambda request: httpx.Response(204))

        with pytest.raises(ProtocolError, match="Empty response"):
            client.execute("ping")

    def test_invalid_json_response(self):
        client = client_for(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(ProtocolError) as exc_info:
            client.execute("ping")

        assert exc_info.value.code == JsonRpcErrorCode.PARSE_ERROR

    def test_response_without_result(self):
        client = client_for(
            lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})
        )

        with pytest.raises(ProtocolError, match="Invalid response"):
            client.execute("ping")

    def test_basic_auth_header(self):
        seen = []

        def handler(request):
            seen.append(request.headers.get("Authorization"))
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": 1})

        client_for(handler, username="api", password="secret").execute("ping")

        assert seen == ["Basic YXBpOnNlY3JldA=="]

    def test_extra_headers(self):
        seen = []

        def handler(request):
            seen.append(request.headers.get("X-Trace"))
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": 1})

        client_for(handler, headers={"X-Trace": "abc"}).execute("ping")

        assert seen == ["abc"]

    def test_close_keeps_injected_client_open(self, transport):
        http_client = httpx.Client(transport=transport)

        JsonRpcClient(URL, http_client=http_client).close()

        assert http_client.is_closed is False
