"""HTTP client for JSON-RPC 2.0 servers."""

from __future__ import annotations

import itertools
import json
import logging
from collections.abc import Callable
from typing import Any

import httpx

from jsonrpc_dispatch.exceptions import (
    AccessDenied,
    ConnectionFailure,
    InvalidArguments,
    JsonRpcErrorCode,
    ProcedureNotFound,
    ProtocolError,
)
from jsonrpc_dispatch.utils import create_json_rpc_request, encode_json

logger = logging.getLogger("jsonrpc_dispatch")

Params = list[Any] | dict[str, Any] | None


class JsonRpcClient:
    """Synchronous HTTP client for JSON-RPC 2.0 servers.

    Each call is a single POST with no retries. Procedures can be called with
    :meth:`execute` or as attributes of the client.

    Examples
    --------
    Single calls and a batch::

        client = JsonRpcClient("http://localhost:8000/rpc/")
        client.execute("addition", [3, 5])  # 8
        client.random(start=1, end=10)

        # Several calls in one request, results in queued order
        client.batch()
        client.execute("addition", [1, 2])
        client.execute("addition", [3, 4])
        client.send()  # [3, 7]
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 5.0,
        username: str | None = None,
        password: str | None = None,
        headers: dict[str, str] | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Parameters
        ----------
        url : str
            Endpoint of the JSON-RPC server.
        timeout : float, optional
            Request timeout in seconds, by default 5.0.
        username : str | None, optional
            HTTP Basic username.
        password : str | None, optional
            HTTP Basic password.
        headers : dict[str, str] | None, optional
            Extra headers sent with every request.
        http_client : httpx.Client | None, optional
            Preconfigured httpx client, e.g. with a custom transport. Created
            on demand when omitted.
        """
        self._url = url
        self._timeout = timeout
        self._auth = (username, password or "") if username is not None else None
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **(headers or {}),
        }
        self._client = http_client
        self._owns_client = http_client is None
        self._ids = itertools.count(1)
        self._batch: list[dict[str, Any]] | None = None
        logger.debug("JsonRpcClient initialized: url=%s, timeout=%s", url, timeout)

    def __enter__(self) -> JsonRpcClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __getattr__(self, name: str) -> Callable[..., Any]:
        """Call a remote procedure as ``client.name(*args)`` or ``(**kwargs)``."""
        if name.startswith("_"):
            raise AttributeError(name)

        def call(*args: Any, **kwargs: Any) -> Any:
            if args and kwargs:
                msg = "Use either positional or named arguments, not both"
                raise TypeError(msg)
            return self.execute(name, kwargs if kwargs else list(args))

        return call

    @property
    def is_batch(self) -> bool:
        """Whether calls are being queued for :meth:`send`."""
        return self._batch is not None

    def batch(self) -> JsonRpcClient:
        """Start queueing calls; :meth:`send` sends them together."""
        self._batch = []
        return self

    def execute(self, procedure: str, params: Params = None) -> Any:
        """Call a remote procedure.

        Parameters
        ----------
        procedure : str
            Procedure name.
        params : list | dict | None, optional
            Positional (list) or named (dict) arguments.

        Returns
        -------
        Any
            The procedure result, or this client when queueing a batch.

        Raises
        ------
        ProcedureNotFound
            The server does not know the procedure.
        InvalidArguments
            The server rejected the arguments.
        ProtocolError
            Any other error response, or an unusable response.
        AccessDenied
            The server refused the client (HTTP 401/403).
        ConnectionFailure
            The server could not be reached.
        """
        request = create_json_rpc_request(
            rpc_id=self._next_id(), method=procedure, params=params or None
        )

        if self._batch is not None:
            self._batch.append(request)
            return self

        logger.debug("RPC call: method=%s, id=%s", procedure, request["id"])
        return self._get_result(self._post(request))

    def notify(self, procedure: str, params: Params = None) -> None:
        """Send a notification; the server sends nothing back."""
        request = create_json_rpc_request(
            method=procedure, params=params or None, notification=True
        )
        logger.debug("RPC notification: method=%s", procedure)
        self._post(request, expect_response=False)

    def send(self) -> list[Any]:
        """Send the queued batch.

        Returns
        -------
        list
            Results in the order the calls were queued.

        Raises
        ------
        ProtocolError
            The batch was not started, a response is missing, or a queued
            call failed with an error other than the ones below.
        ProcedureNotFound, InvalidArguments
            For the first queued call that failed this way.
        """
        if self._batch is None:
            msg = "No batch in progress; call batch() first"
            raise ProtocolError(msg)

        requests, self._batch = self._batch, None
        if not requests:
            return []

        logger.debug("RPC batch: %d call(s)", len(requests))
        data = self._post(requests)
        if isinstance(data, dict):
            # A single error answers a batch the server could not read at all
            self._get_result(data)
        if not isinstance(data, list):
            msg = "Invalid batch response"
            raise ProtocolError(msg, data=data)

        responses = {
            response["id"]: response
            for response in data
            if isinstance(response, dict) and response.get("id") is not None
        }
        # Application errors come back with a null id
        orphans = [
            response
            for response in data
            if not isinstance(response, dict) or response.get("id") is None
        ]
        results = []
        for request in requests:
            response = responses.get(request["id"])
            if response is None:
                if orphans:
                    self._get_result(orphans[0])
                msg = f"Missing response for RPC ID #{request['id']}"
                raise ProtocolError(msg)
            results.append(self._get_result(response))
        return results

    def _next_id(self) -> int:
        return next(self._ids)

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout)
        return self._client

    def _post(self, payload: Any, *, expect_response: bool = True) -> Any:
        try:
            response = self._http().post(
                self._url,
                content=encode_json(payload),
                headers=self._headers,
                auth=self._auth,
            )
        except httpx.TimeoutException as e:
            logger.warning("Request timed out: url=%s, timeout=%s", self._url, self._timeout)
            msg = f"Request timed out: {e}"
            raise ConnectionFailure(msg) from e
        except httpx.TransportError as e:
            logger.warning("Connection failed to %s: %s", self._url, e)
            msg = f"Unable to establish a connection: {e}"
            raise ConnectionFailure(msg) from e

        if response.status_code in (401, 403):
            msg = f"Access denied ({response.status_code})"
            raise AccessDenied(msg)

        if not expect_response:
            return None

        if not response.content:
            msg = "Empty response"
            raise ProtocolError(msg)

        try:
            return response.json()
        except json.JSONDecodeError as e:
            msg = "Invalid JSON response"
            raise ProtocolError(msg, code=JsonRpcErrorCode.PARSE_ERROR) from e

    def _get_result(self, response: Any) -> Any:
        if not isinstance(response, dict):
            msg = "Invalid response"
            raise ProtocolError(msg, data=response)

        rpc_id = response.get("id")

        if "error" in response:
            error = response["error"]
            if not isinstance(error, dict):
                msg = "Invalid error object"
                raise ProtocolError(msg, data=error, rpc_id=rpc_id)

            code = error.get("code")
            message = error.get("message")
            data = error.get("data")

            if code == JsonRpcErrorCode.METHOD_NOT_FOUND:
                raise ProcedureNotFound(data=data, rpc_id=rpc_id, message=message)
            if code == JsonRpcErrorCode.INVALID_PARAMS:
                raise InvalidArguments(data=data, rpc_id=rpc_id, message=message)
            raise ProtocolError(
                message or "Invalid response",
                code=code if isinstance(code, int) else JsonRpcErrorCode.INTERNAL_ERROR,
                data=data,
                rpc_id=rpc_id,
            )

        if "result" not in response:
            msg = "Invalid response"
            raise ProtocolError(msg, data=response, rpc_id=rpc_id)

        return response["result"]
