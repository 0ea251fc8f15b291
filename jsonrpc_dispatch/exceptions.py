"""Exceptions for the jsonrpc-dispatch package."""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import IntEnum
from typing import Any

from jsonrpc_dispatch.utils import create_json_rpc_error_response


class JsonRpcErrorCode(IntEnum):
    """JSON-RPC 2.0 error codes.

    Standard error codes are defined by the JSON-RPC 2.0 specification.
    Server-defined error codes are in the range -32099 to -32000.

    Standard Attributes
    -------------------
    PARSE_ERROR : int
        Invalid JSON was received (-32700).
    INVALID_REQUEST : int
        The JSON sent is not a valid Request object (-32600).
    METHOD_NOT_FOUND : int
        The method does not exist / is not available (-32601).
    INVALID_PARAMS : int
        Invalid method parameter(s) (-32602).
    INTERNAL_ERROR : int
        Internal JSON-RPC error (-32603).

    Server-Defined Attributes
    -------------------------
    SERVER_ERROR : int
        Uncaught failure inside a procedure (-32000).
    APPLICATION_ERROR : int
        Default code for application-signalled errors that carry none (-32500).
    """

    # Standard JSON-RPC 2.0 error codes
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Server-defined error codes
    SERVER_ERROR = -32000
    APPLICATION_ERROR = -32500


DEFAULT_APPLICATION_ERROR_MESSAGE = "application error detected"

RPC_ERRORS: dict[int, str] = {
    JsonRpcErrorCode.PARSE_ERROR: "Parse error",
    JsonRpcErrorCode.INVALID_REQUEST: "Invalid Request",
    JsonRpcErrorCode.METHOD_NOT_FOUND: "Method not found",
    JsonRpcErrorCode.INVALID_PARAMS: "Invalid params",
    JsonRpcErrorCode.INTERNAL_ERROR: "Internal error",
    JsonRpcErrorCode.SERVER_ERROR: "Server error",
    JsonRpcErrorCode.APPLICATION_ERROR: DEFAULT_APPLICATION_ERROR_MESSAGE,
}


def generate_error_response(
    rpc_id: Any, code: int, message: str, data: Any = None
) -> dict[str, Any]:
    """Generate a JSON-RPC error response.

    Parameters
    ----------
    rpc_id : Any
        Request ID this error responds to.
    code : int
        RPC error code.
    message : str
        Error message.
    data : Any, optional
        Additional error data, by default None.

    Returns
    -------
    dict[str, Any]
        Error response.
    """
    return create_json_rpc_error_response(
        rpc_id=rpc_id, code=int(code), message=message, data=data
    )


def _coerce_code(value: Any) -> int:
    """Coerce an application-supplied error code to an integer.

    Strings are read as their leading numeric value; anything that cannot be
    read as a number becomes ``0``.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def normalize_error(raw: Mapping[str, Any] | None) -> dict[str, Any]:
    """Build a compliant JSON-RPC error object from an ad-hoc description.

    Parameters
    ----------
    raw : Mapping[str, Any] | None
        Application-supplied error with optional ``code``, ``message`` and
        ``data`` entries. ``None`` values count as missing.

    Returns
    -------
    dict[str, Any]
        Error object that always carries an integer ``code`` and a ``message``.

    Examples
    --------
    >>> normalize_error({"message": "quota exceeded"})
    {'code': -32500, 'message': 'quota exceeded'}
    >>> normalize_error({"code": "42", "data": [1]})
    {'code': 42, 'message': 'application error detected', 'data': [1]}
    """
    if not isinstance(raw, Mapping):
        raw = {}

    error: dict[str, Any] = {}

    if raw.get("code") is not None:
        error["code"] = _coerce_code(raw["code"])
    else:
        error["code"] = int(JsonRpcErrorCode.APPLICATION_ERROR)

    if raw.get("message") is not None:
        error["message"] = raw["message"]
    else:
        error["message"] = DEFAULT_APPLICATION_ERROR_MESSAGE

    if raw.get("data") is not None:
        error["data"] = raw["data"]

    return error


class JsonRpcError(Exception):
    """General JSON-RPC exception class.

    Subclasses fix :attr:`code`; the dispatcher turns any instance into an
    error response through the :data:`RPC_ERRORS` table.
    """

    code: int = JsonRpcErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        rpc_id: Any = None,
        code: int | None = None,
        data: Any = None,
        message: str | None = None,
    ):
        """Initialize a new :class:`JsonRpcError` instance.

        Parameters
        ----------
        rpc_id : Any, optional
            Call ID, or None when unknown.
        code : int | None, optional
            RPC error code, by default the class code.
        data : Any, optional
            Additional error context data, by default None.
        message : str | None, optional
            Error message, by default looked up from the code.
        """
        if code is not None:
            self.code = code
        self.rpc_id = rpc_id
        self.data = data
        self._message = message
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Error message for the response envelope."""
        if self._message is not None:
            return self._message
        return RPC_ERRORS.get(self.code, RPC_ERRORS[JsonRpcErrorCode.INTERNAL_ERROR])

    def as_dict(self) -> dict[str, Any]:
        """Return an error response dictionary.

        Returns
        -------
        dict[str, Any]
            Error response.
        """
        return generate_error_response(
            rpc_id=self.rpc_id, code=self.code, message=self.message, data=self.data
        )

    def __str__(self) -> str:
        """Error response dictionary as a string."""
        return json.dumps(self.as_dict())


class ParseError(JsonRpcError):
    """The payload is not a JSON object or array."""

    code = JsonRpcErrorCode.PARSE_ERROR

    def __init__(self, data: Any = "Malformed payload", rpc_id: Any = None):
        super().__init__(rpc_id=rpc_id, data=data)


class InvalidRequest(JsonRpcError):
    """The payload is not a valid JSON-RPC 2.0 request envelope."""

    code = JsonRpcErrorCode.INVALID_REQUEST

    def __init__(self, data: Any = "Invalid JSON RPC payload", rpc_id: Any = None):
        super().__init__(rpc_id=rpc_id, data=data)


class ProcedureNotFound(JsonRpcError):
    """No registered handler matches the requested procedure."""

    code = JsonRpcErrorCode.METHOD_NOT_FOUND

    def __init__(
        self,
        data: Any = "Unable to find the procedure",
        rpc_id: Any = None,
        message: str | None = None,
    ):
        super().__init__(rpc_id=rpc_id, data=data, message=message)


class InvalidArguments(JsonRpcError):
    """The supplied arguments do not fit the procedure's parameters."""

    code = JsonRpcErrorCode.INVALID_PARAMS

    def __init__(
        self, data: Any = None, rpc_id: Any = None, message: str | None = None
    ):
        super().__init__(rpc_id=rpc_id, data=data, message=message)


class ArityError(InvalidArguments):
    """Too few or too many arguments were supplied."""


class MissingArgument(InvalidArguments):
    """A named parameter without a default received no value."""

    def __init__(self, name: str, rpc_id: Any = None):
        self.name = name
        super().__init__(data=f"Missing argument: {name}", rpc_id=rpc_id)


class ServerError(JsonRpcError):
    """A procedure failed with an uncaught exception."""

    code = JsonRpcErrorCode.SERVER_ERROR

    def __init__(self, data: Any = None, rpc_id: Any = None):
        super().__init__(rpc_id=rpc_id, data=data)


class ProtocolError(JsonRpcError):
    """A response carried an error, or could not be understood at all."""

    def __init__(
        self,
        message: str,
        code: int = JsonRpcErrorCode.INTERNAL_ERROR,
        data: Any = None,
        rpc_id: Any = None,
    ):
        super().__init__(rpc_id=rpc_id, code=code, data=data, message=message)


class ApplicationError(Exception):
    """Structured error raised by a procedure.

    The ``code``, ``message`` and ``data`` are normalized with
    :func:`normalize_error` before they reach the client, so any of them may be
    omitted.

    Examples
    --------
    >>> raise ApplicationError(code=4001, message="Insufficient funds")
    """

    def __init__(self, code: Any = None, message: Any = None, data: Any = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(message if message is not None else code)

    @property
    def error(self) -> dict[str, Any]:
        """Normalized JSON-RPC error object."""
        return normalize_error(
            {"code": self.code, "message": self.message, "data": self.data}
        )


class ClientError(Exception):
    """Exception for client-side transport errors."""


class AccessDenied(ClientError):
    """The server rejected the client's host or credentials."""


class ConnectionFailure(ClientError):
    """The server could not be reached."""
