"""JSON-RPC 2.0 envelope helpers.

Builders for request and response messages, payload decoding and encoding, and
the sequence detection rule shared by batch detection and argument binding.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

JSONRPC_VERSION = "2.0"

# Compact separators keep the wire format identical to other JSON-RPC servers
JSON_SEPARATORS = (",", ":")


def create_json_rpc_request(
    rpc_id: Any = None,
    method: str | None = None,
    params: dict[str, Any] | list[Any] | None = None,
    *,
    notification: bool = False,
) -> dict[str, Any]:
    """Create a JSON-RPC 2.0 request message.

    Parameters
    ----------
    rpc_id : Any
        Request identifier.
    method : str | None
        Method name to call.
    params : dict[str, Any] | list[Any] | None
        Parameters to pass to the method.
    notification : bool
        Omit the ``id`` member entirely, by default False.

    Returns
    -------
    dict[str, Any]
        JSON-RPC 2.0 request message.
    """
    message: dict[str, Any] = {
        "jsonrpc": JSONRPC_VERSION,
        "method": method,
    }

    if params is not None:
        message["params"] = params

    if not notification:
        message["id"] = rpc_id

    return message


def create_json_rpc_response(
    rpc_id: Any = None,
    result: Any = None,
    error: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create a JSON-RPC 2.0 response message.

    Parameters
    ----------
    rpc_id : Any
        Request identifier that this responds to.
    result : Any
        Successful result data.
    error : dict[str, Any] | None
        Error information if the request failed.

    Returns
    -------
    dict[str, Any]
        JSON-RPC 2.0 response message.
    """
    message: dict[str, Any] = {
        "jsonrpc": JSONRPC_VERSION,
        "id": rpc_id,
    }

    if error is not None:
        message["error"] = error
    else:
        message["result"] = result

    return message


def create_json_rpc_error_response(
    rpc_id: Any = None,
    code: int = -32603,
    message: str = "Internal error",
    data: Any = None,
) -> dict[str, Any]:
    """Create a JSON-RPC 2.0 error response.

    Parameters
    ----------
    rpc_id : Any
        Request identifier that this responds to.
    code : int
        Error code, see the reserved JSON-RPC 2.0 codes.
    message : str
        Error message.
    data : Any
        Additional error data, omitted when None.

    Returns
    -------
    dict[str, Any]
        JSON-RPC 2.0 error response message.
    """
    error_obj: dict[str, Any] = {
        "code": code,
        "message": message,
    }

    if data is not None:
        error_obj["data"] = data

    return create_json_rpc_response(rpc_id=rpc_id, error=error_obj)


def _as_index(key: Any) -> int | None:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, str) and key.isascii() and key.isdecimal():
        index = int(key)
        # "01" is a name, not an index
        if str(index) == key:
            return index
    return None


def is_sequential(value: Any) -> bool:
    """Check whether a value is a non-empty, zero-indexed sequence.

    Lists and tuples qualify when non-empty. Mappings qualify when their keys,
    in order, are ``0..n-1`` (as integers or canonical decimal strings). The
    same rule decides batch requests and positional arguments.

    Parameters
    ----------
    value : Any
        Decoded JSON value.

    Returns
    -------
    bool
        True if the value is sequential.

    Examples
    --------
    >>> is_sequential([3, 5])
    True
    >>> is_sequential({"0": "a", "1": "b"})
    True
    >>> is_sequential({"0": "a", "2": "b"})
    False
    >>> is_sequential([])
    False
    """
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    if isinstance(value, Mapping):
        if not value:
            return False
        return all(
            _as_index(key) == position for position, key in enumerate(value.keys())
        )
    return False


def sequence_values(value: Sequence[Any] | Mapping[Any, Any]) -> list[Any]:
    """Return the values of a sequential value in index order."""
    if isinstance(value, Mapping):
        return list(value.values())
    return list(value)


def decode_payload(payload: str | bytes | bytearray) -> Any:
    """Decode a raw JSON payload.

    Raises
    ------
    ValueError
        The payload is empty or is not valid JSON.
    """
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8")
    if not payload or not payload.strip():
        msg = "Empty payload"
        raise ValueError(msg)
    return json.loads(payload)


def encode_json(
    content: Any, encoder_class: type[json.JSONEncoder] | None = None
) -> str:
    """Encode a message with the compact wire separators."""
    return json.dumps(content, cls=encoder_class, separators=JSON_SEPARATORS)
