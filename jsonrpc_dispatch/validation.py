"""Envelope validation for incoming requests."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from jsonrpc_dispatch import logs
from jsonrpc_dispatch.exceptions import InvalidRequest
from jsonrpc_dispatch.protocols import Request
from jsonrpc_dispatch.utils import JSONRPC_VERSION

logger = logging.getLogger("jsonrpc_dispatch")


def validate_request(data: Any) -> Request:
    """Validate a decoded request object.

    Checks that ``jsonrpc`` is ``"2.0"``, that ``method`` is a non-empty
    string, and that ``params``, when present and not null, is an array or an
    object.

    Parameters
    ----------
    data : Any
        Single decoded request.

    Returns
    -------
    Request
        The validated request.

    Raises
    ------
    InvalidRequest
        The envelope is malformed.

    Examples
    --------
    >>> validate_request({"jsonrpc": "2.0", "method": "ping"}).is_notification
    True
    """
    if not isinstance(data, Mapping):
        logger.warning("Invalid message type: %s", type(data).__name__)
        raise InvalidRequest

    if data.get("jsonrpc") != JSONRPC_VERSION:
        logger.warning(logs.INVALID_JSON_RPC_VERSION, data.get("jsonrpc"))
        raise InvalidRequest

    method = data.get("method")
    if not isinstance(method, str) or not method:
        logger.warning("Invalid method member: %r", method)
        raise InvalidRequest

    params = data.get("params")
    if params is None:
        params = []
    elif not isinstance(params, (list, dict)):
        logger.warning("Invalid params type: %s", type(params).__name__)
        raise InvalidRequest

    return Request(
        method=method,
        params=params,
        rpc_id=data.get("id"),
        is_notification="id" not in data,
    )
