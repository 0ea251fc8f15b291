"""Client host and HTTP Basic credential checks.

Both checks run on the ASGI scope before a request reaches the dispatcher.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import logging
from collections.abc import Iterable, Mapping
from typing import Any

logger = logging.getLogger("jsonrpc_dispatch")

BASIC_REALM = 'Basic realm="JsonRPC"'


def get_client_host(scope: Mapping[str, Any]) -> str | None:
    """Return the client address from an ASGI scope, if present."""
    client = scope.get("client")
    if not isinstance(client, (list, tuple)) or not client:
        return None
    return client[0]


def is_host_allowed(scope: Mapping[str, Any], hosts: Iterable[str] | None) -> bool:
    """Check the client address against an allow-list.

    Parameters
    ----------
    scope : Mapping[str, Any]
        ASGI connection scope.
    hosts : Iterable[str] | None
        Allowed addresses. None allows every client.

    Returns
    -------
    bool
        True if the client may proceed.
    """
    if hosts is None:
        return True
    host = get_client_host(scope)
    allowed = host is not None and host in set(hosts)
    if not allowed:
        logger.warning("Rejected RPC client host: %s", host)
    return allowed


def get_basic_credentials(scope: Mapping[str, Any]) -> tuple[str, str] | None:
    """Extract HTTP Basic credentials from the scope headers.

    Returns
    -------
    tuple[str, str] | None
        ``(username, password)``, or None when the header is missing or
        malformed.
    """
    for name, value in scope.get("headers", []):
        if name.lower() != b"authorization":
            continue
        scheme, _, encoded = value.partition(b" ")
        if scheme.lower() != b"basic":
            return None
        try:
            decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None
        username, separator, password = decoded.partition(":")
        if not separator:
            return None
        return username, password
    return None


def is_authenticated(
    scope: Mapping[str, Any], users: Mapping[str, str] | None
) -> bool:
    """Check HTTP Basic credentials against a username to password map.

    Parameters
    ----------
    scope : Mapping[str, Any]
        ASGI connection scope.
    users : Mapping[str, str] | None
        Accepted credentials. None disables authentication.

    Returns
    -------
    bool
        True if the client may proceed.
    """
    if users is None:
        return True
    credentials = get_basic_credentials(scope)
    if credentials is None:
        logger.warning("RPC request without valid Basic credentials")
        return False
    username, password = credentials
    expected = users.get(username)
    if expected is None or not hmac.compare_digest(
        expected.encode("utf-8"), password.encode("utf-8")
    ):
        logger.warning("RPC authentication failed for user: %s", username)
        return False
    return True
