"""Canonical JSON-RPC message examples for testing."""

from __future__ import annotations

# ============================================================================
# Valid Messages
# ============================================================================

ADDITION_REQUEST = {
    "jsonrpc": "2.0",
    "method": "addition",
    "params": [3, 5],
    "id": 1,
}

RANDOM_NAMED_REQUEST = {
    "jsonrpc": "2.0",
    "method": "random",
    "params": {"end": 10, "start": 1},
    "id": 2,
}

NO_PARAMS_REQUEST = {
    "jsonrpc": "2.0",
    "method": "ping",
    "id": 3,
}

UPDATE_NOTIFICATION = {
    "jsonrpc": "2.0",
    "method": "update",
    "params": [42],
    # No id = notification
}


# ============================================================================
# Invalid Envelopes
# ============================================================================

INVALID_MISSING_VERSION = {
    "method": "addition",
    "id": 1,
}

INVALID_WRONG_VERSION = {
    "jsonrpc": "1.0",
    "method": "addition",
    "id": 1,
}

INVALID_VERSION_AS_NUMBER = {
    "jsonrpc": 2.0,
    "method": "addition",
    "id": 1,
}

INVALID_MISSING_METHOD = {
    "jsonrpc": "2.0",
    "id": 1,
}

INVALID_METHOD_AS_NUMBER = {
    "jsonrpc": "2.0",
    "method": 123,
    "id": 1,
}

INVALID_EMPTY_METHOD = {
    "jsonrpc": "2.0",
    "method": "",
    "id": 1,
}

INVALID_PARAMS_AS_STRING = {
    "jsonrpc": "2.0",
    "method": "addition",
    "params": "3,5",
    "id": 1,
}

INVALID_ENVELOPES = [
    INVALID_MISSING_VERSION,
    INVALID_WRONG_VERSION,
    INVALID_VERSION_AS_NUMBER,
    INVALID_MISSING_METHOD,
    INVALID_METHOD_AS_NUMBER,
    INVALID_EMPTY_METHOD,
    INVALID_PARAMS_AS_STRING,
]
