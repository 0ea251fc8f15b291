"""JSON-RPC 2.0 request dispatching.

This package validates JSON-RPC payloads, resolves procedures from a registry,
binds positional or named params to handler parameters, and builds compliant
responses, including batches, notifications and structured errors.

Public API
----------
Dispatchers:
    - Dispatcher: Synchronous dispatcher
    - AsyncDispatcher: Dispatcher for coroutine procedures

Registry:
    - ProcedureRegistry: Procedure name to handler mapping
    - ParameterSpec: Explicit parameter descriptor
    - get_registry: The global registry

Context:
    - RpcContext: Execution context for procedures

Transport:
    - JsonRpcClient: HTTP client
    - AsyncRpcHttpConsumer: Django Channels HTTP consumer
      (import from ``jsonrpc_dispatch.async_rpc_http_consumer``)

Exceptions:
    - JsonRpcError: Base JSON-RPC error exception
    - JsonRpcErrorCode: Enum of JSON-RPC 2.0 error codes
    - ApplicationError: Structured error raised by procedures
    - ProcedureNotFound, InvalidArguments, ProtocolError: Typed call failures
    - ClientError, AccessDenied, ConnectionFailure: Client transport failures

Configuration:
    Configure behavior via Django settings::

        JSONRPC_DISPATCH = {
            'DETECT_OUTPUT_ERROR': False,
            'LOG_RPC_PARAMS': False,
            'ALLOWED_HOSTS': None,
            'USERS': None,
        }

Examples
--------
>>> registry = ProcedureRegistry()
>>> registry.register("addition", lambda a, b: a + b)
>>> Dispatcher(registry).dispatch(
...     '{"jsonrpc":"2.0","method":"addition","params":[3,5],"id":1}'
... )
'{"jsonrpc":"2.0","id":1,"result":8}'
"""

from jsonrpc_dispatch.async_dispatcher import AsyncDispatcher
from jsonrpc_dispatch.client import JsonRpcClient
from jsonrpc_dispatch.context import RpcContext
from jsonrpc_dispatch.dispatcher import Dispatcher
from jsonrpc_dispatch.exceptions import (
    AccessDenied,
    ApplicationError,
    ClientError,
    ConnectionFailure,
    InvalidArguments,
    JsonRpcError,
    JsonRpcErrorCode,
    ProcedureNotFound,
    ProtocolError,
    normalize_error,
)
from jsonrpc_dispatch.protocols import ParameterSpec
from jsonrpc_dispatch.registry import ProcedureRegistry, get_registry

__all__ = [
    "AccessDenied",
    "ApplicationError",
    "AsyncDispatcher",
    "ClientError",
    "ConnectionFailure",
    "Dispatcher",
    "InvalidArguments",
    "JsonRpcClient",
    "JsonRpcError",
    "JsonRpcErrorCode",
    "ParameterSpec",
    "ProcedureNotFound",
    "ProcedureRegistry",
    "ProtocolError",
    "RpcContext",
    "get_registry",
    "normalize_error",
]
