"""RPC execution context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonrpc_dispatch.dispatcher import Dispatcher


@dataclass
class RpcContext:
    """Context for procedure execution.

    Passed as the first argument to handlers whose first parameter is annotated
    with :class:`RpcContext`. The parameter takes no part in argument binding.

    Attributes
    ----------
    dispatcher : Dispatcher
        The dispatcher running this request.
    procedure_name : str
        Name of the procedure being called.
    rpc_id : Any
        Request ID from the JSON-RPC call. None for notifications.
    is_notification : bool
        Whether this is a notification (no response expected).
    scope : dict[str, Any]
        Transport metadata, e.g. the ASGI scope of an HTTP request.

    Examples
    --------
    >>> @registry.procedure()
    ... def whoami(ctx: RpcContext) -> str:
    ...     return ctx.scope.get("user", "anonymous")
    """

    dispatcher: Dispatcher
    procedure_name: str
    rpc_id: Any
    is_notification: bool
    scope: dict[str, Any] = field(default_factory=dict)
