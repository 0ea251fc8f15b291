"""Shared data structures for procedures and requests.

Kept apart from the registry and dispatcher modules to avoid circular imports
between them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonrpc_dispatch.binder import ArgumentSet
    from jsonrpc_dispatch.context import RpcContext


@dataclass(frozen=True)
class ParameterSpec:
    """Declared parameter of a procedure handler.

    Attributes
    ----------
    name : str
        Parameter name, matched against named arguments.
    has_default : bool
        Whether the parameter may be omitted.
    default : Any
        Value used when the parameter is omitted.
    keyword_only : bool
        Whether the parameter must be passed by keyword.
    """

    name: str
    has_default: bool = False
    default: Any = None
    keyword_only: bool = False


@dataclass(frozen=True)
class StaticTarget:
    """Bound class: a fresh instance is created for every call."""

    factory: type
    method_name: str


@dataclass(frozen=True)
class InstanceTarget:
    """Bound live instance, shared across calls."""

    instance: Any
    method_name: str


HandlerRef = StaticTarget | InstanceTarget


@dataclass(frozen=True)
class Procedure:
    """A resolved, invocable procedure.

    Attributes
    ----------
    name : str
        Procedure name as requested.
    func : Callable
        Concrete callable that runs the handler.
    parameters : tuple[ParameterSpec, ...]
        Declared parameters, in order, excluding any context parameter.
    accepts_context : bool
        Whether :class:`~jsonrpc_dispatch.context.RpcContext` is passed first.
    variadic : bool
        Whether the handler takes ``*args`` (no upper arity bound).
    """

    name: str
    func: Callable[..., Any]
    parameters: tuple[ParameterSpec, ...] = ()
    accepts_context: bool = False
    variadic: bool = False

    @property
    def required_count(self) -> int:
        """Number of parameters without a default."""
        return sum(1 for p in self.parameters if not p.has_default)

    @property
    def max_count(self) -> int | None:
        """Maximum number of arguments, or None when unbounded."""
        if self.variadic:
            return None
        return len(self.parameters)

    def invoke(self, arguments: ArgumentSet, context: RpcContext | None = None) -> Any:
        """Call the handler with bound arguments."""
        args = arguments.args
        if self.accepts_context:
            args = (context, *args)
        return self.func(*args, **arguments.kwargs)


@dataclass(frozen=True)
class Request:
    """A validated JSON-RPC request.

    Attributes
    ----------
    method : str
        Procedure name.
    params : list | dict
        Supplied arguments; empty list when absent.
    rpc_id : Any
        Request ID, None when absent.
    is_notification : bool
        True when the request carried no ``id`` member at all.
    """

    method: str
    params: list[Any] | dict[str, Any] = field(default_factory=list)
    rpc_id: Any = None
    is_notification: bool = False
