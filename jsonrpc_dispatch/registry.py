"""Procedure registry."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from jsonrpc_dispatch import logs
from jsonrpc_dispatch.exceptions import ProcedureNotFound
from jsonrpc_dispatch.introspection import (
    HandlerSignature,
    explicit_signature,
    inspect_handler,
    inspect_method,
)
from jsonrpc_dispatch.protocols import (
    HandlerRef,
    InstanceTarget,
    ParameterSpec,
    Procedure,
    StaticTarget,
)

logger = logging.getLogger("jsonrpc_dispatch")


class ProcedureRegistry:
    """Registry mapping procedure names to handlers.

    Three kinds of entries are looked up in order:

    1. callables stored with :meth:`register`,
    2. class or instance methods stored with :meth:`bind`,
    3. public methods of instances added with :meth:`attach`.

    The first match wins.

    Examples
    --------
    >>> registry = ProcedureRegistry()
    >>> registry.register("addition", lambda a, b: a + b)
    >>> registry.bind("random", RandomService, "between")
    >>> registry.attach(MathService())
    """

    def __init__(self) -> None:
        """Initialize the registry."""
        self._callbacks: dict[str, tuple[Callable[..., Any], HandlerSignature]] = {}
        self._classes: dict[str, tuple[HandlerRef, HandlerSignature]] = {}
        self._instances: list[Any] = []

    def register(
        self,
        name: str,
        handler: Callable[..., Any],
        parameters: Iterable[ParameterSpec | str] | None = None,
    ) -> None:
        """Register a callable under a procedure name.

        Registering an existing name replaces the previous handler.

        Parameters
        ----------
        name : str
            Procedure name.
        handler : Callable
            Function, bound method or any other callable.
        parameters : Iterable[ParameterSpec | str] | None, optional
            Explicit parameter descriptors. Derived from the handler signature
            when omitted.
        """
        if parameters is not None:
            signature = explicit_signature(parameters)
        else:
            signature = inspect_handler(handler)
        self._callbacks[name] = (handler, signature)
        logger.debug("Registered procedure: %s", name)

    def procedure(self, name: str | None = None) -> Callable:
        """A decorator for registering procedures.

        Parameters
        ----------
        name : str, optional
            Procedure name, by default the function name.

        Returns
        -------
        Callable
            Decorator returning the function unchanged.
        """

        def wrap(func: Callable[..., Any]) -> Callable[..., Any]:
            self.register(name or func.__name__, func)
            return func

        return wrap

    def bind(self, procedure: str, target: Any, method_name: str | None = None) -> None:
        """Bind a procedure to a method of a class or instance.

        Parameters
        ----------
        procedure : str
            Procedure name.
        target : type | object
            A class, instantiated afresh for every call, or a live instance
            shared by all calls.
        method_name : str, optional
            Method to call, by default the procedure name.

        Raises
        ------
        AttributeError
            The target has no such method.
        """
        if method_name is None:
            method_name = procedure

        signature = inspect_method(target, method_name)
        ref: HandlerRef
        if isinstance(target, type):
            ref = StaticTarget(factory=target, method_name=method_name)
        else:
            ref = InstanceTarget(instance=target, method_name=method_name)
        self._classes[procedure] = (ref, signature)
        logger.debug("Bound procedure %s to %r.%s", procedure, target, method_name)

    def attach(self, instance: Any) -> None:
        """Add an instance whose public methods serve as fallback procedures."""
        self._instances.append(instance)

    def resolve(self, name: str) -> Procedure:
        """Find the procedure for a name.

        Parameters
        ----------
        name : str
            Procedure name.

        Returns
        -------
        Procedure
            Invocable procedure with its parameter descriptors.

        Raises
        ------
        ProcedureNotFound
            No entry matches.
        """
        if name in self._callbacks:
            handler, signature = self._callbacks[name]
            return _make_procedure(name, handler, signature)

        if name in self._classes:
            ref, signature = self._classes[name]
            return _make_procedure(name, _invoker(ref), signature)

        if not name.startswith("_"):
            for instance in self._instances:
                method = getattr(instance, name, None)
                if callable(method):
                    return _make_procedure(name, method, inspect_handler(method))

        logger.debug(logs.PROCEDURE_NOT_FOUND, name)
        raise ProcedureNotFound

    def has_procedure(self, name: str) -> bool:
        """Check if a name resolves to a procedure."""
        try:
            self.resolve(name)
        except ProcedureNotFound:
            return False
        return True

    def procedure_names(self) -> list[str]:
        """List names stored with :meth:`register` and :meth:`bind`.

        Attached instances are searched on demand and are not listed.
        """
        names = list(self._callbacks)
        names.extend(name for name in self._classes if name not in self._callbacks)
        return names

    def snapshot(self) -> ProcedureRegistry:
        """Return an independent copy of the current entries.

        A dispatcher resolves all requests of one payload, batch elements
        included, against a single snapshot.
        """
        copy = ProcedureRegistry()
        copy._callbacks = dict(self._callbacks)
        copy._classes = dict(self._classes)
        copy._instances = list(self._instances)
        return copy

    def clear(self) -> None:
        """Remove all entries."""
        self._callbacks.clear()
        self._classes.clear()
        self._instances.clear()


def _invoker(ref: HandlerRef) -> Callable[..., Any]:
    if isinstance(ref, StaticTarget):

        def invoke_static(*args: Any, **kwargs: Any) -> Any:
            return getattr(ref.factory(), ref.method_name)(*args, **kwargs)

        return invoke_static

    return getattr(ref.instance, ref.method_name)


def _make_procedure(
    name: str, func: Callable[..., Any], signature: HandlerSignature
) -> Procedure:
    return Procedure(
        name=name,
        func=func,
        parameters=signature.parameters,
        accepts_context=signature.accepts_context,
        variadic=signature.variadic,
    )


# Global registry instance
_registry = ProcedureRegistry()


def get_registry() -> ProcedureRegistry:
    """Get the global procedure registry.

    Returns
    -------
    ProcedureRegistry
        The global registry instance.
    """
    return _registry
