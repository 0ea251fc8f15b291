"""Parameter descriptors derived from handler signatures.

Signatures are inspected once, when a handler is registered; dispatching only
reads the resulting :class:`~jsonrpc_dispatch.protocols.ParameterSpec` list.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from jsonrpc_dispatch.protocols import ParameterSpec


@dataclass(frozen=True)
class HandlerSignature:
    """Binding-relevant view of a handler signature.

    Attributes
    ----------
    parameters : tuple[ParameterSpec, ...]
        Declared parameters excluding ``self``, the context parameter and
        variadic parameters.
    accepts_context : bool
        Whether the first parameter is an ``RpcContext``.
    variadic : bool
        Whether the handler declares ``*args``.
    """

    parameters: tuple[ParameterSpec, ...]
    accepts_context: bool = False
    variadic: bool = False


def _is_context_annotation(annotation: object) -> bool:
    # Handles direct references, string annotations and runtime objects
    if annotation is inspect.Parameter.empty:
        return False
    if annotation == "RpcContext" or getattr(annotation, "__name__", "") == "RpcContext":
        return True

    from jsonrpc_dispatch.context import RpcContext  # noqa: PLC0415

    return annotation is RpcContext


def inspect_handler(func: Callable, *, skip_self: bool = False) -> HandlerSignature:
    """Derive the parameter descriptors of a handler.

    Parameters
    ----------
    func : Callable
        Handler to inspect.
    skip_self : bool, optional
        Drop the first parameter, for methods looked up on a class.

    Returns
    -------
    HandlerSignature
        Descriptors used by the argument binder.

    Raises
    ------
    TypeError
        The callable has no inspectable signature.
    """
    try:
        params = list(inspect.signature(func).parameters.values())
    except ValueError as e:
        msg = f"Cannot inspect the signature of {func!r}: {e}"
        raise TypeError(msg) from e

    if skip_self:
        params = params[1:]

    accepts_context = bool(params) and _is_context_annotation(params[0].annotation)
    if accepts_context:
        params = params[1:]

    specs = []
    variadic = False
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            variadic = True
            continue
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            continue
        has_default = param.default is not inspect.Parameter.empty
        specs.append(
            ParameterSpec(
                name=param.name,
                has_default=has_default,
                default=param.default if has_default else None,
                keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
            )
        )

    return HandlerSignature(
        parameters=tuple(specs), accepts_context=accepts_context, variadic=variadic
    )


def inspect_method(owner: object, method_name: str) -> HandlerSignature:
    """Derive the descriptors of a method looked up on a class or instance.

    Raises
    ------
    AttributeError
        The owner has no callable attribute named ``method_name``.
    """
    if isinstance(owner, type):
        raw = inspect.getattr_static(owner, method_name)
        if isinstance(raw, (staticmethod, classmethod)):
            return inspect_handler(getattr(owner, method_name))
        if not callable(raw):
            msg = f"{owner.__name__}.{method_name} is not callable"
            raise AttributeError(msg)
        return inspect_handler(raw, skip_self=True)

    method = getattr(owner, method_name)
    if not callable(method):
        msg = f"{type(owner).__name__}.{method_name} is not callable"
        raise AttributeError(msg)
    return inspect_handler(method)


def explicit_signature(parameters: Iterable[ParameterSpec | str]) -> HandlerSignature:
    """Build a signature from caller-supplied descriptors.

    Bare strings are required parameters.
    """
    specs = tuple(
        p if isinstance(p, ParameterSpec) else ParameterSpec(name=p)
        for p in parameters
    )
    return HandlerSignature(parameters=specs)
