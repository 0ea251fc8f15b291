"""Argument binding.

Maps supplied JSON-RPC ``params`` onto a handler's declared parameters.
Positional params (a sequential array) are passed through in order. Named
params (any other object) are matched by parameter name, falling back to
declared defaults; unknown names are ignored and a null value counts as
absent.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from jsonrpc_dispatch.exceptions import ArityError, MissingArgument
from jsonrpc_dispatch.protocols import ParameterSpec
from jsonrpc_dispatch.utils import is_sequential, sequence_values


@dataclass(frozen=True)
class ArgumentSet:
    """Arguments resolved for a single invocation.

    Attributes
    ----------
    args : tuple
        Values passed positionally, in declared parameter order.
    kwargs : dict[str, Any]
        Values for keyword-only parameters.
    """

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


def bind_arguments(
    supplied: Sequence[Any] | Mapping[str, Any] | None,
    parameters: Sequence[ParameterSpec],
    required_count: int,
    max_count: int | None,
) -> ArgumentSet:
    """Bind supplied params to declared parameters.

    Parameters
    ----------
    supplied : Sequence | Mapping | None
        Params from the request. None is treated as no arguments.
    parameters : Sequence[ParameterSpec]
        Declared parameters in order.
    required_count : int
        Number of parameters without a default.
    max_count : int | None
        Maximum number of arguments, None for no limit.

    Returns
    -------
    ArgumentSet
        Arguments ready for invocation.

    Raises
    ------
    ArityError
        Fewer than ``required_count`` or more than ``max_count`` values.
    MissingArgument
        A parameter without a default receives no value, or a null one.
        Required keyword-only parameters can only be given by name.

    Examples
    --------
    >>> params = [ParameterSpec("start"), ParameterSpec("end")]
    >>> bind_arguments({"end": 10, "start": 1}, params, 2, 2).args
    (1, 10)
    """
    if supplied is None:
        supplied = []

    count = len(supplied)

    if count < required_count:
        raise ArityError("Wrong number of arguments")

    if max_count is not None and count > max_count:
        raise ArityError("Too many arguments")

    if is_sequential(supplied):
        return _bind_positional(sequence_values(supplied), parameters, max_count)

    return _bind_named(supplied, parameters)


def _bind_positional(
    values: list[Any], parameters: Sequence[ParameterSpec], max_count: int | None
) -> ArgumentSet:
    # Keyword-only parameters cannot receive positional values
    if max_count is not None and len(values) > sum(
        1 for p in parameters if not p.keyword_only
    ):
        raise ArityError("Too many arguments")

    for param in parameters:
        if param.keyword_only and not param.has_default:
            raise MissingArgument(param.name)

    return ArgumentSet(args=tuple(values))


def _bind_named(
    supplied: Sequence[Any] | Mapping[str, Any], parameters: Sequence[ParameterSpec]
) -> ArgumentSet:
    named: Mapping[str, Any] = supplied if isinstance(supplied, Mapping) else {}
    args = []
    kwargs = {}

    for param in parameters:
        if named.get(param.name) is not None:
            value = named[param.name]
        elif param.has_default:
            value = param.default
        else:
            raise MissingArgument(param.name)

        if param.keyword_only:
            kwargs[param.name] = value
        else:
            args.append(value)

    return ArgumentSet(args=tuple(args), kwargs=kwargs)
