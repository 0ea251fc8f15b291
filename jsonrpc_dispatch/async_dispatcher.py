"""Asynchronous variant of :class:`~jsonrpc_dispatch.dispatcher.Dispatcher`."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import Any

from jsonrpc_dispatch import logs
from jsonrpc_dispatch.binder import ArgumentSet
from jsonrpc_dispatch.dispatcher import Dispatcher, Response
from jsonrpc_dispatch.exceptions import InvalidRequest, ParseError
from jsonrpc_dispatch.protocols import Procedure, Request
from jsonrpc_dispatch.registry import ProcedureRegistry
from jsonrpc_dispatch.utils import is_sequential, sequence_values
from jsonrpc_dispatch.validation import validate_request

logger = logging.getLogger("jsonrpc_dispatch")


class AsyncDispatcher(Dispatcher):
    """Async JSON-RPC 2.0 dispatcher.

    Procedures may be coroutine functions or plain functions; plain functions
    run inline on the event loop, so long blocking work belongs in a coroutine
    that offloads it. Batch elements are processed concurrently and answered
    in input order.

    Examples
    --------
    >>> @registry.procedure()
    ... async def fetch(resource_id: int) -> dict:
    ...     return await load(resource_id)
    >>> await AsyncDispatcher(registry).dispatch(body)
    """

    async def dispatch(  # type: ignore[override]
        self, payload: str | bytes | Any, scope: dict[str, Any] | None = None
    ) -> str:
        """Handle a payload and return the encoded response."""
        return self.encode_response(await self.handle(payload, scope=scope))

    async def handle(  # type: ignore[override]
        self, payload: str | bytes | Any, scope: dict[str, Any] | None = None
    ) -> Response | list[Response] | None:
        """Handle a payload and return the response data."""
        try:
            data = self._parse(payload)
        except ParseError as e:
            logger.warning("Malformed payload received: %s", e.__cause__ or e.data)
            return e.as_dict()

        registry = self.registry.snapshot()

        if is_sequential(data):
            return await self._handle_batch(
                sequence_values(data), registry, scope or {}
            )
        return await self._handle_single(data, registry, scope or {})

    async def _handle_batch(  # type: ignore[override]
        self, elements: list[Any], registry: ProcedureRegistry, scope: dict[str, Any]
    ) -> list[Response] | None:
        logger.debug(logs.BATCH_RECEIVED, len(elements))
        results = await asyncio.gather(
            *(self._handle_element(element, registry, scope) for element in elements)
        )
        responses = [response for response in results if response is not None]
        return responses or None

    async def _handle_element(
        self, element: Any, registry: ProcedureRegistry, scope: dict[str, Any]
    ) -> Response | None:
        if not isinstance(element, Mapping):
            return self._invalid_batch_element()
        return await self._handle_single(element, registry, scope)

    async def _handle_single(  # type: ignore[override]
        self, data: Any, registry: ProcedureRegistry, scope: dict[str, Any]
    ) -> Response | None:
        try:
            request = validate_request(data)
        except InvalidRequest as e:
            return e.as_dict()

        start_time = self._begin(request)
        try:
            procedure, arguments = self._prepare_call(request, registry)
            result = await self._call(procedure, arguments, request, scope)
        except Exception as e:
            response = self._handle_exception(e, request, start_time)
        else:
            response = self._handle_result(result, request, start_time)
        return self._finish(request, response)

    async def _call(  # type: ignore[override]
        self,
        procedure: Procedure,
        arguments: ArgumentSet,
        request: Request,
        scope: dict[str, Any],
    ) -> Any:
        result = procedure.invoke(arguments, self._make_context(procedure, request, scope))
        if inspect.isawaitable(result):
            return await result
        return result
