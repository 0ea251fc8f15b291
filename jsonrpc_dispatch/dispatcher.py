"""Definition of the :class:`Dispatcher` class.

A JSON-RPC request message can contain three possible elements: The *method*,
which is a string that names the procedure to be invoked; *params*, an array
or object of values passed along as arguments; and *id*, a value that matches
the response with the request that it is replying to. A request without an
*id* member is a notification and never gets a response.

Errors:

    - -32700
      Parse error
      The payload is not a JSON object or array.

    - -32600
      Invalid Request
      The JSON sent is not a valid Request object.

    - -32601
      Method not found
      The procedure does not exist.

    - -32602
      Invalid params
      Wrong number of arguments, or a missing named argument.

    - -32000
      Server error
      The procedure raised an unexpected exception; its message is the data.

    - -32500 (default)
      Application error
      The procedure raised :class:`~jsonrpc_dispatch.exceptions.ApplicationError`
      or returned an ``error`` entry with output error detection enabled.
      These responses always carry a null id.

References
----------
- https://www.jsonrpc.org/specification
"""

from __future__ import annotations

import inspect
import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from jsonrpc_dispatch import logs
from jsonrpc_dispatch.binder import ArgumentSet, bind_arguments
from jsonrpc_dispatch.config import get_config
from jsonrpc_dispatch.context import RpcContext
from jsonrpc_dispatch.exceptions import (
    RPC_ERRORS,
    ApplicationError,
    InvalidRequest,
    JsonRpcError,
    JsonRpcErrorCode,
    ParseError,
    ServerError,
    generate_error_response,
    normalize_error,
)
from jsonrpc_dispatch.protocols import Procedure, Request
from jsonrpc_dispatch.registry import ProcedureRegistry, get_registry
from jsonrpc_dispatch.signals import (
    rpc_method_completed,
    rpc_method_failed,
    rpc_method_started,
)
from jsonrpc_dispatch.utils import (
    create_json_rpc_response,
    decode_payload,
    encode_json,
    is_sequential,
    sequence_values,
)
from jsonrpc_dispatch.validation import validate_request

logger = logging.getLogger("jsonrpc_dispatch")

Response = dict[str, Any]


class Dispatcher:
    """Synchronous JSON-RPC 2.0 dispatcher.

    Never raises: every failure while handling a payload becomes an error
    response, and :meth:`dispatch` always returns a string (empty when there is
    nothing to send back).

    Attributes
    ----------
    registry : ProcedureRegistry
        Where procedures are resolved.
    detect_output_error : bool
        Whether a returned mapping with an ``error`` entry is an error.
    json_encoder_class : type[json.JSONEncoder] | None
        Encoder used for responses, for results that are not plain JSON.

    Examples
    --------
    >>> registry = ProcedureRegistry()
    >>> registry.register("addition", lambda a, b: a + b)
    >>> Dispatcher(registry).dispatch(
    ...     '{"jsonrpc":"2.0","method":"addition","params":[3,5],"id":1}'
    ... )
    '{"jsonrpc":"2.0","id":1,"result":8}'
    """

    json_encoder_class: type[json.JSONEncoder] | None = None

    def __init__(
        self,
        registry: ProcedureRegistry | None = None,
        *,
        detect_output_error: bool | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Parameters
        ----------
        registry : ProcedureRegistry | None, optional
            Registry to use, by default the global registry.
        detect_output_error : bool | None, optional
            Override the ``DETECT_OUTPUT_ERROR`` setting.
        """
        config = get_config()
        self.registry = registry if registry is not None else get_registry()
        if detect_output_error is None:
            detect_output_error = config.detect_output_error
        self.detect_output_error = detect_output_error
        self.log_rpc_params = config.log_rpc_params

    def dispatch(
        self, payload: str | bytes | Any, scope: dict[str, Any] | None = None
    ) -> str:
        """Handle a payload and return the encoded response.

        Parameters
        ----------
        payload : str | bytes | Any
            Raw JSON text, or already decoded data.
        scope : dict[str, Any] | None, optional
            Transport metadata exposed to procedures through RpcContext.

        Returns
        -------
        str
            JSON response, or an empty string when there is none.
        """
        return self.encode_response(self.handle(payload, scope=scope))

    def handle(
        self, payload: str | bytes | Any, scope: dict[str, Any] | None = None
    ) -> Response | list[Response] | None:
        """Handle a payload and return the response data.

        Returns
        -------
        dict | list | None
            Single response, list of batch responses, or None when there is
            nothing to send back.
        """
        try:
            data = self._parse(payload)
        except ParseError as e:
            logger.warning("Malformed payload received: %s", e.__cause__ or e.data)
            return e.as_dict()

        registry = self.registry.snapshot()

        if is_sequential(data):
            return self._handle_batch(sequence_values(data), registry, scope or {})
        return self._handle_single(data, registry, scope or {})

    def encode_response(self, response: Response | list[Response] | None) -> str:
        """Encode response data for the wire.

        Batch entries are encoded one by one, so a single result that cannot be
        serialized does not spoil its siblings.
        """
        if response is None:
            logger.debug(logs.EMPTY_RESPONSE)
            return ""
        if isinstance(response, list):
            return "[" + ",".join(self._encode_one(r) for r in response) + "]"
        return self._encode_one(response)

    def _encode_one(self, response: Response) -> str:
        try:
            return encode_json(response, self.json_encoder_class)
        except (TypeError, ValueError, RecursionError) as e:
            rpc_id = response.get("id")
            logger.error(logs.UNENCODABLE_RESPONSE, rpc_id, e)
            return encode_json(
                generate_error_response(
                    rpc_id=rpc_id,
                    code=JsonRpcErrorCode.INTERNAL_ERROR,
                    message=RPC_ERRORS[JsonRpcErrorCode.INTERNAL_ERROR],
                    data=str(e),
                )
            )

    def _parse(self, payload: Any) -> Any:
        if isinstance(payload, (str, bytes, bytearray)):
            try:
                data = decode_payload(payload)
            except (ValueError, RecursionError) as e:
                raise ParseError from e
        else:
            data = payload

        if not isinstance(data, (Mapping, list, tuple)):
            raise ParseError
        return data

    def _handle_batch(
        self, elements: list[Any], registry: ProcedureRegistry, scope: dict[str, Any]
    ) -> list[Response] | None:
        logger.debug(logs.BATCH_RECEIVED, len(elements))
        responses = []
        for element in elements:
            if isinstance(element, Mapping):
                response = self._handle_single(element, registry, scope)
            else:
                response = self._invalid_batch_element()
            if response is not None:
                responses.append(response)
        return responses or None

    def _invalid_batch_element(self) -> Response:
        return generate_error_response(
            rpc_id=None,
            code=JsonRpcErrorCode.INVALID_REQUEST,
            message=RPC_ERRORS[JsonRpcErrorCode.INVALID_REQUEST],
        )

    def _handle_single(
        self, data: Any, registry: ProcedureRegistry, scope: dict[str, Any]
    ) -> Response | None:
        try:
            request = validate_request(data)
        except InvalidRequest as e:
            return e.as_dict()

        start_time = self._begin(request)
        try:
            procedure, arguments = self._prepare_call(request, registry)
            result = self._call(procedure, arguments, request, scope)
        except Exception as e:
            response = self._handle_exception(e, request, start_time)
        else:
            response = self._handle_result(result, request, start_time)
        return self._finish(request, response)

    def _call(
        self,
        procedure: Procedure,
        arguments: ArgumentSet,
        request: Request,
        scope: dict[str, Any],
    ) -> Any:
        result = procedure.invoke(arguments, self._make_context(procedure, request, scope))
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            msg = f"Procedure '{procedure.name}' is asynchronous; use AsyncDispatcher"
            raise TypeError(msg)
        return result

    def _prepare_call(
        self, request: Request, registry: ProcedureRegistry
    ) -> tuple[Procedure, ArgumentSet]:
        """Resolve the procedure and bind the request params to it.

        Raises
        ------
        ProcedureNotFound
            The procedure is not registered.
        InvalidArguments
            The params do not fit the procedure's parameters.
        """
        procedure = registry.resolve(request.method)
        arguments = bind_arguments(
            request.params,
            procedure.parameters,
            procedure.required_count,
            procedure.max_count,
        )
        return procedure, arguments

    def _make_context(
        self, procedure: Procedure, request: Request, scope: dict[str, Any]
    ) -> RpcContext | None:
        if not procedure.accepts_context:
            return None
        return RpcContext(
            dispatcher=self,
            procedure_name=request.method,
            rpc_id=request.rpc_id,
            is_notification=request.is_notification,
            scope=scope,
        )

    def _begin(self, request: Request) -> float:
        logger.debug(logs.CALL_INTERCEPTED, request.method)
        if request.is_notification:
            logger.info(logs.RPC_NOTIFICATION_START, request.method)
        else:
            logger.info(logs.RPC_METHOD_CALL_START, request.method, request.rpc_id)
        if self.log_rpc_params:
            logger.debug(logs.RPC_METHOD_PARAMS, request.method, request.params)

        rpc_method_started.send(
            sender=self.__class__,
            dispatcher=self,
            method_name=request.method,
            params=request.params,
            rpc_id=request.rpc_id,
        )
        return time.time()

    def _finish(self, request: Request, response: Response) -> Response | None:
        if request.is_notification:
            logger.debug(logs.RPC_NOTIFICATION_END, request.method)
            return None
        logger.debug(logs.RPC_METHOD_CALL_END, request.rpc_id, request.method, response)
        return response

    def _handle_result(
        self, result: Any, request: Request, start_time: float
    ) -> Response:
        """Build the response for a procedure that returned normally."""
        rpc_method_completed.send(
            sender=self.__class__,
            dispatcher=self,
            method_name=request.method,
            result=result,
            rpc_id=request.rpc_id,
            duration=time.time() - start_time,
        )

        if (
            self.detect_output_error
            and isinstance(result, Mapping)
            and result.get("error") is not None
        ):
            logger.info(logs.OUTPUT_ERROR_DETECTED, request.method, result["error"])
            return self._application_error_response(
                lambda: normalize_error(result["error"]), request
            )

        return create_json_rpc_response(rpc_id=request.rpc_id, result=result)

    def _handle_exception(
        self, exception: Exception, request: Request, start_time: float
    ) -> Response:
        """Build the error response for a failed procedure call.

        Parameters
        ----------
        exception : Exception
            Exception raised while resolving, binding or running the procedure.
        request : Request
            The request being handled.
        start_time : float
            Start time for duration calculation.

        Returns
        -------
        dict[str, Any]
            Error response.
        """
        rpc_method_failed.send(
            sender=self.__class__,
            dispatcher=self,
            method_name=request.method,
            error=exception,
            rpc_id=request.rpc_id,
            duration=time.time() - start_time,
        )

        if isinstance(exception, ApplicationError):
            logger.info(logs.APPLICATION_ERROR, request.method, exception)
            return self._application_error_response(lambda: exception.error, request)

        if isinstance(exception, JsonRpcError):
            logger.info(
                "RPC error in procedure '%s': %s %s",
                request.method,
                exception.code,
                exception.data,
            )
            return generate_error_response(
                rpc_id=request.rpc_id,
                code=exception.code,
                message=exception.message,
                data=exception.data,
            )

        logger.exception("Unexpected error processing RPC call '%s'", request.method)
        error = ServerError(data=str(exception))
        return generate_error_response(
            rpc_id=request.rpc_id,
            code=error.code,
            message=error.message,
            data=error.data,
        )

    def _application_error_response(
        self, build_error: Callable[[], dict[str, Any]], request: Request
    ) -> Response:
        """Build the null-id response for an application-signalled error.

        An error description that cannot be normalized becomes an
        ``Internal error`` for the request id.
        """
        try:
            error = build_error()
        except Exception as e:
            logger.exception(
                "Unusable application error from procedure '%s'", request.method
            )
            return generate_error_response(
                rpc_id=request.rpc_id,
                code=JsonRpcErrorCode.INTERNAL_ERROR,
                message=RPC_ERRORS[JsonRpcErrorCode.INTERNAL_ERROR],
                data=str(e),
            )
        # Application errors are answered with a null id
        return create_json_rpc_response(rpc_id=None, error=error)
