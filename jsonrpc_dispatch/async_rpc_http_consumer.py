"""HTTP transport for the dispatcher, as a Django Channels consumer."""

from __future__ import annotations

import logging
from typing import Any

from channels.generic.http import AsyncHttpConsumer

from jsonrpc_dispatch.async_dispatcher import AsyncDispatcher
from jsonrpc_dispatch.auth import BASIC_REALM, is_authenticated, is_host_allowed
from jsonrpc_dispatch.config import get_config

logger = logging.getLogger("jsonrpc_dispatch")

JSON_CONTENT_TYPE = (b"Content-Type", b"application/json")


class AsyncRpcHttpConsumer(AsyncHttpConsumer):
    """Serve JSON-RPC 2.0 over HTTP.

    Client host and Basic credential checks run before the body is
    dispatched; a rejected request never reaches the dispatcher. Responses
    are sent with status 200, or 204 when the payload produced no response
    (notifications only).

    Attributes
    ----------
    dispatcher : AsyncDispatcher | None
        Dispatcher to use. None creates one over the global registry.
    allowed_hosts : list[str] | None
        Overrides the ``ALLOWED_HOSTS`` setting when set.
    users : dict[str, str] | None
        Overrides the ``USERS`` setting when set.

    Examples
    --------
    In routing.py::

        class ApiConsumer(AsyncRpcHttpConsumer):
            dispatcher = AsyncDispatcher(api_registry)

        application = URLRouter([path("rpc/", ApiConsumer.as_asgi())])
    """

    dispatcher: AsyncDispatcher | None = None
    allowed_hosts: list[str] | None = None
    users: dict[str, str] | None = None

    def get_dispatcher(self) -> AsyncDispatcher:
        """Return the dispatcher for this consumer."""
        if self.dispatcher is None:
            return AsyncDispatcher()
        return self.dispatcher

    async def handle(self, body: bytes) -> None:
        """Called on HTTP request with the full request body."""
        config = get_config()
        allowed_hosts = (
            self.allowed_hosts if self.allowed_hosts is not None else config.allowed_hosts
        )
        users = self.users if self.users is not None else config.users

        if not is_host_allowed(self.scope, allowed_hosts):
            await self._reject(403, b'{"error": "Access Forbidden"}')
            return

        if not is_authenticated(self.scope, users):
            await self._reject(
                401,
                b'{"error": "Authentication failed"}',
                extra_headers=[(b"WWW-Authenticate", BASIC_REALM.encode())],
            )
            return

        response = await self.get_dispatcher().dispatch(body, scope=self.scope)

        if response:
            await self.send_response(
                200, response.encode("utf-8"), headers=[JSON_CONTENT_TYPE]
            )
        else:
            await self.send_response(204, b"", headers=[JSON_CONTENT_TYPE])

    async def _reject(
        self,
        status: int,
        body: bytes,
        extra_headers: list[tuple[bytes, bytes]] | None = None,
    ) -> None:
        headers: list[Any] = [*(extra_headers or []), JSON_CONTENT_TYPE]
        await self.send_response(status, body, headers=headers)
