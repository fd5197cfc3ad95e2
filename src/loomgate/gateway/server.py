"""Asyncio socket listener used by the gateway bind routine."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

type ConnectionHandler = Callable[[asyncio.StreamReader, asyncio.StreamWriter], Awaitable[None]]


async def _close_connection(_reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except ConnectionError:
        return


class SocketListener:
    """Thin wrapper around ``asyncio.start_server``.

    ``listen`` raises ``OSError`` when the bind fails and leaves the listener
    reusable, so it can be retried.
    """

    def __init__(self, handler: ConnectionHandler | None = None) -> None:
        self._handler = handler or _close_connection
        self._server: asyncio.Server | None = None

    @property
    def is_listening(self) -> bool:
        return self._server is not None and self._server.is_serving()

    @property
    def bound_port(self) -> int | None:
        if self._server is None or not self._server.sockets:
            return None
        return int(self._server.sockets[0].getsockname()[1])

    async def listen(self, host: str, port: int) -> None:
        if self._server is not None:
            raise RuntimeError("listener is already bound")
        self._server = await asyncio.start_server(self._handler, host=host, port=port)
        logger.debug("gateway.server.listening host={} port={}", host, self.bound_port)

    async def serve_forever(self) -> None:
        if self._server is None:
            raise RuntimeError("listener is not bound")
        try:
            await self._server.serve_forever()
        except asyncio.CancelledError:
            # close() cancels the serving future; only outside cancellation propagates.
            if self._server is not None:
                raise

    async def close(self) -> None:
        server, self._server = self._server, None
        if server is None:
            return
        server.close()
        await server.wait_closed()
