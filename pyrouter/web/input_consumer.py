from __future__ import annotations

import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class InputConsumer:
    """Feeds messages published on the input channel to an async handler.

    Keeps the websocket transport separate from what the router does with
    each client message. Invalid messages and handler errors are logged and
    the consumer keeps running.
    """

    def __init__(
        self,
        *,
        broadcast,
        input_channel: str,
        handle_message: Callable[[dict], Awaitable[None]],
    ) -> None:
        self._broadcast = broadcast
        self._input_channel = input_channel
        self._handle_message = handle_message

    async def run(self) -> None:
        async with self._broadcast.subscribe(self._input_channel) as subscriber:
            async for event in subscriber:
                try:
                    msg = event.json()
                except ValueError:
                    logger.warning("Dropping malformed client message %r", event.message)
                    continue
                if not isinstance(msg, dict):
                    logger.warning("Dropping non-object client message %r", msg)
                    continue
                try:
                    await self._handle_message(msg)
                except Exception:
                    logger.exception("Error handling client message %r", msg)
