from __future__ import annotations

import asyncio
import json
import logging
from enum import StrEnum
from typing import Iterable

from fastapi import FastAPI, WebSocket
from starlette.endpoints import WebSocketEndpoint

from .broadcast import InMemoryBroadcast

logger = logging.getLogger(__name__)


class ChannelName(StrEnum):
    NAV = "nav"
    ROUTE = "route"
    INPUT = "input"


CHAN_NAV = ChannelName.NAV.value
CHAN_ROUTE = ChannelName.ROUTE.value
CHAN_INPUT = ChannelName.INPUT.value


def register_ws_routes(
    app: FastAPI,
    *,
    broadcast: InMemoryBroadcast,
    channels_to_forward: Iterable[str],
    input_channel: str,
    path: str = "/ws",
) -> None:
    """
    Register a WebSocket route that bridges pub/sub channels to the socket.
    - broadcast: object with publish(channel, message) and subscribe(channel) async context manager
    - channels_to_forward: channel names to forward from pub/sub to this socket
    - input_channel: channel name to publish all incoming client messages
    """
    channels = list(channels_to_forward)

    class RouterWS(WebSocketEndpoint):
        encoding = "text"

        async def on_connect(self, ws: WebSocket):
            await ws.accept()
            self._forward_tasks = [
                asyncio.create_task(self._forward(ws, channel)) for channel in channels
            ]

        async def on_receive(self, ws: WebSocket, data: str):
            try:
                message = json.loads(data)
            except ValueError:
                logger.warning("Ignoring non-JSON websocket frame %r", data[:200])
                return
            await broadcast.publish(input_channel, message)

        async def on_disconnect(self, ws: WebSocket, close_code: int):
            for t in getattr(self, "_forward_tasks", []):
                t.cancel()

        async def _forward(self, ws: WebSocket, channel: str):
            async with broadcast.subscribe(channel) as subscriber:
                async for event in subscriber:
                    try:
                        await ws.send_text(event.message)
                    except Exception:
                        logger.debug("Websocket closed while forwarding %s", channel)
                        return

    app.router.add_websocket_route(path, RouterWS)
