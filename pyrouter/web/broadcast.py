"""Process-local fan-out of router events to websocket connections.

Each subscriber owns a bounded queue. Publishing never waits: when a
socket falls behind, its oldest pending event is dropped.

Channels named in ``retain`` remember their last event and replay it to
every new subscriber, so a tab that connects late starts from the current
route instead of an empty page.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BroadcastEvent:
    channel: str
    message: str

    def json(self) -> Any:
        return json.loads(self.message)


async def _drain(queue: "asyncio.Queue[BroadcastEvent]") -> AsyncIterator[BroadcastEvent]:
    while True:
        yield await queue.get()


class InMemoryBroadcast:
    def __init__(self, *, retain: Iterable[str] = (), maxsize: int = 256) -> None:
        self._queues: Dict[str, List[asyncio.Queue]] = {}
        self._retain = frozenset(retain)
        self._last: Dict[str, BroadcastEvent] = {}
        self._maxsize = maxsize

    async def publish(self, channel: str, message: Any) -> None:
        event = BroadcastEvent(channel, json.dumps(message))
        if channel in self._retain:
            self._last[channel] = event
        for queue in list(self._queues.get(channel, ())):
            if queue.full():
                queue.get_nowait()
                logger.warning("Subscriber on %r is behind, dropped its oldest event", channel)
            queue.put_nowait(event)

    def last(self, channel: str) -> Optional[BroadcastEvent]:
        return self._last.get(channel)

    def subscriber_count(self, channel: str) -> int:
        return len(self._queues.get(channel, ()))

    @asynccontextmanager
    async def subscribe(self, channel: str) -> AsyncIterator[AsyncIterator[BroadcastEvent]]:
        queue: asyncio.Queue[BroadcastEvent] = asyncio.Queue(maxsize=self._maxsize)
        retained = self._last.get(channel)
        if retained is not None:
            queue.put_nowait(retained)
        subscribers = self._queues.setdefault(channel, [])
        subscribers.append(queue)
        events = _drain(queue)
        try:
            yield events
        finally:
            subscribers.remove(queue)
            await events.aclose()
