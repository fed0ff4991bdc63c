from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Set

from .broadcast import InMemoryBroadcast


@dataclass
class ServerState:
    broadcast: InMemoryBroadcast = field(default_factory=InMemoryBroadcast)
    # publish tasks spawned from synchronous router callbacks
    tasks: Set[asyncio.Task] = field(default_factory=set)

    def spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)
        return task
