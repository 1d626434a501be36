"""
Priority channel between the coordinator and the dispatcher.

Order: highest severity first, then oldest creation time, then enqueue order.
An unscored event sorts after every scored one so it can never jump the line.
"""

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field

from ..models import DisasterEvent

UNSCORED_RANK = 1  # scored events rank -100..0


@dataclass(order=True)
class _Entry:
    key: tuple
    event: DisasterEvent = field(compare=False)


def priority_key(event):
    rank = -event.severity_score if event.is_scored else UNSCORED_RANK
    return (rank, event.created_at.timestamp())


class DispatchQueue(asyncio.PriorityQueue):
    def __init__(self):
        super().__init__()
        self._sequence = itertools.count()

    def put_event(self, event):
        """Enqueue (or requeue) an event. Unbounded, never blocks."""
        self.put_nowait(_Entry(priority_key(event) + (next(self._sequence),), event))

    async def get_event(self, timeout=None):
        """Next event by priority. Raises asyncio.TimeoutError after `timeout` seconds."""
        if timeout is None:
            entry = await self.get()
        else:
            entry = await asyncio.wait_for(self.get(), timeout)
        return entry.event

    def get_event_nowait(self):
        return self.get_nowait().event

    def top(self, n):
        """The n events that would be dequeued next, in order. Read-only."""
        if n <= 0:
            return []
        return [entry.event for entry in heapq.nsmallest(n, list(self._queue))]
