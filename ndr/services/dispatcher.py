"""
Dispatcher: single consumer of the priority dispatch queue.

Per event:
  SCORED -> allocate -> ALLOCATED -> RESPONDING -> RELEASED
  SCORED -> allocate fails -> ALLOCATION_FAILED -> REQUEUED -> (back in queue)

A successful allocation spawns a response task that holds the resources for
a severity-dependent duration and then releases exactly what was taken. The
consumer loop never waits on those tasks. There is no abandonment: an event
the pool can never satisfy keeps cycling through REQUEUED.
"""

import asyncio
from collections import deque

import structlog

from ..engine import RequestPlanner
from ..models import AllocationRecord, DispatchState
from .base import Service

log = structlog.get_logger()

RECENT_TRANSITIONS = 200


class Dispatcher(Service):
    def __init__(self, config, dispatch_queue, pool, rng, planner=None):
        super().__init__()
        self.config = config
        self.queue = dispatch_queue
        self.pool = pool
        self.rng = rng
        self.planner = planner or RequestPlanner(
            rng, jitter=config.request_jitter, kinds=pool.kinds
        )
        self.active = {}  # event_id -> AllocationRecord
        self.states = {}  # event_id -> DispatchState, dropped once RELEASED
        self.recent_transitions = deque(maxlen=RECENT_TRANSITIONS)
        self._responses = set()
        self.stats = {
            "dequeued": 0,
            "allocated": 0,
            "allocation_failures": 0,
            "requeued": 0,
            "unscored_requeued": 0,
            "released": 0,
            "errors": 0,
        }

    async def start(self):
        if self.stopping:
            return
        self.running = True
        log.info("dispatcher_started", pool=self.pool.summary())

        try:
            while self.running:
                try:
                    event = await self.queue.get_event(timeout=self.config.dispatch_poll_interval)
                except asyncio.TimeoutError:
                    continue
                try:
                    await self.handle(event)
                except Exception as e:
                    self.stats["errors"] += 1
                    log.error("dispatch_error", event_id=event.id, error=str(e))
        finally:
            # wakes pending responses so they release right away
            self.stop()
            await self._drain_responses()
            log.info(
                "dispatcher_stopped",
                allocated=self.stats["allocated"],
                released=self.stats["released"],
                pending=self.queue.qsize(),
            )

    async def handle(self, event):
        self.stats["dequeued"] += 1

        if not event.is_scored:
            self.stats["unscored_requeued"] += 1
            log.debug("unscored_event_requeued", event_id=event.id)
            self.queue.put_event(event)
            await self.pause(self.config.unscored_retry_delay)
            return

        self._transition(event, DispatchState.SCORED)
        request = self.planner.plan(event)

        if self.pool.allocate(request):
            self._on_allocated(event, request)
            return

        self._transition(event, DispatchState.ALLOCATION_FAILED)
        self.stats["allocation_failures"] += 1
        log.info(
            "allocation_failed",
            event_id=event.id,
            severity=event.severity_score,
            request=request,
            available=self.pool.snapshot(),
        )
        self.queue.put_event(event)
        self._transition(event, DispatchState.REQUEUED)
        self.stats["requeued"] += 1
        await self.pause(self.config.allocation_retry_delay)

    def response_seconds(self, severity):
        """Grows with severity up to the cap, plus bounded jitter."""
        base = min(
            self.config.max_response_seconds,
            max(1, severity) * self.config.response_seconds_per_severity,
        )
        jitter = self.config.response_jitter_seconds
        return base + (self.rng.uniform(0.0, jitter) if jitter > 0 else 0.0)

    def _on_allocated(self, event, request):
        record = AllocationRecord(
            event_id=event.id,
            category=event.category,
            severity=event.severity_score,
            amounts=dict(request),
            response_seconds=self.response_seconds(event.severity_score),
        )
        self.active[event.id] = record
        self._transition(event, DispatchState.ALLOCATED)
        self.stats["allocated"] += 1
        log.info(
            "resources_allocated",
            event_id=event.id,
            severity=event.severity_score,
            request=request,
            response_seconds=round(record.response_seconds, 2),
        )

        task = asyncio.create_task(self._respond(event, record))
        self._responses.add(task)
        task.add_done_callback(self._responses.discard)

    async def _respond(self, event, record):
        self._transition(event, DispatchState.RESPONDING)
        cut_short = False
        try:
            cut_short = await self.pause(record.response_seconds)
        finally:
            self.pool.release(record.amounts)
            self.active.pop(event.id, None)
            self._transition(event, DispatchState.RELEASED)
            self.stats["released"] += 1
            log.info(
                "response_completed",
                event_id=event.id,
                released=record.amounts,
                cut_short=cut_short,
            )

    async def _drain_responses(self):
        if self._responses:
            await asyncio.gather(*list(self._responses), return_exceptions=True)

    def _transition(self, event, state):
        if state == DispatchState.RELEASED:
            self.states.pop(event.id, None)
        else:
            self.states[event.id] = state
        self.recent_transitions.append(
            {
                "event_id": event.id,
                "state": state.value,
                "severity": event.severity_score,
            }
        )

    @property
    def responses_in_flight(self):
        return len(self._responses)

    def get_stats(self):
        stats = dict(self.stats)
        stats["responses_in_flight"] = self.responses_in_flight
        stats["active_allocations"] = len(self.active)
        return stats
