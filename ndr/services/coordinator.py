import asyncio

import structlog

from .base import Service

log = structlog.get_logger()


class Coordinator(Service):
    """
    Single consumer of the raw event channel.

    Scores each event exactly once, writes the score into it and publishes it
    on the dispatch queue. The raw channel is polled with a bounded timeout so
    a stop is noticed within one poll interval; events still unread at that
    point are left where they are.
    """

    def __init__(self, config, raw_channel, dispatch_queue, engine):
        super().__init__()
        self.config = config
        self.raw_channel = raw_channel
        self.dispatch_queue = dispatch_queue
        self.engine = engine
        self.stats = {"processed": 0, "errors": 0, "last_event_id": None}

    async def start(self):
        if self.stopping:
            return
        self.running = True
        log.info("coordinator_started", engine=self.engine.name)

        while self.running:
            try:
                event = await asyncio.wait_for(
                    self.raw_channel.get(), self.config.coordinator_poll_interval
                )
            except asyncio.TimeoutError:
                continue
            # an event already pulled is always finished, even after stop
            self.process(event)

        self.running = False
        log.info(
            "coordinator_stopped",
            processed=self.stats["processed"],
            abandoned=self.raw_channel.qsize(),
        )

    def process(self, event):
        try:
            score = self.engine.score(event)
            event.assign_score(score)
            self.dispatch_queue.put_event(event)
        except Exception as e:
            self.stats["errors"] += 1
            log.error(
                "coordinator_error",
                event_id=getattr(event, "id", None),
                error=str(e),
            )
            return

        self.stats["processed"] += 1
        self.stats["last_event_id"] = event.id
        log.info(
            "event_scored",
            event_id=event.id,
            category=event.category.value,
            severity=event.severity_score,
            region=event.region_id,
        )
