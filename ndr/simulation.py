"""
Wires the pipeline together and owns its lifecycle.

  sources -> raw channel -> coordinator -> dispatch queue -> dispatcher -> pool

Also the read-only monitoring surface used by the reporter and the status API.
"""

import asyncio

import structlog

from .engine import DispatchQueue, ResourcePool, SeverityEngine
from .randomness import SimulationRandom
from .regions import check_unique, regions_for
from .rules import default_rules
from .services import Coordinator, Dispatcher, EventSource, Reporter

log = structlog.get_logger()


class Simulation:
    def __init__(self, config, regions=None, rng=None, engine=None):
        self.config = config
        self.rng = rng or SimulationRandom(config.seed)
        self.regions = check_unique(list(regions) if regions is not None else regions_for(config))

        self.raw_channel = asyncio.Queue()
        self.dispatch_queue = DispatchQueue()
        self.pool = ResourcePool(config.resource_capacities)
        self.engine = engine or SeverityEngine(default_rules())

        self.sources = [
            EventSource(config, region, self.raw_channel, self.rng.spawn())
            for region in self.regions
        ]
        self.coordinator = Coordinator(config, self.raw_channel, self.dispatch_queue, self.engine)
        self.dispatcher = Dispatcher(config, self.dispatch_queue, self.pool, self.rng.spawn())
        self.reporter = Reporter(config, self)

        self.running = False
        self._tasks = []

    @property
    def services(self):
        # stop order: producers first, consumers after
        return [*self.sources, self.coordinator, self.dispatcher, self.reporter]

    async def start(self):
        if self.running:
            return
        self.running = True
        self._tasks = [asyncio.create_task(service.start()) for service in self.services]
        log.info(
            "simulation_started",
            regions=[r.region_id for r in self.regions],
            seed=self.rng.seed,
            pool=self.pool.summary(),
        )

    async def stop(self):
        if not self.running:
            return
        for service in self.services:
            service.stop()
        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        for service, result in zip(self.services, results):
            if isinstance(result, BaseException):
                log.error(
                    "service_failed",
                    service=type(service).__name__,
                    error=str(result),
                )
        self._tasks = []
        self.running = False
        log.info("simulation_stopped", **self.final_statistics())

    async def run(self, duration=None, shutdown=None):
        """Run until `duration` seconds pass or `shutdown` is set.

        A duration of None or 0 means run until shutdown.
        """
        shutdown = shutdown or asyncio.Event()
        await self.start()
        try:
            if duration:
                try:
                    await asyncio.wait_for(shutdown.wait(), timeout=duration)
                except asyncio.TimeoutError:
                    pass
            else:
                await shutdown.wait()
        finally:
            await self.stop()
        return self.status()

    # monitoring reads, no side effects

    def resource_snapshot(self):
        return self.pool.snapshot()

    def raw_queue_size(self):
        return self.raw_channel.qsize()

    def dispatch_queue_size(self):
        return self.dispatch_queue.qsize()

    def top_pending(self, n):
        return self.dispatch_queue.top(n)

    def status(self, top_n=3):
        return {
            "running": self.running,
            "resources": self.resource_snapshot(),
            "capacity": self.pool.capacity(),
            "queues": {
                "raw": self.raw_queue_size(),
                "dispatch": self.dispatch_queue_size(),
            },
            "top_pending": [e.summary() for e in self.top_pending(top_n)],
            "coordinator": dict(self.coordinator.stats),
            "dispatcher": self.dispatcher.get_stats(),
            "sources": {s.region.region_id: dict(s.stats) for s in self.sources},
        }

    def final_statistics(self):
        return {
            "generated": sum(s.stats["generated"] for s in self.sources),
            "scored": self.coordinator.stats["processed"],
            "allocated": self.dispatcher.stats["allocated"],
            "released": self.dispatcher.stats["released"],
            "raw_pending": self.raw_queue_size(),
            "dispatch_pending": self.dispatch_queue_size(),
            "resources": self.pool.summary(),
        }
