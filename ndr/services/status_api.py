from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException

from ..config import Config
from ..models import SimulationStatus

MAX_TOP_LIMIT = 100


class StatusService:
    """Read-only HTTP view of a running simulation."""

    def __init__(self, config: Config, simulation):
        self.config = config
        self.simulation = simulation
        self.start_time = datetime.now(timezone.utc)
        self.app = self._build_app()

    def _build_app(self):
        app = FastAPI(title="NDR Dispatch Simulator")

        @app.get("/")
        async def root():
            return {"service": "ndr-simulator", "regions": len(self.simulation.regions)}

        @app.get("/health")
        async def health():
            return {"status": "ok"}

        @app.get("/status")
        async def get_status():
            status = self.simulation.status(top_n=self.config.top_pending_count)
            uptime = (datetime.now(timezone.utc) - self.start_time).total_seconds()
            return SimulationStatus(uptime_seconds=uptime, **status).model_dump(mode="json")

        @app.get("/resources")
        async def get_resources():
            return {
                "available": self.simulation.resource_snapshot(),
                "capacity": self.simulation.pool.capacity(),
                "in_use": self.simulation.pool.in_use(),
            }

        @app.get("/queues")
        async def get_queues():
            return {
                "raw": self.simulation.raw_queue_size(),
                "dispatch": self.simulation.dispatch_queue_size(),
            }

        @app.get("/queues/dispatch/top")
        async def get_top_pending(limit: int = 3):
            """Events that would be dispatched next, highest priority first."""
            if limit < 1 or limit > MAX_TOP_LIMIT:
                raise HTTPException(
                    status_code=400,
                    detail=f"limit must be between 1 and {MAX_TOP_LIMIT}",
                )
            events = self.simulation.top_pending(limit)
            return {"limit": limit, "events": [e.summary() for e in events]}

        @app.get("/rules")
        async def get_rules():
            return self.simulation.engine.registered()

        return app
