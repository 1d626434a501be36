import structlog

from .base import Service

log = structlog.get_logger()


class Reporter(Service):
    """Logs a `system_status` line every report interval. Read-only."""

    def __init__(self, config, monitor):
        super().__init__()
        self.config = config
        self.monitor = monitor
        self.reports = 0

    async def start(self):
        if self.stopping:
            return
        self.running = True
        while self.running:
            if await self.pause(self.config.report_interval):
                break
            self.report()
        self.running = False

    def report(self):
        try:
            status = self.monitor.status(top_n=self.config.top_pending_count)
        except Exception as e:
            log.error("status_report_failed", error=str(e))
            return None
        self.reports += 1
        log.info(
            "system_status",
            resources=status["resources"],
            raw_queue=status["queues"]["raw"],
            dispatch_queue=status["queues"]["dispatch"],
            dispatcher=status.get("dispatcher"),
            top_pending=[
                f"{e['event_id']} sev={e['severity']} {e['category']}"
                for e in status["top_pending"]
            ],
        )
        return status
