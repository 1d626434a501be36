import asyncio


class Service:
    """Cooperative start/stop for the long-running pipeline loops.

    `stop()` flips `running` and sets an event; loops sleep through `pause()`
    so a stop wakes them immediately instead of after the full interval.
    """

    def __init__(self):
        self.running = False
        self._stop_event = asyncio.Event()

    @property
    def stopping(self):
        return self._stop_event.is_set()

    def stop(self):
        self.running = False
        self._stop_event.set()

    async def pause(self, seconds):
        """Sleep up to `seconds`. Returns True if woken by stop."""
        if self._stop_event.is_set():
            return True
        if seconds <= 0:
            await asyncio.sleep(0)
            return self._stop_event.is_set()
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
