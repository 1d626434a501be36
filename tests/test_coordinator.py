import asyncio

from ndr.config import Config
from ndr.engine import DispatchQueue, SeverityEngine
from ndr.models import DisasterCategory, DisasterEvent, SeverityFactors
from ndr.rules import FloodSeverityRule, default_rules
from ndr.services import Coordinator


class FakeEngine:
    name = "fake-engine"

    def __init__(self, scores=None, fail_on=()):
        self.scores = scores or {}
        self.fail_on = set(fail_on)
        self.calls = []

    def score(self, event):
        self.calls.append(event.id)
        if event.id in self.fail_on:
            raise RuntimeError("rule blew up")
        return self.scores.get(event.id, 50)


def _event(event_id, population=5000):
    return DisasterEvent(
        id=event_id,
        region_id="TS",
        category=DisasterCategory.FLOOD,
        factors=SeverityFactors(
            population_affected=population,
            infra_damage=50,
            accessibility=50,
            spread_rate=3.0,
            cascading_risk=50,
        ),
    )


def _build_coordinator(monkeypatch, engine=None):
    monkeypatch.setenv("COORDINATOR_POLL_INTERVAL", "0.01")
    config = Config()
    raw = asyncio.Queue()
    dispatch = DispatchQueue()
    return Coordinator(config, raw, dispatch, engine or SeverityEngine(default_rules()))


def test_process_scores_once_and_enqueues(monkeypatch):
    coordinator = _build_coordinator(monkeypatch)
    event = _event("TS-1")

    coordinator.process(event)

    assert event.severity_score == FloodSeverityRule().calculate(event)
    assert coordinator.dispatch_queue.qsize() == 1
    assert coordinator.dispatch_queue.get_event_nowait() is event
    assert coordinator.stats["processed"] == 1
    assert coordinator.stats["last_event_id"] == "TS-1"


def test_engine_failure_is_counted_and_event_dropped(monkeypatch):
    coordinator = _build_coordinator(monkeypatch, engine=FakeEngine(fail_on={"TS-bad"}))

    coordinator.process(_event("TS-bad"))
    coordinator.process(_event("TS-good"))

    assert coordinator.stats["errors"] == 1
    assert coordinator.stats["processed"] == 1
    assert coordinator.dispatch_queue.qsize() == 1
    assert coordinator.dispatch_queue.get_event_nowait().id == "TS-good"


def test_already_scored_event_is_not_rescored(monkeypatch):
    coordinator = _build_coordinator(monkeypatch, engine=FakeEngine(scores={"TS-1": 90}))
    event = _event("TS-1")
    event.assign_score(12)

    coordinator.process(event)

    assert event.severity_score == 12
    assert coordinator.stats["errors"] == 1
    assert coordinator.dispatch_queue.qsize() == 0


def test_start_drains_raw_channel_in_order(monkeypatch):
    async def scenario():
        engine = FakeEngine(scores={"TS-1": 10, "TS-2": 90, "TS-3": 40})
        coordinator = _build_coordinator(monkeypatch, engine=engine)
        for i in (1, 2, 3):
            coordinator.raw_channel.put_nowait(_event(f"TS-{i}"))

        task = asyncio.create_task(coordinator.start())
        for _ in range(100):
            if coordinator.dispatch_queue.qsize() == 3:
                break
            await asyncio.sleep(0.01)
        coordinator.stop()
        await asyncio.wait_for(task, timeout=1.0)
        return coordinator, engine

    coordinator, engine = asyncio.run(scenario())

    assert engine.calls == ["TS-1", "TS-2", "TS-3"]
    assert coordinator.stats["processed"] == 3
    assert [e.id for e in coordinator.dispatch_queue.top(3)] == ["TS-2", "TS-3", "TS-1"]


def test_stop_leaves_unread_events_in_raw_channel(monkeypatch):
    async def scenario():
        coordinator = _build_coordinator(monkeypatch)
        for i in range(5):
            coordinator.raw_channel.put_nowait(_event(f"TS-{i}"))
        coordinator.stop()
        await asyncio.wait_for(coordinator.start(), timeout=1.0)
        return coordinator

    coordinator = asyncio.run(scenario())

    assert coordinator.raw_channel.qsize() == 5
    assert coordinator.dispatch_queue.qsize() == 0
    assert coordinator.stats["processed"] == 0


def test_idle_coordinator_stops_within_poll_interval(monkeypatch):
    async def scenario():
        coordinator = _build_coordinator(monkeypatch)
        task = asyncio.create_task(coordinator.start())
        await asyncio.sleep(0.05)
        coordinator.stop()
        await asyncio.wait_for(task, timeout=0.5)
        return coordinator

    assert asyncio.run(scenario()).running is False
