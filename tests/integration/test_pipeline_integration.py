import asyncio

from ndr.config import Config
from ndr.engine import DispatchQueue, ResourcePool, SeverityEngine
from ndr.models import DisasterCategory, DisasterEvent, RegionProfile, RiskLevel, SeverityFactors, TerrainType
from ndr.randomness import SimulationRandom
from ndr.rules import default_rules
from ndr.services import Coordinator, Dispatcher
from ndr.simulation import Simulation

FAST = {
    "BASE_EVENT_INTERVAL": "0.02",
    "MIN_EVENT_INTERVAL": "0.01",
    "COORDINATOR_POLL_INTERVAL": "0.01",
    "DISPATCH_POLL_INTERVAL": "0.01",
    "ALLOCATION_RETRY_DELAY": "0.01",
    "UNSCORED_RETRY_DELAY": "0.01",
    "RESPONSE_SECONDS_PER_SEVERITY": "0.001",
    "MAX_RESPONSE_SECONDS": "0.05",
    "RESPONSE_JITTER_SECONDS": "0.01",
    "REPORT_INTERVAL": "0.5",
    "RESOURCE_CAPACITIES": "ndrf:10,trucks:10,boats:6,helicopters:4,medical_teams:8",
}


def _build_config(monkeypatch):
    monkeypatch.delenv("REGIONS_FILE", raising=False)
    for key, value in FAST.items():
        monkeypatch.setenv(key, value)
    return Config()


def _regions():
    return [
        RegionProfile(
            region_id="CO", name="Coastland", population=2_000_000, area_sq_km=5000.0,
            terrain=TerrainType.COASTAL, baseline_risk=RiskLevel.HIGH, event_weight=1.5,
        ),
        RegionProfile(
            region_id="HI", name="Highland", population=500_000, area_sq_km=8000.0,
            terrain=TerrainType.MOUNTAIN, baseline_risk=RiskLevel.MEDIUM, has_major_dam=True,
        ),
    ]


def _raw_event(i):
    return DisasterEvent(
        id=f"RAW-{i}",
        region_id="CO",
        category=DisasterCategory.FLOOD,
        factors=SeverityFactors(
            population_affected=1000 * i,
            infra_damage=i,
            accessibility=i,
            spread_rate=0.3 * i,
            cascading_risk=i,
        ),
    )


def test_stop_with_unread_events_never_dispatches_unscored(monkeypatch):
    async def scenario():
        config = _build_config(monkeypatch)
        raw = asyncio.Queue()
        dispatch = DispatchQueue()
        pool = ResourcePool(config.resource_capacities)
        coordinator = Coordinator(config, raw, dispatch, SeverityEngine(default_rules()))
        dispatcher = Dispatcher(config, dispatch, pool, SimulationRandom(1))

        for i in range(20):
            raw.put_nowait(_raw_event(i))

        tasks = [
            asyncio.create_task(coordinator.start()),
            asyncio.create_task(dispatcher.start()),
        ]
        await asyncio.sleep(0.02)
        coordinator.stop()
        dispatcher.stop()
        await asyncio.wait_for(asyncio.gather(*tasks), timeout=2.0)
        return raw, dispatch, pool, coordinator, dispatcher

    raw, dispatch, pool, coordinator, dispatcher = asyncio.run(scenario())

    assert dispatcher.stats["unscored_requeued"] == 0
    assert dispatcher.stats["errors"] == 0
    assert coordinator.stats["errors"] == 0
    assert coordinator.stats["processed"] + raw.qsize() == 20
    assert all(e.is_scored for e in dispatch.top(dispatch.qsize()))
    assert pool.snapshot() == pool.capacity()


def test_short_run_returns_every_resource(monkeypatch):
    async def scenario():
        config = _build_config(monkeypatch)
        simulation = Simulation(config, regions=_regions(), rng=SimulationRandom(2026))
        status = await simulation.run(duration=0.8)
        return simulation, status

    simulation, status = asyncio.run(scenario())
    stats = simulation.final_statistics()

    assert status["running"] is False
    assert status["resources"] == status["capacity"]
    assert set(status["sources"]) == {"CO", "HI"}
    assert stats["generated"] >= 2
    assert stats["scored"] + stats["raw_pending"] == stats["generated"]
    assert stats["released"] == stats["allocated"]
    assert status["dispatcher"]["responses_in_flight"] == 0
    assert status["coordinator"]["errors"] == 0
    assert status["dispatcher"]["unscored_requeued"] == 0
    assert simulation.pool.in_use() == {kind: 0 for kind in simulation.pool.kinds}


def test_shutdown_event_ends_open_ended_run(monkeypatch):
    async def scenario():
        config = _build_config(monkeypatch)
        simulation = Simulation(config, regions=_regions(), rng=SimulationRandom(1))
        shutdown = asyncio.Event()
        asyncio.get_running_loop().call_later(0.2, shutdown.set)
        await asyncio.wait_for(simulation.run(duration=None, shutdown=shutdown), timeout=3.0)
        return simulation

    simulation = asyncio.run(scenario())

    assert simulation.running is False
    assert all(not s.running for s in simulation.services)


def test_same_seed_builds_identical_sources(monkeypatch):
    config = _build_config(monkeypatch)
    a = Simulation(config, regions=_regions(), rng=SimulationRandom(77))
    b = Simulation(config, regions=_regions(), rng=SimulationRandom(77))

    for sa, sb in zip(a.sources, b.sources):
        for _ in range(5):
            ea = sa.generate_event().model_dump(exclude={"created_at"})
            eb = sb.generate_event().model_dump(exclude={"created_at"})
            assert ea == eb
