"""
Per-region synthetic event generator.

Every cycle waits a jittered interval (base +/- base/2, floored), builds one
DisasterEvent shaped by the region profile and publishes it on the raw
channel. Publishing is a single put_nowait on an unbounded queue, so a stop
never cuts an event in half.
"""

import structlog

from ..models import (
    DisasterCategory,
    DisasterEvent,
    RiskLevel,
    SeverityFactors,
    TerrainType,
)
from ..rules import clamp_percent
from .base import Service

log = structlog.get_logger()

TERRAIN_CATEGORY_WEIGHTS = {
    TerrainType.COASTAL: {DisasterCategory.CYCLONE: 0.5, DisasterCategory.FLOOD: 0.5},
    TerrainType.FOREST: {DisasterCategory.WILDFIRE: 0.7, DisasterCategory.FLOOD: 0.3},
    TerrainType.HILLY: {
        DisasterCategory.LANDSLIDE: 0.6,
        DisasterCategory.FLOOD: 0.3,
        DisasterCategory.EARTHQUAKE: 0.1,
    },
    TerrainType.MOUNTAIN: {
        DisasterCategory.LANDSLIDE: 0.5,
        DisasterCategory.FLOOD: 0.3,
        DisasterCategory.EARTHQUAKE: 0.2,
    },
    TerrainType.PLAIN: {
        DisasterCategory.FLOOD: 0.5,
        DisasterCategory.INDUSTRIAL: 0.3,
        DisasterCategory.WILDFIRE: 0.2,
    },
}

# higher = harder to reach
TERRAIN_ACCESS_BASE = {
    TerrainType.PLAIN: 10,
    TerrainType.COASTAL: 20,
    TerrainType.FOREST: 40,
    TerrainType.HILLY: 60,
    TerrainType.MOUNTAIN: 80,
}

SPREAD_RANGES = {
    DisasterCategory.WILDFIRE: (0.5, 60.0),  # ha/hour
    DisasterCategory.FLOOD: (0.1, 6.0),  # m/hour
    DisasterCategory.CYCLONE: (30.0, 150.0),  # wind km/h
    DisasterCategory.EARTHQUAKE: (0.0, 1.0),  # aftershock probability
    DisasterCategory.LANDSLIDE: (0.1, 3.0),  # debris m/hour
    DisasterCategory.INDUSTRIAL: (0.0, 5.0),  # release rate
}

INFRA_RANGES = {
    DisasterCategory.CYCLONE: (20, 90),
    DisasterCategory.EARTHQUAKE: (30, 100),
}
DEFAULT_INFRA_RANGE = (0, 60)

POPULATION_FRACTION = (0.0001, 0.02)
HIGH_RISK_MULTIPLIER = 3.0
MAJOR_DAM_CASCADE = 30


class EventSource(Service):
    def __init__(self, config, region, channel, rng):
        super().__init__()
        self.config = config
        self.region = region
        self.channel = channel
        self.rng = rng
        self.stats = {"generated": 0, "errors": 0, "last_event_id": None}

    @property
    def base_interval(self):
        """Configured interval scaled down by the region's event weight."""
        weight = self.region.event_weight
        if weight <= 0:
            return self.config.max_event_interval
        return min(self.config.base_event_interval / weight, self.config.max_event_interval)

    def next_interval(self):
        base = self.base_interval
        return self.rng.jitter(base, base / 2, floor=self.config.min_event_interval)

    async def start(self):
        if self.stopping:
            return
        self.running = True
        log.info(
            "event_source_started",
            region=self.region.region_id,
            base_interval=round(self.base_interval, 3),
        )

        while self.running:
            if await self.pause(self.next_interval()):
                break
            try:
                event = self.generate_event()
                self.channel.put_nowait(event)
                self.stats["generated"] += 1
                self.stats["last_event_id"] = event.id
                log.debug(
                    "event_generated",
                    event_id=event.id,
                    region=self.region.region_id,
                    category=event.category.value,
                )
            except Exception as e:
                self.stats["errors"] += 1
                log.error("event_source_error", region=self.region.region_id, error=str(e))

        self.running = False
        log.info(
            "event_source_stopped",
            region=self.region.region_id,
            generated=self.stats["generated"],
        )

    def pick_category(self):
        weights = TERRAIN_CATEGORY_WEIGHTS.get(
            self.region.terrain, TERRAIN_CATEGORY_WEIGHTS[TerrainType.PLAIN]
        )
        return self.rng.weighted_pick(weights)

    def generate_event(self):
        category = self.pick_category()
        region = self.region

        fraction = self.rng.uniform(*POPULATION_FRACTION)
        if region.baseline_risk == RiskLevel.HIGH:
            fraction *= HIGH_RISK_MULTIPLIER
        population = min(region.population, max(0, int(region.population * fraction)))

        infra_low, infra_high = INFRA_RANGES.get(category, DEFAULT_INFRA_RANGE)
        infra = self.rng.int_range(infra_low, infra_high)

        accessibility = clamp_percent(
            TERRAIN_ACCESS_BASE[region.terrain] + self.rng.int_range(-10, 30)
        )

        spread = self.rng.uniform(*SPREAD_RANGES[category])

        cascading = clamp_percent(
            (MAJOR_DAM_CASCADE if region.has_major_dam else 0)
            + infra // 2
            + self.rng.int_range(0, 20)
        )

        return DisasterEvent(
            id=f"{region.region_id}-{self.rng.suffix()}",
            region_id=region.region_id,
            region_name=region.name,
            category=category,
            factors=SeverityFactors(
                population_affected=population,
                infra_damage=infra,
                accessibility=accessibility,
                spread_rate=spread,
                cascading_risk=cascading,
            ),
        )
