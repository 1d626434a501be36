"""
Region profile loading.

Profiles come either from a JSON file (a list of RegionProfile objects) or
from the built-in set of six Indian states.
"""

import json

import structlog

from .errors import InvalidInputError
from .models import RegionProfile, RiskLevel, TerrainType

log = structlog.get_logger()


def default_regions():
    return [
        RegionProfile(
            region_id="KL", name="Kerala", population=35_000_000, area_sq_km=38852.0,
            terrain=TerrainType.COASTAL, baseline_risk=RiskLevel.HIGH,
            event_weight=1.5, has_major_dam=True,
        ),
        RegionProfile(
            region_id="MH", name="Maharashtra", population=125_000_000, area_sq_km=307713.0,
            terrain=TerrainType.PLAIN, baseline_risk=RiskLevel.MEDIUM,
            event_weight=1.2, has_major_dam=True,
        ),
        RegionProfile(
            region_id="UK", name="Uttarakhand", population=11_000_000, area_sq_km=53483.0,
            terrain=TerrainType.MOUNTAIN, baseline_risk=RiskLevel.HIGH,
            event_weight=1.3, has_major_dam=True,
        ),
        RegionProfile(
            region_id="RJ", name="Rajasthan", population=80_000_000, area_sq_km=342239.0,
            terrain=TerrainType.PLAIN, baseline_risk=RiskLevel.LOW,
            event_weight=0.7, has_major_dam=False,
        ),
        RegionProfile(
            region_id="AS", name="Assam", population=32_000_000, area_sq_km=78438.0,
            terrain=TerrainType.PLAIN, baseline_risk=RiskLevel.HIGH,
            event_weight=1.4, has_major_dam=False,
        ),
        RegionProfile(
            region_id="OD", name="Odisha", population=45_000_000, area_sq_km=155707.0,
            terrain=TerrainType.COASTAL, baseline_risk=RiskLevel.HIGH,
            event_weight=1.6, has_major_dam=False,
        ),
    ]


def check_unique(regions):
    seen = set()
    for region in regions:
        if region.region_id in seen:
            raise InvalidInputError(f"duplicate region id: {region.region_id}")
        seen.add(region.region_id)
    return regions


def load_regions(path):
    with open(path) as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise InvalidInputError(f"{path}: expected a JSON list of region profiles")
    regions = check_unique([RegionProfile.model_validate(item) for item in raw])
    log.info("regions_loaded", path=path, count=len(regions))
    return regions


def regions_for(config):
    """Regions named by the config, falling back to the built-in set."""
    if config.regions_file:
        return load_regions(config.regions_file)
    return default_regions()
