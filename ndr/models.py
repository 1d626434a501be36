from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidInputError

DEFAULT_RESOURCE_KINDS = ("ndrf", "trucks", "boats", "helicopters", "medical_teams")


def utcnow():
    return datetime.now(timezone.utc)


class DisasterCategory(str, Enum):
    """Kind of incident. Selects the severity rule and the resource table."""

    FLOOD = "FLOOD"
    CYCLONE = "CYCLONE"
    WILDFIRE = "WILDFIRE"
    LANDSLIDE = "LANDSLIDE"
    EARTHQUAKE = "EARTHQUAKE"
    INDUSTRIAL = "INDUSTRIAL"


class TerrainType(str, Enum):
    PLAIN = "PLAIN"
    HILLY = "HILLY"
    COASTAL = "COASTAL"
    FOREST = "FOREST"
    MOUNTAIN = "MOUNTAIN"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class DispatchState(str, Enum):
    """Where an event sits in the dispatcher's allocate/release cycle."""

    SCORED = "SCORED"
    ALLOCATION_FAILED = "ALLOCATION_FAILED"
    REQUEUED = "REQUEUED"
    ALLOCATED = "ALLOCATED"
    RESPONDING = "RESPONDING"
    RELEASED = "RELEASED"


class SeverityFactors(BaseModel):
    """The five severity inputs of an event (P, I, A, T, C).

    Frozen: once an event exists its inputs never change, so the same rule
    applied twice always sees the same values.
    """

    model_config = ConfigDict(frozen=True)

    population_affected: int = Field(ge=0)
    infra_damage: int = Field(ge=0, le=100)
    accessibility: int = Field(ge=0, le=100)
    spread_rate: float = Field(ge=0.0)  # unit depends on category
    cascading_risk: int = Field(ge=0, le=100)


class DisasterEvent(BaseModel):
    """One simulated incident travelling source -> coordinator -> dispatcher.

    `severity_score` stays None until the coordinator scores the event and is
    written exactly once through `assign_score`.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    region_id: str
    region_name: str = ""
    category: DisasterCategory
    factors: SeverityFactors
    created_at: datetime = Field(default_factory=utcnow)
    severity_score: Optional[int] = Field(default=None, ge=0, le=100)

    @property
    def is_scored(self):
        return self.severity_score is not None

    def assign_score(self, score: int):
        if self.severity_score is not None:
            raise InvalidInputError(f"event {self.id} already scored")
        if not isinstance(score, int) or isinstance(score, bool):
            raise InvalidInputError(f"severity score must be an int, got {score!r}")
        if not 0 <= score <= 100:
            raise InvalidInputError(f"severity score out of range: {score}")
        self.severity_score = score

    def summary(self):
        return {
            "event_id": self.id,
            "region": self.region_id,
            "category": self.category.value,
            "severity": self.severity_score,
            "created_at": self.created_at.isoformat(),
        }


class RegionProfile(BaseModel):
    """Static description of a region. Read by its event source, never mutated."""

    model_config = ConfigDict(frozen=True)

    region_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    population: int = Field(ge=0)
    area_sq_km: float = Field(gt=0)
    terrain: TerrainType = TerrainType.PLAIN
    baseline_risk: RiskLevel = RiskLevel.MEDIUM
    event_weight: float = Field(default=1.0, ge=0)
    has_major_dam: bool = False


class SimulationStatus(BaseModel):
    """Status info returned by /status endpoint."""

    uptime_seconds: float
    running: bool
    resources: Dict[str, int]
    capacity: Dict[str, int]
    queues: Dict[str, int]
    top_pending: List[Dict[str, Any]]
    coordinator: Dict[str, Any]
    dispatcher: Dict[str, Any]
    sources: Dict[str, Dict[str, Any]]


class AllocationRecord(BaseModel):
    """Resources held by one event while its simulated response runs."""

    event_id: str
    category: DisasterCategory
    severity: int
    amounts: Dict[str, int]
    allocated_at: datetime = Field(default_factory=utcnow)
    response_seconds: float
