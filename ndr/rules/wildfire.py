from ..models import DisasterCategory
from .base import SeverityRule, Weights


class WildfireSeverityRule(SeverityRule):
    """
    Wildfire severity. Spread rate is burned area in ha/hour.

    Exposure to fire and smoke starts at smaller populations than for floods,
    so the population buckets are tighter. Cascading risk stands for air
    quality and power-line ignition.
    """

    category = DisasterCategory.WILDFIRE
    weights = Weights(population=0.30, infra=0.15, accessibility=0.10, urgency=0.30, cascading=0.15)

    population_steps = ((50, 10), (500, 30), (5000, 60), (20000, 80))
    population_ceiling = 95

    spread_steps = ((1.0, 10), (5.0, 30), (20.0, 60), (50.0, 85))
    spread_ceiling = 95

    def bonus(self, factors, population_index, urgency_index):
        bonus = 0.0
        if factors.spread_rate > 50.0:
            bonus += 20.0
        elif factors.spread_rate > 20.0:
            bonus += 10.0
        # evacuation through poor terrain
        if population_index >= 60 and factors.accessibility >= 50:
            bonus += 10.0
        if factors.cascading_risk >= 70:
            bonus += 15.0
        return bonus
