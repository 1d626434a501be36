from ..models import DisasterCategory
from .base import SeverityRule, Weights


class LandslideSeverityRule(SeverityRule):
    """
    Landslide severity. Spread rate is debris movement in m/hour.

    Slow onset: infrastructure damage (blocked roads, buried buildings) and
    cascading risk (dammed rivers) outweigh population and urgency.
    """

    category = DisasterCategory.LANDSLIDE
    weights = Weights(population=0.20, infra=0.30, accessibility=0.15, urgency=0.10, cascading=0.25)

    spread_steps = ((0.5, 10), (1.0, 30), (2.0, 60), (3.0, 80))
    spread_ceiling = 95

    def bonus(self, factors, population_index, urgency_index):
        bonus = 0.0
        if population_index >= 60 and factors.accessibility >= 60:
            bonus += 10.0
        if factors.infra_damage >= 80:
            bonus += 5.0
        if factors.cascading_risk >= 70:
            bonus += 15.0
        return bonus
