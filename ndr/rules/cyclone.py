from ..models import DisasterCategory
from .base import SeverityRule, Weights


class CycloneSeverityRule(SeverityRule):
    """
    Cyclone severity. Spread rate is sustained wind speed in km/h.

    Fast onset: population exposure and wind urgency carry most of the weight.
    """

    category = DisasterCategory.CYCLONE
    weights = Weights(population=0.35, infra=0.15, accessibility=0.10, urgency=0.25, cascading=0.15)

    spread_steps = ((60.0, 10), (90.0, 30), (120.0, 60), (150.0, 85))
    spread_ceiling = 95

    def bonus(self, factors, population_index, urgency_index):
        bonus = 0.0
        # very severe cyclonic storm
        if factors.spread_rate > 120.0:
            bonus += 10.0
        if population_index >= 70 and factors.accessibility >= 50:
            bonus += 10.0
        if factors.cascading_risk >= 70:
            bonus += 15.0
        return bonus
