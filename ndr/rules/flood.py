from ..models import DisasterCategory
from .base import SeverityRule, Weights


class FloodSeverityRule(SeverityRule):
    """
    Flood severity. Spread rate is water rise in m/hour.

    Bonuses:
      - rise faster than 5 m/h                   +10
      - large population cut off by poor access  +10
      - cascading risk >= 70 (dam threat)        +15
    """

    category = DisasterCategory.FLOOD
    weights = Weights(population=0.40, infra=0.20, accessibility=0.15, urgency=0.15, cascading=0.10)

    spread_steps = ((0.5, 10), (2.0, 30), (5.0, 60))
    spread_ceiling = 90

    def bonus(self, factors, population_index, urgency_index):
        bonus = 0.0
        if factors.spread_rate > 5.0:
            bonus += 10.0
        if population_index >= 70 and factors.accessibility >= 50:
            bonus += 10.0
        if factors.cascading_risk >= 70:
            bonus += 15.0
        return bonus
