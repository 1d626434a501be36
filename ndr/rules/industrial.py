from ..models import DisasterCategory
from .base import SeverityRule, Weights


class IndustrialSeverityRule(SeverityRule):
    """
    Industrial accident severity. Spread rate is the hazardous release rate.
    """

    category = DisasterCategory.INDUSTRIAL
    weights = Weights(population=0.30, infra=0.15, accessibility=0.10, urgency=0.20, cascading=0.25)

    spread_steps = ((0.5, 10), (1.5, 30), (3.0, 60))
    spread_ceiling = 90

    def bonus(self, factors, population_index, urgency_index):
        bonus = 0.0
        # toxic plume over a populated area
        if factors.spread_rate > 4.0 and population_index >= 60:
            bonus += 10.0
        if factors.cascading_risk >= 70:
            bonus += 15.0
        return bonus
