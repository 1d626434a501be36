from ..models import DisasterCategory
from .base import SeverityRule, Weights


class EarthquakeSeverityRule(SeverityRule):
    """
    Earthquake severity. Spread rate is the aftershock probability (0-1).

    The damage is done at onset, so urgency barely counts; structural
    damage and the people under it do.
    """

    category = DisasterCategory.EARTHQUAKE
    weights = Weights(population=0.35, infra=0.30, accessibility=0.15, urgency=0.05, cascading=0.15)

    spread_steps = ((0.2, 10), (0.5, 40), (0.8, 70))
    spread_ceiling = 90

    def bonus(self, factors, population_index, urgency_index):
        bonus = 0.0
        # widespread collapse
        if factors.infra_damage >= 80:
            bonus += 10.0
        if population_index >= 60 and factors.accessibility >= 50:
            bonus += 10.0
        if factors.cascading_risk >= 70:
            bonus += 10.0
        return bonus
