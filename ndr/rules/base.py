"""
Shared shape of a category severity rule.

Every rule turns the five inputs of an event into a 0-100 score the same way:
  - population affected -> saturating step index (0 when nobody is affected)
  - spread rate         -> category-specific urgency index
  - weighted sum of the population index, infrastructure damage,
    accessibility difficulty, urgency index and cascading risk
  - fixed bonuses for compound-risk situations, added before clamping

Subclasses only tune the weights, the step tables and the bonuses. Rules
hold no state, so a single instance can score from many tasks at once.
"""

import math
from collections import namedtuple

from ..errors import InvalidInputError

Weights = namedtuple("Weights", "population infra accessibility urgency cascading")


def clamp_percent(value):
    return max(0, min(100, value))


def round_half_up(value):
    # weighted sums carry float noise (98.49999...); trim it before flooring
    return int(math.floor(round(value, 6) + 0.5))


def step_index(value, steps, ceiling):
    """Index of the first (upper_bound, index) step that value does not exceed."""
    for upper, index in steps:
        if value <= upper:
            return index
    return ceiling


class SeverityRule:
    """Base class for category rules. `calculate(event)` never mutates the event."""

    category = None
    weights = None

    # (inclusive upper bound, index)
    population_steps = ((100, 10), (1000, 30), (10000, 60), (50000, 80))
    population_ceiling = 95

    spread_steps = ()
    spread_ceiling = 90

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.weights is not None and not math.isclose(sum(cls.weights), 1.0, abs_tol=1e-6):
            raise TypeError(f"{cls.__name__} weights must sum to 1.0, got {sum(cls.weights)}")

    @property
    def name(self):
        return type(self).__name__

    def population_index(self, population):
        if population <= 0:
            return 0
        return step_index(population, self.population_steps, self.population_ceiling)

    def urgency_index(self, spread_rate):
        return step_index(spread_rate, self.spread_steps, self.spread_ceiling)

    def bonus(self, factors, population_index, urgency_index):
        """Additive bonus for compound risk. Zero unless a subclass says otherwise."""
        return 0.0

    def calculate(self, event):
        if event is None:
            raise InvalidInputError(f"{self.name}: event cannot be None")

        factors = event.factors
        p_index = self.population_index(factors.population_affected)
        t_index = self.urgency_index(factors.spread_rate)

        w = self.weights
        raw = (
            w.population * p_index
            + w.infra * factors.infra_damage
            + w.accessibility * factors.accessibility
            + w.urgency * t_index
            + w.cascading * factors.cascading_risk
        )
        return clamp_percent(round_half_up(raw + self.bonus(factors, p_index, t_index)))

    def __repr__(self):
        return f"{self.name}(category={self.category.value if self.category else None})"
