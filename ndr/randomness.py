"""
Explicit randomness source for the simulation.

Every component that needs randomness receives a SimulationRandom at
construction. Building the root source with a seed makes a whole run
reproducible; children created with `spawn()` draw their seed from the
parent so each event source gets an independent but repeatable stream.
"""

import random


class SimulationRandom:
    def __init__(self, seed=None):
        self.seed = seed
        self._rng = random.Random(seed)

    @property
    def deterministic(self):
        return self.seed is not None

    def spawn(self):
        """Child source seeded from this one."""
        return SimulationRandom(self._rng.getrandbits(64))

    def int_range(self, low, high):
        """Uniform integer in [low, high], both inclusive."""
        return self._rng.randint(low, high)

    def uniform(self, low, high):
        return self._rng.uniform(low, high)

    def chance(self, probability):
        return self._rng.random() < probability

    def jitter(self, base, variance, floor=0.0):
        """base +/- variance, never below floor."""
        return max(floor, base + self._rng.uniform(-variance, variance))

    def weighted_pick(self, weights):
        """Pick a key from a {key: weight} mapping proportionally to its weight."""
        if not weights:
            raise ValueError("weighted_pick needs at least one option")
        keys = list(weights)
        return self._rng.choices(keys, weights=[weights[k] for k in keys], k=1)[0]

    def suffix(self):
        """Eight hex chars, used for event ids."""
        return f"{self._rng.getrandbits(32):08x}"

    def __repr__(self):
        return f"SimulationRandom(seed={self.seed!r})"
