"""
National resource pool.

One lock guards every count, because a request can span several kinds and has
to succeed or fail as a whole. `allocate` checks the full request before
touching anything; `release` shares the same lock so it can never interleave
with a half-checked allocation.
"""

import threading

import structlog

from ..errors import InvalidResourceRequest

log = structlog.get_logger()


class ResourcePool:
    def __init__(self, capacities):
        for kind, amount in capacities.items():
            if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
                raise InvalidResourceRequest(f"capacity for {kind} must be a non-negative int")
        self._lock = threading.Lock()
        self._capacity = dict(capacities)
        self._available = dict(capacities)
        self._allocated_total = {kind: 0 for kind in capacities}
        self._released_total = {kind: 0 for kind in capacities}
        self.stats = {
            "allocations": 0,
            "allocation_failures": 0,
            "releases": 0,
            "over_release_clamped": 0,
        }

    @property
    def kinds(self):
        return list(self._capacity)

    def _validate(self, request):
        for kind, amount in request.items():
            if kind not in self._capacity:
                raise InvalidResourceRequest(f"unknown resource kind: {kind!r}")
            if not isinstance(amount, int) or isinstance(amount, bool):
                raise InvalidResourceRequest(f"amount for {kind} must be an int, got {amount!r}")
            if amount < 0:
                raise InvalidResourceRequest(f"amount for {kind} must be >= 0, got {amount}")

    def allocate(self, request):
        """All-or-nothing allocation.

        Returns True when every kind was decremented, False when any kind is
        short (nothing is decremented). Raises InvalidResourceRequest for
        unknown kinds or bad amounts, again without mutating anything.
        """
        self._validate(request)
        with self._lock:
            for kind, amount in request.items():
                if self._available[kind] < amount:
                    self.stats["allocation_failures"] += 1
                    return False
            for kind, amount in request.items():
                self._available[kind] -= amount
                self._allocated_total[kind] += amount
            self.stats["allocations"] += 1
        return True

    def release(self, amounts):
        """Give resources back. Never raises.

        Unknown kinds and negative amounts are skipped; a count is never
        pushed past its capacity.
        """
        with self._lock:
            for kind, amount in amounts.items():
                if kind not in self._capacity:
                    log.warning("release_unknown_kind", kind=kind, amount=amount)
                    continue
                if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
                    log.warning("release_invalid_amount", kind=kind, amount=amount)
                    continue
                headroom = self._capacity[kind] - self._available[kind]
                if amount > headroom:
                    self.stats["over_release_clamped"] += 1
                    log.warning(
                        "over_release_clamped",
                        kind=kind,
                        amount=amount,
                        headroom=headroom,
                    )
                    amount = headroom
                self._available[kind] += amount
                self._released_total[kind] += amount
            self.stats["releases"] += 1

    def snapshot(self):
        """Point-in-time copy of every available count."""
        with self._lock:
            return dict(self._available)

    def capacity(self):
        return dict(self._capacity)

    def in_use(self):
        """Allocated-but-unreleased amounts, from the allocation history."""
        with self._lock:
            return {
                kind: self._allocated_total[kind] - self._released_total[kind]
                for kind in self._capacity
            }

    def summary(self):
        available = self.snapshot()
        parts = ", ".join(
            f"{kind}={available[kind]}/{self._capacity[kind]}" for kind in self._capacity
        )
        return f"Resources -> {parts}"
