"""
Resource request planning.

Each category has a step table per resource kind: the first
(min_severity, count) pair the event's severity reaches decides the count.
A small +/- jitter per kind models real-world variance; counts never go
below zero and zero-count kinds are left out of the request.
"""

from ..models import DisasterCategory

REQUEST_TABLE = {
    DisasterCategory.FLOOD: {
        "boats": ((70, 4), (40, 2), (0, 1)),
        "ndrf": ((70, 5), (40, 3), (0, 1)),
        "medical_teams": ((60, 3), (0, 1)),
    },
    DisasterCategory.CYCLONE: {
        "helicopters": ((70, 3), (40, 2), (0, 1)),
        "ndrf": ((50, 4), (0, 2)),
        "medical_teams": ((50, 3), (0, 1)),
        "trucks": ((30, 3), (0, 1)),
    },
    DisasterCategory.WILDFIRE: {
        "helicopters": ((80, 4), (50, 2), (0, 1)),
        "ndrf": ((70, 4), (0, 2)),
        "medical_teams": ((60, 2), (0, 1)),
    },
    DisasterCategory.EARTHQUAKE: {
        "ndrf": ((80, 6), (50, 4), (0, 2)),
        "medical_teams": ((50, 4), (0, 2)),
        "trucks": ((40, 4), (0, 2)),
    },
    DisasterCategory.LANDSLIDE: {
        "ndrf": ((60, 3), (0, 1)),
        "medical_teams": ((60, 2), (0, 1)),
        "trucks": ((40, 2), (0, 1)),
    },
    DisasterCategory.INDUSTRIAL: {
        "medical_teams": ((50, 3), (0, 1)),
        "ndrf": ((60, 2), (0, 1)),
    },
}


def step_count(severity, steps):
    for threshold, count in steps:
        if severity >= threshold:
            return count
    return 0


class RequestPlanner:
    def __init__(self, rng, jitter=1, table=None, kinds=None):
        self.rng = rng
        self.jitter = max(int(jitter), 0)
        self.table = table or REQUEST_TABLE
        # kinds the pool actually stocks; None means every kind in the table
        self.kinds = set(kinds) if kinds is not None else None

    def base_request(self, category, severity):
        """Deterministic part of the request, before jitter."""
        severity = max(0, severity)
        steps_by_kind = self.table.get(category, {})
        return {
            kind: step_count(severity, steps)
            for kind, steps in steps_by_kind.items()
            if self.kinds is None or kind in self.kinds
        }

    def plan(self, event):
        request = {}
        for kind, count in self.base_request(event.category, event.severity_score).items():
            if self.jitter:
                count = max(0, count + self.rng.int_range(-self.jitter, self.jitter))
            if count > 0:
                request[kind] = count
        return request
