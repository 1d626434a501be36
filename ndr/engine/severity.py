"""
Severity engine: category rule registry plus score aggregation.

The registry is copy-on-write. Writers build a new mapping under a lock and
swap it in with a single attribute assignment; `score()` grabs the current
mapping once, so a concurrent register/remove is seen either entirely or not
at all.
"""

import threading

import structlog

from ..errors import InvalidInputError
from ..rules import clamp_percent, round_half_up

log = structlog.get_logger()


class SeverityEngine:
    def __init__(self, rules=None, name="national-engine"):
        self.name = name
        self._lock = threading.Lock()
        self._rules = {}  # category -> tuple of rules
        for rule in rules or []:
            self.register_rule(rule)

    def register_rule(self, rule):
        if rule is None or getattr(rule, "category", None) is None:
            raise InvalidInputError("rule must declare a category")
        with self._lock:
            updated = dict(self._rules)
            updated[rule.category] = self._rules.get(rule.category, ()) + (rule,)
            self._rules = updated
        log.debug("severity_rule_registered", rule=rule.name, category=rule.category.value)

    def remove_rule(self, rule):
        """Remove one rule instance. Returns False if it was not registered."""
        with self._lock:
            current = self._rules.get(rule.category, ())
            if rule not in current:
                return False
            remaining = tuple(r for r in current if r is not rule)
            updated = dict(self._rules)
            if remaining:
                updated[rule.category] = remaining
            else:
                del updated[rule.category]
            self._rules = updated
        log.debug("severity_rule_removed", rule=rule.name, category=rule.category.value)
        return True

    def rules_for(self, category):
        return list(self._rules.get(category, ()))

    def registered(self):
        """{category value: [rule names]} for reporting."""
        snapshot = self._rules
        return {
            category.value: [rule.name for rule in rules]
            for category, rules in snapshot.items()
        }

    def score(self, event):
        """Mean of every rule registered for the event's category, 0-100.

        Does not write the score into the event; that is the coordinator's job.
        """
        if event is None:
            raise InvalidInputError("event cannot be None")

        rules = self._rules.get(event.category, ())
        if not rules:
            log.warning("no_severity_rule", category=event.category.value, event_id=event.id)
            return 0

        total = sum(clamp_percent(rule.calculate(event)) for rule in rules)
        return clamp_percent(round_half_up(total / len(rules)))

    def __repr__(self):
        return f"SeverityEngine(name={self.name!r}, categories={len(self._rules)})"
