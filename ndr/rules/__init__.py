from .base import SeverityRule, Weights, clamp_percent, round_half_up, step_index
from .cyclone import CycloneSeverityRule
from .earthquake import EarthquakeSeverityRule
from .flood import FloodSeverityRule
from .industrial import IndustrialSeverityRule
from .landslide import LandslideSeverityRule
from .wildfire import WildfireSeverityRule


def default_rules():
    """One fresh instance of every built-in category rule."""
    return [
        FloodSeverityRule(),
        CycloneSeverityRule(),
        WildfireSeverityRule(),
        LandslideSeverityRule(),
        EarthquakeSeverityRule(),
        IndustrialSeverityRule(),
    ]


__all__ = [
    "SeverityRule",
    "Weights",
    "clamp_percent",
    "round_half_up",
    "step_index",
    "FloodSeverityRule",
    "CycloneSeverityRule",
    "WildfireSeverityRule",
    "LandslideSeverityRule",
    "EarthquakeSeverityRule",
    "IndustrialSeverityRule",
    "default_rules",
]
