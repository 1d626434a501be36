"""National disaster response dispatch simulator."""

__version__ = "0.1.0"
