from .coordinator import Coordinator
from .dispatcher import Dispatcher
from .event_source import EventSource
from .reporter import Reporter
from .status_api import StatusService

__all__ = ["Coordinator", "Dispatcher", "EventSource", "Reporter", "StatusService"]
