from .dispatch_queue import DispatchQueue, priority_key
from .requests import REQUEST_TABLE, RequestPlanner
from .resource_pool import ResourcePool
from .severity import SeverityEngine

__all__ = [
    "DispatchQueue",
    "priority_key",
    "REQUEST_TABLE",
    "RequestPlanner",
    "ResourcePool",
    "SeverityEngine",
]
