"""Gateway interfaces for todosync.

These are the "ports": abstract contracts for task persistence.

Implementations (adapters) are in:
- todosync.adapters.sqlite (local storage)
- todosync.adapters.rest_api (hosted API)
"""

from .gateway import GatewayResult, TaskGateway

__all__ = [
    "TaskGateway",
    "GatewayResult",
]
