from .packing import router as packing_routes
from .tasks import router as tasks_routes

__all__ = [
    "packing_routes",
    "tasks_routes",
]
