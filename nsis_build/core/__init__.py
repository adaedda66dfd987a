"""
Core module - Task graph registry, runner and the NSIS-Tool build graph
"""

from .registry import TaskRegistry
from .runner import TaskRunner
from .build_tasks import BuildContext, build_registry, DEFAULT_TARGET

__all__ = [
    'TaskRegistry',
    'TaskRunner',
    'BuildContext',
    'build_registry',
    'DEFAULT_TARGET',
]
