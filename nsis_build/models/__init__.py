"""
Models module - Task definitions and execution records
"""

from .enums import TaskStatus
from .task import Task, Requirement, require_value
from .record import TaskOutcome, ExecutionRecord

__all__ = [
    'TaskStatus',
    'Task',
    'Requirement',
    'require_value',
    'TaskOutcome',
    'ExecutionRecord',
]
