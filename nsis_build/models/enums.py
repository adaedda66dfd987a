"""
Enums module - Task status enumeration
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Outcome of a task within one run"""
    NOT_RUN = "not-run"
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
