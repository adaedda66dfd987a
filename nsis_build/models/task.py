"""
Task module - Declarative task definition
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

Check = Callable[[Any], bool]
Body = Callable[[Any], None]


@dataclass(frozen=True)
class Requirement:
    """
    A precondition evaluated right before a task body runs.

    A failing requirement is a fatal configuration error for the run.
    """
    description: str
    check: Check

    def is_met(self, context: Any) -> bool:
        return bool(self.check(context))


@dataclass(frozen=True)
class Task:
    """
    Named unit of build work with declared dependencies.

    Attributes:
        name: Unique task name
        dependencies: Names of tasks that must run first, in declaration order
        requirements: Preconditions that abort the run when not met
        guard: Optional predicate; when it returns False the task is skipped
        body: The work itself; None for aggregate tasks
        public: Whether the task may be requested by name
        description: One-line help text
    """
    name: str
    dependencies: Tuple[str, ...] = ()
    requirements: Tuple[Requirement, ...] = ()
    guard: Optional[Check] = None
    body: Optional[Body] = None
    public: bool = True
    description: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Task name cannot be empty")
        # Accept lists from callers, store tuples
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "requirements", tuple(self.requirements))


def require_value(description: str, getter: Callable[[Any], Any]) -> Requirement:
    """Requirement that passes when getter(context) returns a non-blank value."""
    def _check(context: Any) -> bool:
        value = getter(context)
        if isinstance(value, str):
            return bool(value.strip())
        return value is not None

    return Requirement(description=description, check=_check)
