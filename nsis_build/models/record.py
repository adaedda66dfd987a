"""
Execution record - Per-run outcome of every planned task
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .enums import TaskStatus


@dataclass
class TaskOutcome:
    """Outcome of a single task in one run."""
    status: TaskStatus = TaskStatus.NOT_RUN
    error: Optional[BaseException] = None
    duration_seconds: float = 0.0

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    def to_dict(self):
        return {
            "status": self.status.value,
            "reason": self.reason,
            "duration_seconds": round(self.duration_seconds, 3),
        }


class ExecutionRecord:
    """
    Ordered mapping of task name to outcome for one run.

    Every planned task starts as NOT_RUN; tasks after an aborting failure
    keep that status. Nothing is persisted.
    """

    def __init__(self, plan: Optional[List[str]] = None):
        self._outcomes: Dict[str, TaskOutcome] = {}
        for name in plan or []:
            self._outcomes.setdefault(name, TaskOutcome())

    def __contains__(self, name: str) -> bool:
        return name in self._outcomes

    def __getitem__(self, name: str) -> TaskOutcome:
        return self._outcomes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def items(self) -> Iterator[Tuple[str, TaskOutcome]]:
        return iter(self._outcomes.items())

    def status(self, name: str) -> TaskStatus:
        return self._outcomes[name].status

    def mark(
        self,
        name: str,
        status: TaskStatus,
        error: Optional[BaseException] = None,
        duration_seconds: float = 0.0
    ) -> None:
        self._outcomes[name] = TaskOutcome(status=status, error=error, duration_seconds=duration_seconds)

    def has_run(self, name: str) -> bool:
        """True once the task has a terminal outcome in this run."""
        outcome = self._outcomes.get(name)
        return outcome is not None and outcome.status != TaskStatus.NOT_RUN

    def names_with(self, status: TaskStatus) -> List[str]:
        return [name for name, outcome in self._outcomes.items() if outcome.status == status]

    @property
    def failed(self) -> bool:
        return any(o.status == TaskStatus.FAILED for o in self._outcomes.values())

    @property
    def first_failure(self) -> Optional[Tuple[str, TaskOutcome]]:
        for name, outcome in self._outcomes.items():
            if outcome.status == TaskStatus.FAILED:
                return name, outcome
        return None

    @property
    def exit_code(self) -> int:
        """Process exit status for this run: 0 unless any task failed."""
        return 1 if self.failed else 0

    def summary_lines(self) -> List[str]:
        """Render a fixed-width summary table."""
        width = max([len("Task")] + [len(name) for name in self._outcomes])
        lines = [
            f"{'Task':<{width}}  {'Status':<9}  {'Duration':>8}",
            "-" * (width + 21),
        ]
        total = 0.0
        for name, outcome in self._outcomes.items():
            total += outcome.duration_seconds
            duration = f"{outcome.duration_seconds:.2f}s" if outcome.status != TaskStatus.NOT_RUN else "-"
            lines.append(f"{name:<{width}}  {outcome.status.value:<9}  {duration:>8}")
        lines.append("-" * (width + 21))
        verdict = "Build failed" if self.failed else "Build succeeded"
        lines.append(f"{verdict:<{width}}  {'':<9}  {total:>7.2f}s")
        return lines

    def to_dict(self) -> Dict[str, Dict]:
        return {name: outcome.to_dict() for name, outcome in self._outcomes.items()}
