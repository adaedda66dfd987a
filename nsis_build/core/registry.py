"""
Task Registry - Static task graph and plan resolution

Tasks are registered once at process start. A plan for a target is the
topological ordering of the target and everything it transitively depends
on; independent tasks keep their registration order.
"""

import heapq
from typing import Dict, Iterable, List, Optional, Set

from nsis_build.models.task import Task
from nsis_build.utils.exceptions import (
    DuplicateTaskError,
    UnknownTaskError,
    CyclicDependencyError,
)
from nsis_build.utils.logger import get_logger

logger = get_logger(__name__)


class TaskRegistry:
    """Plain name -> task mapping with dependency resolution."""

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: Dict[str, Task] = {}
        self._order: Dict[str, int] = {}
        for task in tasks or []:
            self.register(task)

    def __contains__(self, name: str) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def register(self, task: Task) -> Task:
        """
        Add a task definition.

        Raises:
            DuplicateTaskError: If a task with the same name is registered
        """
        if task.name in self._tasks:
            raise DuplicateTaskError(task.name)
        self._order[task.name] = len(self._order)
        self._tasks[task.name] = task
        logger.debug(f"[REGISTRY] Registered task '{task.name}' depends_on={list(task.dependencies)}")
        return task

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTaskError(name, available_tasks=self.public_names()) from None

    def names(self) -> List[str]:
        """All task names in registration order."""
        return list(self._tasks)

    def public_names(self) -> List[str]:
        return [name for name, task in self._tasks.items() if task.public]

    def resolve(self, target_name: str) -> List[str]:
        """
        Compute the execution plan for a target.

        Args:
            target_name: Name of a public task

        Returns:
            Task names ordered so each appears after all of its dependencies

        Raises:
            UnknownTaskError: Target or one of its dependencies is not registered,
                or the target is internal
            CyclicDependencyError: A cycle is reachable from the target
        """
        if target_name not in self._tasks:
            raise UnknownTaskError(target_name, available_tasks=self.public_names())
        if not self._tasks[target_name].public:
            raise UnknownTaskError(
                target_name,
                reason="internal task, only reachable as a dependency",
                available_tasks=self.public_names()
            )

        closure = self._closure([target_name])
        plan = self._order_topologically(closure)
        logger.debug(f"[REGISTRY] Plan for '{target_name}': {plan}")
        return plan

    def validate(self) -> None:
        """
        Check the whole graph: every dependency exists and there are no cycles.

        Raises:
            UnknownTaskError: A dependency names an unregistered task
            CyclicDependencyError: The graph contains a cycle
        """
        closure = self._closure(self.names())
        self._order_topologically(closure)

    def _closure(self, roots: List[str]) -> Set[str]:
        """Names reachable from roots through dependency edges (roots included)."""
        seen: Set[str] = set()
        stack = list(roots)
        while stack:
            name = stack.pop()
            if name in seen:
                continue
            seen.add(name)
            for dep in self._tasks[name].dependencies:
                if dep not in self._tasks:
                    raise UnknownTaskError(dep, reason=f"dependency of '{name}'")
                if dep not in seen:
                    stack.append(dep)
        return seen

    def _order_topologically(self, closure: Set[str]) -> List[str]:
        # Kahn's algorithm; the ready queue is keyed by registration index
        pending: Dict[str, int] = {}
        dependents: Dict[str, List[str]] = {name: [] for name in closure}
        for name in closure:
            deps = set(self._tasks[name].dependencies)
            pending[name] = len(deps)
            for dep in deps:
                dependents[dep].append(name)

        ready = [(self._order[name], name) for name, count in pending.items() if count == 0]
        heapq.heapify(ready)

        plan: List[str] = []
        while ready:
            _, name = heapq.heappop(ready)
            plan.append(name)
            for dependent in dependents[name]:
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(ready, (self._order[dependent], dependent))

        if len(plan) != len(closure):
            remaining = {name for name, count in pending.items() if count > 0}
            raise CyclicDependencyError(self._find_cycle(remaining))
        return plan

    def _find_cycle(self, remaining: Set[str]) -> List[str]:
        # Every remaining task still waits on another remaining task, so
        # following those edges must eventually revisit a task.
        start = min(remaining, key=lambda n: self._order[n])
        path: List[str] = []
        index: Dict[str, int] = {}
        current = start
        while current not in index:
            index[current] = len(path)
            path.append(current)
            current = next(
                dep for dep in self._tasks[current].dependencies if dep in remaining
            )
        cycle = path[index[current]:]
        cycle.append(current)
        return cycle
