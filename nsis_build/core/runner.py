"""
Task Runner - Sequential execution of a resolved plan

Each task in the plan runs at most once. A false guard skips the task, a
failing requirement or a failing body aborts the rest of the plan. Nothing
is retried and nothing is rolled back.
"""

import time
from typing import Any, List, Optional

from nsis_build.core.registry import TaskRegistry
from nsis_build.models.enums import TaskStatus
from nsis_build.models.record import ExecutionRecord
from nsis_build.models.task import Task
from nsis_build.utils.exceptions import MissingRequirementError, wrap_exception
from nsis_build.utils.logger import get_logger

logger = get_logger(__name__)


class TaskRunner:
    """Executes plans resolved from a task registry."""

    def __init__(self, registry: TaskRegistry):
        self.registry = registry

    def run(self, target_name: str, context: Any) -> ExecutionRecord:
        """
        Resolve and execute a target.

        Graph errors (unknown target, cycle) propagate before anything runs.
        """
        plan = self.registry.resolve(target_name)
        logger.info(f"[RUNNER] Target '{target_name}' -> {' > '.join(plan)}")
        return self.execute(plan, context)

    def execute(self, plan: List[str], context: Any) -> ExecutionRecord:
        """
        Run each task of the plan in order.

        Args:
            plan: Task names in dependency order (see TaskRegistry.resolve)
            context: Object handed to every guard, requirement and body

        Returns:
            The execution record for this run
        """
        tasks = [self.registry.get(name) for name in plan]
        record = ExecutionRecord(plan)

        for task in tasks:
            if record.has_run(task.name):
                logger.debug(f"[RUNNER] '{task.name}' already executed in this run")
                continue

            if not self._execute_task(task, context, record):
                not_run = record.names_with(TaskStatus.NOT_RUN)
                if not_run:
                    logger.warning(f"[RUNNER] Aborted, not run: {', '.join(not_run)}")
                break

        for line in record.summary_lines():
            logger.info(line)
        return record

    def _execute_task(self, task: Task, context: Any, record: ExecutionRecord) -> bool:
        """Run one task; returns False when the run must abort."""
        started = time.perf_counter()
        try:
            if task.guard is not None and not task.guard(context):
                record.mark(task.name, TaskStatus.SKIPPED)
                logger.info(f"[RUNNER] {task.name}: skipped (condition not met)")
                return True

            missing = self._first_missing_requirement(task, context)
            if missing is not None:
                raise MissingRequirementError(task.name, missing)

            logger.info(f"[RUNNER] ==> {task.name}")
            if task.body is not None:
                task.body(context)
        except Exception as e:
            error = wrap_exception(e, operation=task.name)
            record.mark(
                task.name,
                TaskStatus.FAILED,
                error=error,
                duration_seconds=time.perf_counter() - started
            )
            logger.error(f"[RUNNER] {task.name}: failed - {error}")
            return False

        record.mark(task.name, TaskStatus.SUCCEEDED, duration_seconds=time.perf_counter() - started)
        logger.info(f"[RUNNER] {task.name}: succeeded")
        return True

    @staticmethod
    def _first_missing_requirement(task: Task, context: Any) -> Optional[str]:
        for requirement in task.requirements:
            if not requirement.is_met(context):
                return requirement.description
        return None
