"""
Standardized Exception Hierarchy for the NSIS-Tool build

This module provides the exception hierarchy used by the task graph runner,
the build tasks and the external operations they call.

Exception Categories:
- Configuration Errors: Invalid settings or parameters
- Graph Errors: Problems with the task graph (duplicates, unknown tasks, cycles)
- Requirement Errors: A task's precondition is not met at execution time
- External Operation Errors: Download, extraction, packaging and publishing failures

Usage:
    from nsis_build.utils.exceptions import (
        BuildError,
        MissingRequirementError,
        NetworkError
    )

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(url, "Download failed", original_error=e)
"""

from typing import Optional, Any, Dict, List


# ============================================================================
# Base Exception
# ============================================================================

class BuildError(Exception):
    """
    Base exception for all build errors.

    All custom exceptions inherit from this class so the runner and the
    command line can report them uniformly.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for categorization
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def __str__(self) -> str:
        return self.message


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(BuildError):
    """Raised when there's an issue with configuration or settings."""

    def __init__(
        self,
        setting_name: str,
        message: str,
        expected_value: Optional[Any] = None,
        actual_value: Optional[Any] = None
    ):
        details = {"setting_name": setting_name}
        if expected_value is not None:
            details["expected_value"] = str(expected_value)
        if actual_value is not None:
            details["actual_value"] = str(actual_value)

        super().__init__(
            message=f"Configuration error for '{setting_name}': {message}",
            error_code="CONFIG_ERROR",
            details=details
        )
        self.setting_name = setting_name


# ============================================================================
# Task Graph Errors
# ============================================================================

class GraphError(BuildError):
    """Base class for task graph errors. Always raised before execution."""
    pass


class DuplicateTaskError(GraphError):
    """Raised when a task name is registered twice."""

    def __init__(self, task_name: str):
        super().__init__(
            message=f"Task '{task_name}' is already registered",
            error_code="DUPLICATE_TASK",
            details={"task_name": task_name}
        )
        self.task_name = task_name


class UnknownTaskError(GraphError):
    """Raised when a requested target or a dependency is not registered."""

    def __init__(
        self,
        task_name: str,
        reason: Optional[str] = None,
        available_tasks: Optional[List[str]] = None
    ):
        message = f"Unknown task: '{task_name}'"
        if reason:
            message += f" ({reason})"
        if available_tasks:
            message += f"\nAvailable tasks: {', '.join(available_tasks)}"

        super().__init__(
            message=message,
            error_code="UNKNOWN_TASK",
            details={
                "task_name": task_name,
                "reason": reason,
                "available_tasks": available_tasks
            }
        )
        self.task_name = task_name


class CyclicDependencyError(GraphError):
    """Raised when the dependency relation contains a cycle."""

    def __init__(self, cycle: List[str]):
        super().__init__(
            message=f"Cyclic dependency detected: {' -> '.join(cycle)}",
            error_code="CYCLIC_DEPENDENCY",
            details={"cycle": list(cycle)}
        )
        self.cycle = list(cycle)


# ============================================================================
# Requirement Errors
# ============================================================================

class MissingRequirementError(BuildError):
    """Raised when a task requirement fails right before the task runs."""

    def __init__(self, task_name: str, requirement: str):
        super().__init__(
            message=f"Task '{task_name}' requires: {requirement}",
            error_code="MISSING_REQUIREMENT",
            details={"task_name": task_name, "requirement": requirement}
        )
        self.task_name = task_name
        self.requirement = requirement


# ============================================================================
# External Operation Errors
# ============================================================================

class ExternalOperationError(BuildError):
    """Raised when a download, extraction, packaging or publishing call fails."""

    def __init__(
        self,
        operation: str,
        message: str,
        original_error: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        full_message = f"Operation '{operation}' failed: {message}"
        if original_error:
            full_message += f"\nCaused by: {str(original_error)}"

        merged = {
            "operation": operation,
            "original_error": str(original_error) if original_error else None
        }
        merged.update(details or {})

        super().__init__(
            message=full_message,
            error_code="EXTERNAL_OP_ERROR",
            details=merged
        )
        self.operation = operation
        self.original_error = original_error


class NetworkError(ExternalOperationError):
    """Raised when network operations fail."""

    def __init__(
        self,
        url: str,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[BaseException] = None
    ):
        full_message = f"{message} for '{url}'"
        if status_code:
            full_message += f" (status code: {status_code})"

        super().__init__(
            operation="download",
            message=full_message,
            original_error=original_error,
            details={"url": url, "status_code": status_code}
        )
        self.error_code = "NETWORK_ERROR"
        self.url = url
        self.status_code = status_code


class ArchiveError(ExternalOperationError):
    """Raised when an archive cannot be extracted."""

    def __init__(
        self,
        archive_path: str,
        message: str,
        original_error: Optional[BaseException] = None
    ):
        super().__init__(
            operation="extract",
            message=f"{message} ('{archive_path}')",
            original_error=original_error,
            details={"archive_path": archive_path}
        )
        self.error_code = "ARCHIVE_ERROR"
        self.archive_path = archive_path


class FileOperationError(ExternalOperationError):
    """Raised when file operations fail."""

    def __init__(
        self,
        file_path: str,
        operation: str,
        message: str,
        original_error: Optional[BaseException] = None
    ):
        super().__init__(
            operation=operation,
            message=f"{message} ('{file_path}')",
            original_error=original_error,
            details={"file_path": file_path}
        )
        self.error_code = "FILE_OP_ERROR"
        self.file_path = file_path


class PackagingError(ExternalOperationError):
    """Raised when the package build or push tool fails."""

    def __init__(
        self,
        operation: str,
        message: str,
        exit_code: Optional[int] = None,
        output: Optional[str] = None,
        original_error: Optional[BaseException] = None
    ):
        full_message = message
        if exit_code is not None:
            full_message += f" (exit code: {exit_code})"

        details: Dict[str, Any] = {"exit_code": exit_code}
        if output:
            details["output"] = output[-2000:]

        super().__init__(
            operation=operation,
            message=full_message,
            original_error=original_error,
            details=details
        )
        self.error_code = "PACKAGING_ERROR"
        self.exit_code = exit_code


class PublishError(ExternalOperationError):
    """Raised when creating a release or uploading an asset fails."""

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[BaseException] = None
    ):
        full_message = message
        if status_code:
            full_message += f" (status code: {status_code})"

        super().__init__(
            operation=operation,
            message=full_message,
            original_error=original_error,
            details={"status_code": status_code}
        )
        self.error_code = "PUBLISH_ERROR"
        self.status_code = status_code


# ============================================================================
# Convenience Functions
# ============================================================================

def wrap_exception(
    original_error: BaseException,
    operation: str,
    context: Optional[Dict[str, Any]] = None
) -> BuildError:
    """
    Wrap a generic exception in an appropriate build exception.

    Args:
        original_error: The original exception to wrap
        operation: The operation that was being performed (usually a task name)
        context: Additional context about the error

    Returns:
        An appropriate BuildError subclass
    """
    context = context or {}

    # Already part of the hierarchy
    if isinstance(original_error, BuildError):
        return original_error

    if isinstance(original_error, OSError):
        file_path = context.get("file_path") or getattr(original_error, "filename", None) or "unknown"
        return FileOperationError(
            file_path=str(file_path),
            operation=operation,
            message=original_error.strerror or str(original_error),
            original_error=original_error
        )

    return ExternalOperationError(
        operation=operation,
        message=str(original_error) or original_error.__class__.__name__,
        original_error=original_error
    )


__all__ = [
    # Base
    "BuildError",

    # Configuration
    "ConfigurationError",

    # Graph
    "GraphError",
    "DuplicateTaskError",
    "UnknownTaskError",
    "CyclicDependencyError",

    # Requirements
    "MissingRequirementError",

    # External operations
    "ExternalOperationError",
    "NetworkError",
    "ArchiveError",
    "FileOperationError",
    "PackagingError",
    "PublishError",

    # Utilities
    "wrap_exception",
]
