"""
NSIS-Tool Build - Declarative task runner for packaging NSIS as a NuGet package

Downloads a fixed NSIS release, repackages it as the NSIS-Tool NuGet package
and publishes it to the NuGet registry and to a GitHub release.

Build graph:
    Clean -> DownloadNsis -> Pack -> {PublishNugetPackage, PublishGitHubRelease} -> Publish

Installation:
pip install -e .

Configuration:
    Pass parameters on the command line or through the environment / a .env file:

    NSIS_VERSION=3.08
    NUGET_PACKAGE_VERSION=3.8.0
    NUGET_API_KEY=oy2...
    GITHUB_TOKEN=ghp_...
    GITHUB_REPOSITORY=owner/nsis-tool

Example:
    >>> from nsis_build import BuildConfig, BuildContext, TaskRunner, build_registry
    >>>
    >>> config = BuildConfig.from_env({"nsis_version": "3.08", "nuget_package_version": "3.8.0"})
    >>> runner = TaskRunner(build_registry())
    >>> record = runner.run("Pack", BuildContext(config))
    >>> record.exit_code
    0
"""

from .config import BuildConfig, EnvConfig
from .models import Task, Requirement, TaskStatus, ExecutionRecord
from .core import TaskRegistry, TaskRunner, BuildContext, build_registry, DEFAULT_TARGET
from .utils.exceptions import (
    BuildError,
    DuplicateTaskError,
    UnknownTaskError,
    CyclicDependencyError,
    MissingRequirementError,
    ExternalOperationError,
)

__version__ = "1.0.0"

__all__ = [
    'BuildConfig',
    'EnvConfig',
    'Task',
    'Requirement',
    'TaskStatus',
    'ExecutionRecord',
    'TaskRegistry',
    'TaskRunner',
    'BuildContext',
    'build_registry',
    'DEFAULT_TARGET',
    'BuildError',
    'DuplicateTaskError',
    'UnknownTaskError',
    'CyclicDependencyError',
    'MissingRequirementError',
    'ExternalOperationError',
]
