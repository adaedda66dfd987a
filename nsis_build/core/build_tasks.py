"""
NSIS-Tool build graph

Clean -> DownloadNsis -> Pack -> {PublishNugetPackage, PublishGitHubRelease} -> Publish

Every guard, requirement and body receives the BuildContext; the
configuration inside it is the only source of parameters.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import requests

from nsis_build.config.build_config import BuildConfig
from nsis_build.core.registry import TaskRegistry
from nsis_build.models.task import Task, Requirement, require_value
from nsis_build.operations.files import (
    create_temp_file,
    delete_file,
    download_file,
    ensure_clean_directory,
    extract_zip,
    rename_directory,
)
from nsis_build.operations.github import GitHubReleaseClient
from nsis_build.operations.nuget import NuGetClient
from nsis_build.utils.exceptions import ExternalOperationError
from nsis_build.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TARGET = "Publish"


def _default_github_factory(config: BuildConfig) -> GitHubReleaseClient:
    return GitHubReleaseClient(
        token=config.github_token,
        api_url=config.github_api_url,
        timeout=config.download_timeout,
    )


@dataclass
class BuildContext:
    """Configuration plus the external clients the task bodies call."""
    config: BuildConfig
    nuget: Optional[NuGetClient] = None
    github_factory: Callable[[BuildConfig], GitHubReleaseClient] = _default_github_factory
    http: Optional[requests.Session] = field(default=None, repr=False)

    def __post_init__(self):
        if self.nuget is None:
            self.nuget = NuGetClient(executable=self.config.nuget_executable)


# ============================================================================
# Task bodies
# ============================================================================

def clean(ctx: BuildContext) -> None:
    ensure_clean_directory(ctx.config.lib_directory)
    ensure_clean_directory(ctx.config.artifacts_directory)


def download_nsis(ctx: BuildContext) -> None:
    """Fetch the NSIS zip, extract it into lib/ and rename it to lib/nsis."""
    config = ctx.config
    archive = create_temp_file(suffix=".zip")
    try:
        download_file(config.nsis_url, archive, timeout=config.download_timeout, session=ctx.http)
        extract_zip(archive, config.lib_directory)
        rename_directory(
            config.lib_directory / f"nsis-{config.nsis_version}",
            config.lib_directory / "nsis"
        )
    finally:
        delete_file(archive)


def pack(ctx: BuildContext) -> None:
    config = ctx.config
    ctx.nuget.pack(config.nuspec_path, config.nuget_package_version, config.artifacts_directory)


def find_package(config: BuildConfig) -> Path:
    """The single .nupkg produced for the configured package version."""
    files = sorted(config.artifacts_directory.glob(f"*.{config.nuget_package_version}.nupkg"))
    if len(files) != 1:
        raise ExternalOperationError(
            "locate_package",
            f"Expected exactly one package in '{config.artifacts_directory}', found {len(files)}"
        )
    return files[0]


def publish_nuget_package(ctx: BuildContext) -> None:
    config = ctx.config
    package = find_package(config)
    ctx.nuget.push(package, source=config.nuget_source, api_key=config.nuget_api_key, skip_duplicate=True)


def release_notes(config: BuildConfig) -> str:
    return (
        f"NSIS {config.nsis_version} packaged as NSIS-Tool {config.nuget_package_version}.\n\n"
        f"Source: {config.nsis_url}"
    )


def publish_github_release(ctx: BuildContext) -> None:
    config = ctx.config
    package = find_package(config)
    with ctx.github_factory(config) as client:
        release = client.create_release(
            config.github_repository,
            tag=config.release_tag_name,
            body=release_notes(config),
            draft=config.release_draft,
        )
        client.upload_file(release, package)


# ============================================================================
# Graph
# ============================================================================

def build_tasks() -> list:
    """Task definitions in registration order."""
    return [
        Task(
            name="Clean",
            body=clean,
            description="Empty the lib and artifacts directories",
        ),
        Task(
            name="DownloadNsis",
            dependencies=("Clean",),
            requirements=(
                require_value("NSIS version (--nsis-version / NSIS_VERSION)", lambda c: c.config.nsis_version),
            ),
            body=download_nsis,
            description="Download and extract the NSIS distribution into lib/nsis",
        ),
        Task(
            name="Pack",
            dependencies=("DownloadNsis",),
            requirements=(
                require_value(
                    "package version (--nuget-package-version / NUGET_PACKAGE_VERSION)",
                    lambda c: c.config.nuget_package_version
                ),
                Requirement("package manifest exists", lambda c: c.config.nuspec_path.is_file()),
            ),
            body=pack,
            description="Build the NSIS-Tool NuGet package into artifacts/",
        ),
        Task(
            name="PublishNugetPackage",
            dependencies=("Pack",),
            requirements=(
                require_value("NuGet API key (--nuget-api-key / NUGET_API_KEY)", lambda c: c.config.nuget_api_key),
            ),
            guard=lambda c: c.config.publishing_allowed,
            body=publish_nuget_package,
            description="Push the package to the NuGet registry",
        ),
        Task(
            name="PublishGitHubRelease",
            dependencies=("Pack",),
            requirements=(
                require_value(
                    "GitHub repository (--github-repository / GITHUB_REPOSITORY)",
                    lambda c: c.config.github_repository
                ),
                require_value(
                    "package version (--nuget-package-version / NUGET_PACKAGE_VERSION)",
                    lambda c: c.config.nuget_package_version
                ),
            ),
            guard=lambda c: bool(c.config.github_token),
            body=publish_github_release,
            description="Create a GitHub release and attach the package",
        ),
        Task(
            name="Publish",
            dependencies=("PublishNugetPackage", "PublishGitHubRelease"),
            description="Publish everywhere (default target)",
        ),
    ]


def build_registry() -> TaskRegistry:
    """Registry holding the NSIS-Tool build graph."""
    registry = TaskRegistry(build_tasks())
    registry.validate()
    return registry
