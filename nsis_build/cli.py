"""
Command line entry point for the NSIS-Tool build

Usage:
    nsis-build                          # runs the default target (Publish)
    nsis-build Pack --nsis-version 3.08 --nuget-package-version 3.8.0
    nsis-build --list
    nsis-build Publish --plan
"""

import argparse
import sys
from typing import Callable, List, Optional

from nsis_build.config import BuildConfig, EnvConfig
from nsis_build.core.build_tasks import BuildContext, DEFAULT_TARGET, build_registry
from nsis_build.core.runner import TaskRunner
from nsis_build.utils.exceptions import ConfigurationError, GraphError
from nsis_build.utils.logger import configure_logging_from_env, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nsis-build",
        description="Download NSIS, pack it as the NSIS-Tool NuGet package and publish it",
    )
    parser.add_argument("target", nargs="?", default=DEFAULT_TARGET,
                        help=f"Task to run (default: {DEFAULT_TARGET})")
    parser.add_argument("--list", action="store_true", help="List the invokable tasks and exit")
    parser.add_argument("--plan", action="store_true", help="Print the execution plan without running it")
    parser.add_argument("--env-file", help="Path to a .env file (default: search cwd and parents)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Override BUILD_LOG_LEVEL")

    params = parser.add_argument_group("build parameters")
    params.add_argument("--nsis-version", help="NSIS release to download (env: NSIS_VERSION)")
    params.add_argument("--nuget-package-version", help="Version of the produced package (env: NUGET_PACKAGE_VERSION)")
    params.add_argument("--nuget-api-key", help="NuGet registry API key (env: NUGET_API_KEY)")
    params.add_argument("--github-token", help="GitHub token for the release (env: GITHUB_TOKEN)")
    params.add_argument("--github-repository", help="Release repository as owner/name (env: GITHUB_REPOSITORY)")
    params.add_argument("--release-tag", help="Release tag (default: the package version)")
    params.add_argument("--draft", dest="release_draft", action=argparse.BooleanOptionalAction, default=None,
                        help="Create the GitHub release as a draft (env: BUILD_RELEASE_DRAFT)")
    params.add_argument("--root", dest="root_directory", help="Checkout root (env: BUILD_ROOT)")
    params.add_argument("--timeout", dest="download_timeout", type=float,
                        help="Download timeout in seconds (env: BUILD_DOWNLOAD_TIMEOUT)")
    params.add_argument("--require-tag-build", action="store_const", const=True, default=None,
                        help="Only push to NuGet on CI tag builds")
    return parser


def _overrides(args: argparse.Namespace) -> dict:
    keys = (
        "nsis_version", "nuget_package_version", "nuget_api_key", "github_token",
        "github_repository", "release_tag", "release_draft", "root_directory",
        "download_timeout", "require_tag_build",
    )
    return {key: getattr(args, key) for key in keys}


def main(
    argv: Optional[List[str]] = None,
    context_factory: Callable[[BuildConfig], BuildContext] = BuildContext
) -> int:
    """
    Run the build.

    Args:
        argv: Command line arguments (default: sys.argv[1:])
        context_factory: Builds the task context from the configuration

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    loaded = EnvConfig.load_env_file(args.env_file)
    configure_logging_from_env(log_level=args.log_level)
    if args.env_file and not loaded:
        logger.error(f"[BUILD] Environment file not found: {args.env_file}")
        return EXIT_USAGE

    try:
        registry = build_registry()
    except GraphError as e:
        logger.error(f"[BUILD] Invalid task graph: {e}")
        return EXIT_USAGE

    if args.list:
        for name in registry.public_names():
            task = registry.get(name)
            marker = " (default)" if name == DEFAULT_TARGET else ""
            print(f"  {name:<22} {task.description}{marker}")
        return EXIT_OK

    try:
        plan = registry.resolve(args.target)
    except GraphError as e:
        logger.error(f"[BUILD] {e}")
        return EXIT_USAGE

    if args.plan:
        for index, name in enumerate(plan, start=1):
            print(f"  {index}. {name}")
        return EXIT_OK

    try:
        config = BuildConfig.from_env(_overrides(args))
    except ConfigurationError as e:
        logger.error(f"[BUILD] {e}")
        return EXIT_USAGE

    logger.info(f"[BUILD] Configuration: {config.to_dict()}")

    record = TaskRunner(registry).execute(plan, context_factory(config))

    failure = record.first_failure
    if failure:
        name, outcome = failure
        logger.error(f"[BUILD] Target '{args.target}' failed in task '{name}': {outcome.reason}")
    return record.exit_code


if __name__ == "__main__":
    sys.exit(main())
