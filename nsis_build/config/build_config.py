"""
Build configuration - Parameters and settings for the NSIS-Tool build
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Dict, Any
import os
import re

from nsis_build.utils.exceptions import ConfigurationError
from .env_config import EnvConfig

NSIS_URL_TEMPLATE = "https://cfhcable.dl.sourceforge.net/project/nsis/NSIS%203/{0}/nsis-{0}.zip"
NSIS_NUSPEC_FILE = "NSIS-Tool.nuspec"
NUGET_SERVER_URL = "https://api.nuget.org/v3/index.json"
GITHUB_API_URL = "https://api.github.com"

_REPOSITORY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

_SECRET_FIELDS = ("nuget_api_key", "github_token")


def detect_tag_build() -> bool:
    """True when the current CI build was triggered by a tag push."""
    if EnvConfig.get_bool("APPVEYOR_REPO_TAG", False):
        return True
    return (os.getenv("GITHUB_REF") or "").startswith("refs/tags/")


@dataclass
class BuildConfig:
    """
    Configuration for one build run.

    Built once at startup and handed to every task; task bodies never read
    the environment themselves.

    Attributes:
        nsis_version: Upstream NSIS release to download (e.g. "3.08")
        nuget_package_version: Version stamped on the produced package
        nuget_api_key: Credential for pushing to the NuGet registry
        github_token: Token for creating the GitHub release
        github_repository: Release repository as "owner/name"
        release_tag: Tag for the GitHub release (default: package version)
        release_draft: Create the GitHub release as a draft
        root_directory: Checkout root holding the nuspec file
        nuspec_file: Package manifest file name, relative to the root
        nsis_url_template: Download URL with "{0}" standing for the NSIS version
        nuget_source: Registry URL packages are pushed to
        nuget_executable: NuGet command line used for pack and push
        github_api_url: Base URL of the GitHub REST API
        download_timeout: HTTP timeout in seconds
        require_tag_build: Only push to NuGet on CI tag builds
        is_tag_build: Whether this run is a CI tag build
    """

    nsis_version: Optional[str] = None
    nuget_package_version: Optional[str] = None
    nuget_api_key: Optional[str] = None
    github_token: Optional[str] = None
    github_repository: Optional[str] = None
    release_tag: Optional[str] = None
    release_draft: bool = True
    root_directory: str = "."
    nuspec_file: str = NSIS_NUSPEC_FILE
    nsis_url_template: str = NSIS_URL_TEMPLATE
    nuget_source: str = NUGET_SERVER_URL
    nuget_executable: str = "nuget"
    github_api_url: str = GITHUB_API_URL
    download_timeout: float = 60.0
    require_tag_build: bool = False
    is_tag_build: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.download_timeout <= 0:
            raise ConfigurationError(
                "download_timeout",
                "must be a positive number of seconds",
                actual_value=self.download_timeout
            )

        if "{0}" not in self.nsis_url_template:
            raise ConfigurationError(
                "nsis_url_template",
                "must contain the '{0}' version placeholder",
                actual_value=self.nsis_url_template
            )

        if self.github_repository and not _REPOSITORY_PATTERN.match(self.github_repository):
            raise ConfigurationError(
                "github_repository",
                "must look like 'owner/name'",
                actual_value=self.github_repository
            )

    @property
    def root_path(self) -> Path:
        """Absolute checkout root."""
        return Path(self.root_directory).resolve()

    @property
    def lib_directory(self) -> Path:
        """Staging directory the NSIS distribution is extracted into."""
        return self.root_path / "lib"

    @property
    def artifacts_directory(self) -> Path:
        """Output directory for produced packages."""
        return self.root_path / "artifacts"

    @property
    def nuspec_path(self) -> Path:
        return self.root_path / self.nuspec_file

    @property
    def nsis_url(self) -> str:
        return self.nsis_url_template.format(self.nsis_version)

    @property
    def release_tag_name(self) -> Optional[str]:
        return self.release_tag or self.nuget_package_version

    @property
    def publishing_allowed(self) -> bool:
        """Whether pushing to the registry is allowed for this run."""
        return not self.require_tag_build or self.is_tag_build

    @classmethod
    def from_env(cls, overrides: Optional[Dict[str, Any]] = None) -> "BuildConfig":
        """
        Create configuration from environment variables.

        Args:
            overrides: Values that take precedence over the environment
                (typically parsed command line options); None values are ignored

        Returns:
            Configured BuildConfig instance

        Example:
            export NSIS_VERSION=3.08
            export NUGET_PACKAGE_VERSION=3.8.0
            export BUILD_DOWNLOAD_TIMEOUT=120
            config = BuildConfig.from_env()
        """
        values: Dict[str, Any] = {
            "nsis_version": EnvConfig.get("NSIS_VERSION"),
            "nuget_package_version": EnvConfig.get("NUGET_PACKAGE_VERSION"),
            "nuget_api_key": EnvConfig.get("NUGET_API_KEY"),
            "github_token": EnvConfig.get("GITHUB_TOKEN"),
            "github_repository": EnvConfig.get("GITHUB_REPOSITORY"),
            "release_tag": EnvConfig.get("BUILD_RELEASE_TAG"),
            "release_draft": EnvConfig.get_bool("BUILD_RELEASE_DRAFT", True),
            "root_directory": EnvConfig.get("BUILD_ROOT", "."),
            "nuspec_file": EnvConfig.get("BUILD_NUSPEC_FILE", NSIS_NUSPEC_FILE),
            "nsis_url_template": EnvConfig.get("BUILD_NSIS_URL_TEMPLATE", NSIS_URL_TEMPLATE),
            "nuget_source": EnvConfig.get("BUILD_NUGET_SOURCE", NUGET_SERVER_URL),
            "nuget_executable": EnvConfig.get("BUILD_NUGET_EXE", "nuget"),
            "github_api_url": EnvConfig.get("BUILD_GITHUB_API_URL", GITHUB_API_URL),
            "download_timeout": EnvConfig.get_float("BUILD_DOWNLOAD_TIMEOUT", 60.0),
            "require_tag_build": EnvConfig.get_bool("BUILD_REQUIRE_TAG_BUILD", False),
            "is_tag_build": detect_tag_build(),
        }

        known = {f.name for f in fields(cls)}
        for key, value in (overrides or {}).items():
            if key not in known:
                raise ConfigurationError(key, "unknown setting")
            if value is not None:
                values[key] = value

        return cls(**values)

    def to_dict(self, include_secrets: bool = False) -> Dict[str, Any]:
        """
        Convert to dictionary.

        Args:
            include_secrets: Whether to include credentials (default: False)

        Returns:
            Dictionary representation of config, secrets masked unless requested
        """
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        if not include_secrets:
            for name in _SECRET_FIELDS:
                if result[name]:
                    result[name] = "***"
        return result
