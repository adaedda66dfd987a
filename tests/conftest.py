import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

BUILD_ENV_KEYS = (
    "NSIS_VERSION",
    "NUGET_PACKAGE_VERSION",
    "NUGET_API_KEY",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_REF",
    "APPVEYOR_REPO_TAG",
    "BUILD_ROOT",
    "BUILD_RELEASE_TAG",
    "BUILD_RELEASE_DRAFT",
    "BUILD_DOWNLOAD_TIMEOUT",
    "BUILD_REQUIRE_TAG_BUILD",
    "BUILD_NUSPEC_FILE",
    "BUILD_NSIS_URL_TEMPLATE",
    "BUILD_NUGET_SOURCE",
    "BUILD_NUGET_EXE",
    "BUILD_GITHUB_API_URL",
    "BUILD_LOG_LEVEL",
    "BUILD_ENABLE_FILE_LOGGING",
    "BUILD_LOG_FOLDER",
)


@pytest.fixture(autouse=True)
def _isolated_build_env(monkeypatch):
    """CI runners export GITHUB_* variables; keep them out of the tests."""
    from nsis_build.utils.logger import configure_logging

    saved = dict(os.environ)
    for key in BUILD_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    # .env loading writes straight into os.environ
    os.environ.clear()
    os.environ.update(saved)
    # main() rebinds the console handler to the current (per-test) stdout
    configure_logging()
