"""
Scenario tests for the NSIS-Tool build graph with fake external services.
"""

import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from nsis_build.config import BuildConfig
from nsis_build.core.build_tasks import BuildContext, build_registry, find_package, release_notes
from nsis_build.core.runner import TaskRunner
from nsis_build.models.enums import TaskStatus
from nsis_build.utils.exceptions import ExternalOperationError, MissingRequirementError

NSIS_VERSION = "3.08"
PACKAGE_VERSION = "3.8.0"


class FakeNuGet:
    def __init__(self):
        self.packed = []
        self.pushed = []

    def pack(self, nuspec_path, version, output_directory):
        self.packed.append((Path(nuspec_path), version))
        output = Path(output_directory)
        (output / f"NSIS-Tool.{version}.nupkg").write_bytes(b"PK fake package")
        return output

    def push(self, package_path, source, api_key, skip_duplicate=True):
        self.pushed.append((Path(package_path).name, source, api_key, skip_duplicate))


class FakeGitHub:
    def __init__(self):
        self.releases = []
        self.uploads = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    def create_release(self, repository, tag, body="", draft=True, name=None):
        self.releases.append({"repository": repository, "tag": tag, "body": body, "draft": draft})
        return {"id": 1, "upload_url": "https://uploads.example/assets{?name,label}"}

    def upload_file(self, release, path):
        self.uploads.append(Path(path).name)
        return {"name": Path(path).name}


def fake_download(url, destination, timeout=60.0, session=None):
    """Write a zip shaped like the upstream NSIS distribution."""
    with zipfile.ZipFile(destination, "w") as zf:
        zf.writestr(f"nsis-{NSIS_VERSION}/makensis.exe", b"MZ")
        zf.writestr(f"nsis-{NSIS_VERSION}/Plugins/x86-unicode/nsDialogs.dll", b"MZ")
    return Path(destination)


@pytest.fixture
def build_root(tmp_path):
    (tmp_path / "NSIS-Tool.nuspec").write_text("<package />", encoding="utf-8")
    return tmp_path


@pytest.fixture
def services():
    return FakeNuGet(), FakeGitHub()


def make_context(build_root, services, **params):
    nuget, github = services
    config = BuildConfig(root_directory=str(build_root), **params)
    return BuildContext(config=config, nuget=nuget, github_factory=lambda cfg: github)


def run(target, context):
    with patch("nsis_build.core.build_tasks.download_file", side_effect=fake_download) as download:
        record = TaskRunner(build_registry()).run(target, context)
    return record, download


class TestPublishScenarios:

    def test_publish_with_all_parameters(self, build_root, services):
        nuget, github = services
        context = make_context(
            build_root, services,
            nsis_version=NSIS_VERSION,
            nuget_package_version=PACKAGE_VERSION,
            nuget_api_key="secret-key",
            github_token="ghp_token",
            github_repository="owner/nsis-tool",
        )

        record, download = run("Publish", context)

        assert list(record) == [
            "Clean",
            "DownloadNsis",
            "Pack",
            "PublishNugetPackage",
            "PublishGitHubRelease",
            "Publish",
        ]
        assert all(record.status(name) == TaskStatus.SUCCEEDED for name in record)
        assert record.exit_code == 0

        download.assert_called_once()
        assert download.call_args[0][0] == (
            "https://cfhcable.dl.sourceforge.net/project/nsis/NSIS%203/3.08/nsis-3.08.zip"
        )
        assert (build_root / "lib" / "nsis" / "makensis.exe").is_file()
        assert not (build_root / "lib" / f"nsis-{NSIS_VERSION}").exists()

        assert nuget.packed == [(build_root / "NSIS-Tool.nuspec", PACKAGE_VERSION)]
        assert nuget.pushed == [
            ("NSIS-Tool.3.8.0.nupkg", "https://api.nuget.org/v3/index.json", "secret-key", True)
        ]
        assert github.releases[0]["repository"] == "owner/nsis-tool"
        assert github.releases[0]["tag"] == PACKAGE_VERSION
        assert github.releases[0]["draft"] is True
        assert github.uploads == ["NSIS-Tool.3.8.0.nupkg"]
        assert github.closed is True

    def test_github_release_skipped_without_token(self, build_root, services):
        nuget, github = services
        context = make_context(
            build_root, services,
            nsis_version=NSIS_VERSION,
            nuget_package_version=PACKAGE_VERSION,
            nuget_api_key="secret-key",
        )

        record, _ = run("Publish", context)

        assert record.status("PublishGitHubRelease") == TaskStatus.SKIPPED
        assert record.status("PublishNugetPackage") == TaskStatus.SUCCEEDED
        assert record.status("Publish") == TaskStatus.SUCCEEDED
        assert record.exit_code == 0
        assert github.releases == []

    def test_publish_without_api_key_fails(self, build_root, services):
        nuget, _ = services
        context = make_context(
            build_root, services,
            nsis_version=NSIS_VERSION,
            nuget_package_version=PACKAGE_VERSION,
        )

        record, _ = run("Publish", context)

        assert record.status("Pack") == TaskStatus.SUCCEEDED
        assert record.status("PublishNugetPackage") == TaskStatus.FAILED
        assert isinstance(record["PublishNugetPackage"].error, MissingRequirementError)
        assert record.status("PublishGitHubRelease") == TaskStatus.NOT_RUN
        assert record.status("Publish") == TaskStatus.NOT_RUN
        assert nuget.pushed == []
        assert record.exit_code == 1

    def test_nuget_push_skipped_outside_tag_build(self, build_root, services):
        nuget, _ = services
        context = make_context(
            build_root, services,
            nsis_version=NSIS_VERSION,
            nuget_package_version=PACKAGE_VERSION,
            require_tag_build=True,
            is_tag_build=False,
        )

        record, _ = run("Publish", context)

        assert record.status("PublishNugetPackage") == TaskStatus.SKIPPED
        assert record.exit_code == 0
        assert nuget.pushed == []

    def test_release_tag_and_draft_overrides(self, build_root, services):
        _, github = services
        context = make_context(
            build_root, services,
            nsis_version=NSIS_VERSION,
            nuget_package_version=PACKAGE_VERSION,
            nuget_api_key="k",
            github_token="t",
            github_repository="owner/nsis-tool",
            release_tag="v3.8.0",
            release_draft=False,
        )

        run("Publish", context)

        assert github.releases[0]["tag"] == "v3.8.0"
        assert github.releases[0]["draft"] is False
        assert "NSIS 3.08" in github.releases[0]["body"]


class TestPackScenarios:

    def test_pack_without_package_version(self, build_root, services):
        nuget, _ = services
        context = make_context(build_root, services, nsis_version=NSIS_VERSION)

        record, _ = run("Pack", context)

        assert record.status("Clean") == TaskStatus.SUCCEEDED
        assert record.status("DownloadNsis") == TaskStatus.SUCCEEDED
        assert record.status("Pack") == TaskStatus.FAILED
        error = record["Pack"].error
        assert isinstance(error, MissingRequirementError)
        assert "package version" in error.requirement
        assert record.exit_code != 0
        assert nuget.packed == []

    def test_download_without_nsis_version(self, build_root, services):
        context = make_context(build_root, services, nuget_package_version=PACKAGE_VERSION)

        record, download = run("Pack", context)

        assert record.status("Clean") == TaskStatus.SUCCEEDED
        assert record.status("DownloadNsis") == TaskStatus.FAILED
        assert record.status("Pack") == TaskStatus.NOT_RUN
        download.assert_not_called()

    def test_pack_requires_manifest(self, tmp_path, services):
        context = make_context(
            tmp_path, services,
            nsis_version=NSIS_VERSION,
            nuget_package_version=PACKAGE_VERSION,
        )

        record, _ = run("Pack", context)

        assert record.status("Pack") == TaskStatus.FAILED
        assert record["Pack"].error.requirement == "package manifest exists"

    def test_clean_empties_previous_output(self, build_root, services):
        stale_lib = build_root / "lib" / "old"
        stale_lib.mkdir(parents=True)
        (build_root / "artifacts").mkdir()
        (build_root / "artifacts" / "NSIS-Tool.0.1.0.nupkg").write_bytes(b"old")
        context = make_context(build_root, services)

        record, _ = run("Clean", context)

        assert record.exit_code == 0
        assert list((build_root / "lib").iterdir()) == []
        assert list((build_root / "artifacts").iterdir()) == []

    def test_temp_archive_removed_when_extraction_fails(self, build_root, services):
        created = []

        def broken_download(url, destination, timeout=60.0, session=None):
            created.append(Path(destination))
            Path(destination).write_bytes(b"not a zip")
            return Path(destination)

        context = make_context(
            build_root, services,
            nsis_version=NSIS_VERSION,
            nuget_package_version=PACKAGE_VERSION,
        )
        with patch("nsis_build.core.build_tasks.download_file", side_effect=broken_download):
            record = TaskRunner(build_registry()).run("Pack", context)

        assert record.status("DownloadNsis") == TaskStatus.FAILED
        assert isinstance(record["DownloadNsis"].error, ExternalOperationError)
        assert created and not created[0].exists()


class TestHelpers:

    def test_find_package_requires_exactly_one(self, tmp_path):
        config = BuildConfig(root_directory=str(tmp_path), nuget_package_version=PACKAGE_VERSION)
        config.artifacts_directory.mkdir()

        with pytest.raises(ExternalOperationError):
            find_package(config)

        (config.artifacts_directory / "NSIS-Tool.3.8.0.nupkg").write_bytes(b"x")
        assert find_package(config).name == "NSIS-Tool.3.8.0.nupkg"

    def test_release_notes_mention_versions(self):
        config = BuildConfig(nsis_version=NSIS_VERSION, nuget_package_version=PACKAGE_VERSION)

        notes = release_notes(config)

        assert "NSIS 3.08" in notes
        assert "NSIS-Tool 3.8.0" in notes

    def test_registry_exposes_all_build_tasks(self):
        registry = build_registry()

        assert registry.public_names() == [
            "Clean",
            "DownloadNsis",
            "Pack",
            "PublishNugetPackage",
            "PublishGitHubRelease",
            "Publish",
        ]
