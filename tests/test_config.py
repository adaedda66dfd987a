"""
Unit tests for build configuration and environment loading.
"""

import unittest
from pathlib import Path
from unittest.mock import patch

import pytest

from nsis_build.config import BuildConfig, EnvConfig, detect_tag_build
from nsis_build.utils.exceptions import ConfigurationError


class TestBuildConfig(unittest.TestCase):
    """Tests for BuildConfig."""

    def test_defaults(self):
        config = BuildConfig()

        self.assertIsNone(config.nsis_version)
        self.assertTrue(config.release_draft)
        self.assertEqual(config.nuget_source, "https://api.nuget.org/v3/index.json")
        self.assertEqual(config.nuspec_file, "NSIS-Tool.nuspec")
        self.assertTrue(config.publishing_allowed)

    def test_derived_paths(self):
        config = BuildConfig(root_directory="/build/checkout")

        root = Path("/build/checkout").resolve()
        self.assertEqual(config.lib_directory, root / "lib")
        self.assertEqual(config.artifacts_directory, root / "artifacts")
        self.assertEqual(config.nuspec_path, root / "NSIS-Tool.nuspec")

    def test_nsis_url(self):
        config = BuildConfig(nsis_version="3.09")

        self.assertEqual(
            config.nsis_url,
            "https://cfhcable.dl.sourceforge.net/project/nsis/NSIS%203/3.09/nsis-3.09.zip"
        )

    def test_release_tag_defaults_to_package_version(self):
        self.assertEqual(BuildConfig(nuget_package_version="3.9.0").release_tag_name, "3.9.0")
        self.assertEqual(
            BuildConfig(nuget_package_version="3.9.0", release_tag="v3.9.0").release_tag_name,
            "v3.9.0"
        )

    def test_invalid_timeout(self):
        with self.assertRaises(ConfigurationError):
            BuildConfig(download_timeout=0)

    def test_invalid_repository(self):
        with self.assertRaises(ConfigurationError):
            BuildConfig(github_repository="not a repo")

    def test_url_template_needs_placeholder(self):
        with self.assertRaises(ConfigurationError):
            BuildConfig(nsis_url_template="https://example.invalid/nsis.zip")

    def test_publishing_requires_tag_when_enabled(self):
        self.assertFalse(BuildConfig(require_tag_build=True, is_tag_build=False).publishing_allowed)
        self.assertTrue(BuildConfig(require_tag_build=True, is_tag_build=True).publishing_allowed)

    def test_to_dict_masks_secrets(self):
        config = BuildConfig(nuget_api_key="k", github_token="t")

        masked = config.to_dict()
        self.assertEqual(masked["nuget_api_key"], "***")
        self.assertEqual(masked["github_token"], "***")

        full = config.to_dict(include_secrets=True)
        self.assertEqual(full["nuget_api_key"], "k")


def test_from_env_reads_parameters(monkeypatch):
    monkeypatch.setenv("NSIS_VERSION", "3.08")
    monkeypatch.setenv("NUGET_PACKAGE_VERSION", "3.8.0")
    monkeypatch.setenv("NUGET_API_KEY", "key")
    monkeypatch.setenv("GITHUB_REPOSITORY", "owner/nsis-tool")
    monkeypatch.setenv("BUILD_DOWNLOAD_TIMEOUT", "120")
    monkeypatch.setenv("BUILD_RELEASE_DRAFT", "false")

    config = BuildConfig.from_env()

    assert config.nsis_version == "3.08"
    assert config.nuget_package_version == "3.8.0"
    assert config.nuget_api_key == "key"
    assert config.github_repository == "owner/nsis-tool"
    assert config.download_timeout == 120.0
    assert config.release_draft is False
    assert config.github_token is None


def test_from_env_blank_values_are_unset(monkeypatch):
    monkeypatch.setenv("NUGET_PACKAGE_VERSION", "   ")

    assert BuildConfig.from_env().nuget_package_version is None


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("NSIS_VERSION", "3.08")

    config = BuildConfig.from_env({"nsis_version": "3.09", "nuget_api_key": None})

    assert config.nsis_version == "3.09"
    assert config.nuget_api_key is None


def test_unknown_override_rejected():
    with pytest.raises(ConfigurationError):
        BuildConfig.from_env({"nsis_flavour": "x"})


@pytest.mark.parametrize("env, expected", [
    ({}, False),
    ({"APPVEYOR_REPO_TAG": "true"}, True),
    ({"APPVEYOR_REPO_TAG": "false"}, False),
    ({"GITHUB_REF": "refs/tags/v3.8.0"}, True),
    ({"GITHUB_REF": "refs/heads/main"}, False),
])
def test_detect_tag_build(monkeypatch, env, expected):
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    assert detect_tag_build() is expected


class TestEnvConfig:

    def test_load_env_file_does_not_override(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("NSIS_VERSION=3.07\nNUGET_PACKAGE_VERSION=3.7.0\n", encoding="utf-8")
        monkeypatch.setenv("NSIS_VERSION", "3.08")

        with patch.object(EnvConfig, "_loaded_path", None):
            assert EnvConfig.load_env_file(str(env_file)) is True

        assert EnvConfig.get("NSIS_VERSION") == "3.08"
        assert EnvConfig.get("NUGET_PACKAGE_VERSION") == "3.7.0"

    def test_missing_file(self, tmp_path):
        assert EnvConfig.load_env_file(str(tmp_path / "nope.env")) is False

    def test_typed_getters(self, monkeypatch):
        monkeypatch.setenv("BUILD_X_BOOL", "yes")
        monkeypatch.setenv("BUILD_X_INT", "42")
        monkeypatch.setenv("BUILD_X_FLOAT", "oops")

        assert EnvConfig.get_bool("BUILD_X_BOOL") is True
        assert EnvConfig.get_int("BUILD_X_INT") == 42
        assert EnvConfig.get_float("BUILD_X_FLOAT", 1.5) == 1.5
