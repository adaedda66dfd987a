"""
Operations module - External collaborators used by the build tasks
"""

from .files import (
    ensure_clean_directory,
    create_temp_file,
    delete_file,
    download_file,
    extract_zip,
    rename_directory,
)
from .nuget import NuGetClient
from .github import GitHubReleaseClient

__all__ = [
    'ensure_clean_directory',
    'create_temp_file',
    'delete_file',
    'download_file',
    'extract_zip',
    'rename_directory',
    'NuGetClient',
    'GitHubReleaseClient',
]
