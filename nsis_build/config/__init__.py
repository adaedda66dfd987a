"""
Configuration module - Build parameters and environment loading
"""

from .env_config import EnvConfig
from .build_config import (
    BuildConfig,
    detect_tag_build,
    NSIS_URL_TEMPLATE,
    NSIS_NUSPEC_FILE,
    NUGET_SERVER_URL,
    GITHUB_API_URL,
)

__all__ = [
    'BuildConfig',
    'EnvConfig',
    'detect_tag_build',
    'NSIS_URL_TEMPLATE',
    'NSIS_NUSPEC_FILE',
    'NUGET_SERVER_URL',
    'GITHUB_API_URL',
]
