"""
Environment configuration - Load settings from .env files
"""

import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_log = logging.getLogger("nsis_build.config")


class EnvConfig:
    """
    Load and read configuration from environment variables and .env files.

    Priority:
    1. Environment variables (highest priority, never overridden)
    2. .env file in the current/specified directory or up to 3 parents
    """

    _loaded_path: Optional[Path] = None

    @classmethod
    def load_env_file(cls, path: Optional[str] = None) -> bool:
        """
        Load environment variables from a .env file.

        Args:
            path: Path to .env file (default: search current dir and parents)

        Returns:
            True if a file was loaded, False otherwise
        """
        if path:
            env_path: Optional[Path] = Path(path)
        else:
            env_path = None
            current = Path.cwd()
            for _ in range(4):  # Current dir + 3 parent levels
                potential_path = current / ".env"
                if potential_path.exists():
                    env_path = potential_path
                    break
                if current.parent == current:  # Stop at filesystem root
                    break
                current = current.parent

        if env_path is None or not env_path.exists():
            return False

        if cls._loaded_path == env_path.resolve():
            return True

        load_dotenv(env_path, override=False)
        cls._loaded_path = env_path.resolve()
        _log.debug(f"Loaded environment from {env_path}")
        return True

    @staticmethod
    def get(key: str, default: Optional[str] = None) -> Optional[str]:
        """Get environment variable; empty strings count as unset."""
        value = os.getenv(key)
        if value is None or value.strip() == "":
            return default
        return value.strip()

    @staticmethod
    def get_bool(key: str, default: bool = False) -> bool:
        """Get boolean environment variable."""
        value = os.getenv(key)
        if value is None or value.strip() == "":
            return default
        return value.strip().lower() in ('true', '1', 'yes', 'on')

    @staticmethod
    def get_int(key: str, default: int = 0) -> int:
        """Get integer environment variable."""
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    @staticmethod
    def get_float(key: str, default: float = 0.0) -> float:
        """Get float environment variable."""
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default
