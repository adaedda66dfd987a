#!/usr/bin/env python
"""
NSIS-Tool Build - Startup Script

Usage:
    python start_build.py
    python start_build.py Pack --nsis-version 3.08 --nuget-package-version 3.8.0
    python start_build.py --list
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from nsis_build.cli import main  # noqa: E402


if __name__ == "__main__":
    sys.exit(main())
