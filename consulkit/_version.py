"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Version information for consulkit.

Installed distributions report the version recorded in their metadata. A
source checkout that was never installed falls back to the VERSION file at
the repository root.
"""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "consulkit"


def get_version() -> str:
    """
    Resolve the consulkit version.

    Returns:
        str: The version string (e.g., "0.1.0"), or "unknown" for a checkout
        with neither distribution metadata nor a VERSION file
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    return "unknown"


__version__ = get_version()
