"""
L1 Domain — Version parsing and floor validation (pure).

No I/O, no subprocess.
"""

from __future__ import annotations

import re

from geostack.core.models.resolution import SemVer

PYTHON_VERSION_PATTERN = r"Python\s+(\d+\.\d+\.\d+)"
GDAL_VERSION_PATTERN = r"GDAL\s+(\d+\.\d+\.\d+)"
UV_VERSION_PATTERN = r"uv\s+(\d+\.\d+\.\d+)"

# Oldest interpreter the pinned stack supports
MIN_PYTHON = SemVer(major=3, minor=9)


def parse_version(output: str, pattern: str) -> SemVer | None:
    """Extract a version from tool output using ``pattern``.

    The pattern's first group must capture the ``X.Y.Z`` token.
    """
    match = re.search(pattern, output or "")
    if not match:
        return None
    return SemVer.parse(match.group(1))


def check_version_floor(
    version: SemVer,
    floor: SemVer = MIN_PYTHON,
) -> dict:
    """Validate ``version`` against a ``major.minor`` floor.

    The patch level is ignored and the boundary is inclusive:
    with a 3.9 floor, 3.9.0 passes and 3.8.19 fails.

    Returns:
        ``{"valid": True}`` or ``{"valid": False, "message": "..."}``
    """
    if (version.major, version.minor) >= (floor.major, floor.minor):
        return {"valid": True}
    return {
        "valid": False,
        "message": (
            f"Python {floor.major}.{floor.minor}+ required, "
            f"but {version} found"
        ),
    }
