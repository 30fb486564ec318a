"""
L3 Detection — Runtime and native library version checks.

Read-only probes: runs ``--version`` commands against an explicit
environment and parses the output.
"""

from __future__ import annotations

import shutil
from collections.abc import Mapping

from geostack.core.models.resolution import SemVer
from geostack.core.services.provision.domain.version import (
    GDAL_VERSION_PATTERN,
    PYTHON_VERSION_PATTERN,
    UV_VERSION_PATTERN,
    parse_version,
)
from geostack.core.services.provision.execution.subprocess_runner import run_command

VERSION_COMMANDS: dict[str, tuple[list[str], str]] = {
    "python":  (["python3", "--version"],  PYTHON_VERSION_PATTERN),
    "gdal":    (["gdalinfo", "--version"], GDAL_VERSION_PATTERN),
    "uv":      (["uv", "--version"],       UV_VERSION_PATTERN),
}


def find_executable(name: str, environ: Mapping[str, str]) -> str | None:
    """``shutil.which`` against the search path of ``environ``."""
    return shutil.which(name, path=environ.get("PATH", ""))


def get_tool_version(
    tool: str,
    environ: Mapping[str, str],
    *,
    executable: str | None = None,
) -> SemVer | None:
    """Get the version a tool reports about itself.

    Args:
        tool: Key of ``VERSION_COMMANDS``.
        environ: Environment to run the probe in.
        executable: Override the binary (e.g. ``python3.11``).

    Returns:
        Parsed version, or ``None`` if the tool is missing or its
        output has no recognisable version.
    """
    entry = VERSION_COMMANDS.get(tool)
    if not entry:
        return None

    cmd, pattern = entry
    cmd = [executable or cmd[0], *cmd[1:]]
    resolved = find_executable(cmd[0], environ)
    if not resolved:
        return None

    result = run_command([resolved, *cmd[1:]], environ=environ, timeout=30)
    # Old interpreters print --version to stderr
    output = (result.get("stdout") or "") + (result.get("stderr") or "")
    return parse_version(output, pattern)
