"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called. Module loads,
version probes, venv creation and package installs all go through
here, always with an explicit environment mapping.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

# Tail kept in error payloads
_ERR_TAIL = 2000

# Streamed children write here; stdout is reserved for CLI output (--json)
_STREAM_FD = 2


def run_command(
    cmd: list[str],
    *,
    environ: Mapping[str, str] | None = None,
    timeout: int | None = None,
    cwd: str | None = None,
    stream: bool = False,
) -> dict[str, Any]:
    """Run a command and report the outcome as a dict.

    Never raises for a failing or missing command.

    Args:
        cmd: Command list for ``subprocess.run()``.
        environ: Full child environment. ``None`` inherits the process env.
        timeout: Seconds before ``TimeoutExpired``; ``None`` waits forever.
        cwd: Working directory for the command.
        stream: Let the child write straight to the terminal's stderr
            instead of capturing output (long installs show their progress).

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    logger.debug("Executing: %s (cwd=%s)", cmd, cwd)
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            stdout=_STREAM_FD if stream else subprocess.PIPE,
            stderr=None if stream else subprocess.PIPE,
            text=True,
            timeout=timeout,
            env=dict(environ) if environ is not None else None,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except OSError as e:
        logger.debug("Cannot execute %s: %s", cmd[0] if cmd else "?", e)
        return {"ok": False, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout or ""
    stderr = result.stderr or ""

    if result.returncode == 0:
        return {
            "ok": True,
            "stdout": stdout,
            "stderr": stderr,
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "returncode": result.returncode,
        "error": f"Command failed (exit {result.returncode})",
        "stderr": stderr[-_ERR_TAIL:],
        "stdout": stdout[-_ERR_TAIL:],
        "elapsed_ms": elapsed_ms,
    }


def run_shell(
    script: str,
    *args: str,
    environ: Mapping[str, str] | None = None,
    stream: bool = False,
) -> dict[str, Any]:
    """Run a bash snippet; ``args`` are available as ``$1``, ``$2``, …"""
    return run_command(
        ["bash", "-c", script, "geostack", *args],
        environ=environ,
        stream=stream,
    )
