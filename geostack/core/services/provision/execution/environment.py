"""
L4 Execution — Install base and virtual environment.

Builds the child-process environment as a plain mapping, prepares the
install directories and (re)creates the isolated environment.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Mapping
from pathlib import Path

from geostack.core.models.config import ProvisionPaths
from geostack.core.models.resolution import ResolutionContext
from geostack.core.services.provision.errors import EnvironmentSetupError
from geostack.core.services.provision.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)


def _prepend_path(path_value: str, *entries: str) -> str:
    parts = [e for e in entries if e]
    if path_value:
        parts.append(path_value)
    return os.pathsep.join(parts)


def build_child_environ(
    base: Mapping[str, str],
    paths: ProvisionPaths,
    home: Path | None = None,
) -> dict[str, str]:
    """Environment for every installer subprocess.

    - user site-packages and ``--user`` installs disabled
    - uv / pip caches under the install base
    - ``~/.cargo/bin`` and ``~/.local/bin`` first on the search path
    - ``PYTHONPATH`` dropped so nothing leaks into the new environment
    """
    home = home or Path.home()
    environ = dict(base)
    environ.pop("PYTHONPATH", None)
    environ["PYTHONNOUSERSITE"] = "1"
    environ["PIP_USER"] = "0"
    environ["UV_CACHE_DIR"] = str(paths.uv_cache)
    environ["PIP_CACHE_DIR"] = str(paths.pip_cache)
    environ["PATH"] = _prepend_path(
        environ.get("PATH", ""),
        str(home / ".cargo" / "bin"),
        str(home / ".local" / "bin"),
    )
    return environ


def activated_environ(environ: Mapping[str, str], paths: ProvisionPaths) -> dict[str, str]:
    """Same as ``source .venv/bin/activate`` for child processes."""
    activated = dict(environ)
    activated.pop("PYTHONHOME", None)
    activated["VIRTUAL_ENV"] = str(paths.venv_dir)
    activated["PATH"] = _prepend_path(activated.get("PATH", ""), str(paths.venv_bin))
    return activated


def prepare_directories(paths: ProvisionPaths) -> None:
    """Create the install base, caches and environment directory.

    Raises:
        EnvironmentSetupError: A directory cannot be created or the
            install base is not writable.
    """
    try:
        for directory in (paths.install_base, paths.uv_cache, paths.pip_cache, paths.env_dir):
            directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise EnvironmentSetupError(f"Cannot create installation directories: {e}") from e

    if not os.access(paths.install_base, os.W_OK):
        raise EnvironmentSetupError(f"No write permission to {paths.install_base}")

    logger.info("Directories created under %s", paths.install_base)


def create_virtualenv(
    ctx: ResolutionContext,
    paths: ProvisionPaths,
    environ: Mapping[str, str],
) -> dict[str, str]:
    """(Re)create ``<env>/.venv`` with the resolved interpreter.

    An existing environment is removed first. Not atomic: a crash in
    between leaves no environment at all.

    Returns:
        The activated child environment.

    Raises:
        EnvironmentSetupError: Removal or ``python -m venv`` failed.
    """
    if paths.venv_dir.exists():
        logger.warning("Virtual environment already exists. Removing old environment...")
        try:
            shutil.rmtree(paths.venv_dir)
        except OSError as e:
            raise EnvironmentSetupError(
                f"Cannot remove old environment {paths.venv_dir}: {e}"
            ) from e

    result = run_command(
        [ctx.runtime_command, "-m", "venv", str(paths.venv_dir)],
        environ=environ,
        cwd=str(paths.install_base),
    )
    if not result["ok"]:
        detail = (result.get("stderr") or "").strip() or result.get("error", "")
        raise EnvironmentSetupError(f"Failed to create virtual environment: {detail}")

    logger.info("Virtual environment created with Python %s", ctx.runtime_version)
    return activated_environ(environ, paths)
