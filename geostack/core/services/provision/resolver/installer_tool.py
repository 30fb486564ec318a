"""
L2 Resolver — Installer tool selection.

Prefers ``uv``. When it is missing, tries to bootstrap it (curl, then
wget, then ``pip install --user uv``) and re-checks the search path.
If all of that fails the run continues with plain ``pip``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from geostack.core.models.resolution import Candidate, ranked
from geostack.core.services.provision.data.candidates import (
    UV_BOOTSTRAP_METHODS,
    UV_INSTALL_URL,
)
from geostack.core.services.provision.detection.runtime import find_executable
from geostack.core.services.provision.domain.probe import probe_first
from geostack.core.services.provision.execution.subprocess_runner import (
    run_command,
    run_shell,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallerTool:
    """How packages get installed into the target environment."""

    name: str               # "uv" or "pip"
    executable: str = ""    # uv binary; unused for pip

    def install_cmd(self, venv_python: Path | str, *args: str) -> list[str]:
        if self.name == "uv":
            return [self.executable, "pip", "install", "--python", str(venv_python), *args]
        return [str(venv_python), "-m", "pip", "install", *args]


PIP = InstallerTool(name="pip")


def _bootstrap(
    method: Candidate,
    environ: Mapping[str, str],
    python_cmd: str,
    url: str,
) -> bool:
    """Run one bootstrap method, then check whether ``uv`` is usable."""
    if method.name == "present":
        return find_executable("uv", environ) is not None

    if method.name in ("curl", "wget"):
        if not find_executable(method.name, environ):
            return False
        logger.warning("Installing uv package manager via %s...", method.name)
        fetch = 'curl -LsSf "$1"' if method.name == "curl" else 'wget -qO- "$1"'
        result = run_shell(f"{fetch} | sh", url, environ=environ, stream=True)
    elif method.name == "pip":
        logger.warning("Neither curl nor wget produced uv. Installing via pip...")
        result = run_command(
            [python_cmd, "-m", "pip", "install", "--user", "uv"],
            environ=environ,
            stream=True,
        )
    else:
        return False

    if not result["ok"]:
        logger.warning("uv bootstrap via %s failed: %s", method.name, result.get("error"))
    return find_executable("uv", environ) is not None


def select_installer_tool(
    environ: Mapping[str, str],
    python_cmd: str,
    *,
    bootstrap: bool = True,
    url: str = UV_INSTALL_URL,
) -> InstallerTool:
    """Pick ``uv`` (installing it if allowed), else ``pip``.

    ``environ`` must already carry ``~/.cargo/bin`` and ``~/.local/bin``
    on its search path, where the bootstrap drops the binary.
    """
    methods = ranked(UV_BOOTSTRAP_METHODS if bootstrap else UV_BOOTSTRAP_METHODS[:1])
    chosen = probe_first(
        methods,
        lambda m: _bootstrap(m, environ, python_cmd, url),
        label="uv source",
    )
    uv = find_executable("uv", environ) if chosen is not None else None
    if uv:
        return InstallerTool(name="uv", executable=uv)

    if bootstrap:
        logger.warning("uv installation failed. Falling back to pip.")
    else:
        logger.warning("uv not found. Falling back to pip.")
    return PIP
