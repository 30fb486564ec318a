"""
L3 Detection — Environment-module system (Environment Modules / Lmod).

``module`` is a shell function, so every call runs in a child bash.
A successful ``module load`` is followed by ``env -0`` and the captured
environment replaces ``ModuleSystem.environ``. The current process
environment is never touched; later stages receive the mapping
explicitly.
"""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Mapping

from geostack.core.services.provision.execution.subprocess_runner import run_shell

logger = logging.getLogger(__name__)

# Variables bash sets for itself; never carried over from a child shell
_SHELL_NOISE = frozenset({"_", "SHLVL", "PWD", "OLDPWD"})


def _init_script(environ: Mapping[str, str]) -> str | None:
    """Locate the bash init file that defines ``module``."""
    for var in ("MODULESHOME", "LMOD_PKG"):
        root = environ.get(var)
        if not root:
            continue
        candidate = os.path.join(root, "init", "bash")
        if os.path.isfile(candidate):
            return candidate
    return None


def _function_exported(environ: Mapping[str, str]) -> bool:
    """Whether the parent shell exported the ``module`` function."""
    return any(key.startswith("BASH_FUNC_module") for key in environ)


def parse_env_dump(raw: str) -> dict[str, str]:
    """Parse NUL-separated ``env -0`` output into a mapping."""
    environ: dict[str, str] = {}
    for entry in raw.split("\0"):
        if not entry or "=" not in entry:
            continue
        key, value = entry.split("=", 1)
        if key in _SHELL_NOISE:
            continue
        environ[key] = value
    return environ


class ModuleSystem:
    """Run ``module`` commands against an explicit environment.

    Args:
        environ: Starting environment; updated after each successful load.
        init_script: Bash file sourced when ``module`` is not yet defined.
    """

    def __init__(self, environ: Mapping[str, str], init_script: str | None = None):
        self.environ: dict[str, str] = dict(environ)
        self.init_script = init_script
        self.loaded: list[str] = []

    @classmethod
    def detect(cls, environ: Mapping[str, str]) -> ModuleSystem | None:
        """Return a ``ModuleSystem`` if one is installed, else ``None``."""
        init = _init_script(environ)
        if init is None and not _function_exported(environ) and not environ.get("LMOD_CMD"):
            logger.info("No environment-module system detected")
            return None
        logger.info("Module system detected (init=%s)", init or "shell function")
        return cls(environ, init)

    def _prelude(self) -> str:
        if self.init_script:
            return (
                "if ! type module >/dev/null 2>&1; then "
                f". {shlex.quote(self.init_script)} >/dev/null 2>&1; fi; "
            )
        # Lmod without its init file: define module() from the Lmod binary
        return (
            'if ! type module >/dev/null 2>&1 && [ -n "$LMOD_CMD" ]; then '
            'module() { eval "$("$LMOD_CMD" bash "$@")"; }; fi; '
        )

    def purge(self) -> bool:
        """Unload every module. Safe to repeat."""
        result = run_shell(
            self._prelude() + "module purge >/dev/null 2>&1 && env -0",
            environ=self.environ,
        )
        if not result["ok"]:
            logger.debug("module purge failed: %s", result.get("error"))
            return False
        self.environ = parse_env_dump(result["stdout"])
        self.loaded.clear()
        return True

    def load(self, name: str) -> bool:
        """Load one module; on success adopt the resulting environment.

        Loading a module that is already loaded is a no-op for the
        module system, so repeated calls are safe.
        """
        result = run_shell(
            self._prelude() + 'module load "$1" >/dev/null 2>&1 && env -0',
            name,
            environ=self.environ,
        )
        if not result["ok"]:
            logger.debug("module load %s failed: %s", name, result.get("error"))
            return False
        self.environ = parse_env_dump(result["stdout"])
        if name not in self.loaded:
            self.loaded.append(name)
        return True

    def avail(self, pattern: str) -> list[str]:
        """List ``module avail`` lines mentioning ``pattern`` (case-insensitive)."""
        result = run_shell(
            self._prelude() + "module avail 2>&1",
            environ=self.environ,
        )
        text = result.get("stdout", "")
        needle = pattern.lower()
        return [line.rstrip() for line in text.splitlines() if needle in line.lower()]
