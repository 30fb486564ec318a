"""
Provisioning configuration — what to look for and where to install.

``ProvisionConfig`` holds the tunable lists (defaults are the stock
HPC setup) and can be overridden from ``geostack.yml``.
``ProvisionPaths`` derives every on-disk location from the install
base and the environment name.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from geostack.core.models.resolution import Candidate, ranked
from geostack.core.services.provision.data import candidates as _cand
from geostack.core.services.provision.data import packages as _pkgs

DEFAULT_ENV_NAME = "geo-stack"


class PythonModuleSpec(BaseModel):
    """A Python module and the interpreter it puts on the search path."""

    name: str
    command: str = "python3"


class ProvisionConfig(BaseModel):
    """Tunable inputs of a provisioning run."""

    env_name: str = DEFAULT_ENV_NAME

    python_modules: list[PythonModuleSpec] = Field(
        default_factory=lambda: [
            PythonModuleSpec(name=name, command=command)
            for name, command in _cand.PYTHON_MODULES
        ]
    )
    gdal_modules: list[str] = Field(default_factory=lambda: list(_cand.GDAL_MODULES))
    interpreters: list[str] = Field(default_factory=lambda: list(_cand.LOCAL_INTERPRETERS))

    critical_packages: list[str] = Field(
        default_factory=lambda: list(_pkgs.CRITICAL_PACKAGES)
    )
    verify_packages: list[str] = Field(default_factory=lambda: list(_pkgs.VERIFY_PACKAGES))
    gdal_default_version: str = _pkgs.GDAL_DEFAULT_VERSION

    uv_install_url: str = _cand.UV_INSTALL_URL
    bootstrap_uv: bool = True

    @field_validator("python_modules", mode="before")
    @classmethod
    def _accept_bare_module_names(cls, value: object) -> object:
        # "python/3.12" is shorthand for {name: python/3.12, command: python3}
        if isinstance(value, list):
            return [{"name": item} if isinstance(item, str) else item for item in value]
        return value

    @field_validator("env_name")
    @classmethod
    def _env_name_is_a_name(cls, value: str) -> str:
        value = value.strip()
        if not value or "/" in value or value in (".", ".."):
            raise ValueError(f"env_name must be a plain directory name, got {value!r}")
        return value

    def python_candidates(self) -> list[Candidate]:
        return [
            Candidate(name=spec.name, rank=idx, command=spec.command)
            for idx, spec in enumerate(self.python_modules)
        ]

    def gdal_candidates(self) -> list[Candidate]:
        return ranked(self.gdal_modules)

    def interpreter_candidates(self) -> list[Candidate]:
        return [
            Candidate(name=name, rank=idx, command=name)
            for idx, name in enumerate(self.interpreters)
        ]


def expand_user_token(path: str, user: str | None = None) -> str:
    """Replace ``$USER`` / ``${USER}`` with the invoking user's name."""
    if user is None:
        user = os.environ.get("USER") or os.environ.get("LOGNAME") or ""
    return path.replace("${USER}", user).replace("$USER", user)


class ProvisionPaths(BaseModel, frozen=True):
    """Every location a run reads or writes."""

    install_base: Path
    work_dir: Path
    env_name: str = DEFAULT_ENV_NAME

    @property
    def env_dir(self) -> Path:
        return self.install_base / self.env_name

    @property
    def venv_dir(self) -> Path:
        return self.env_dir / ".venv"

    @property
    def venv_bin(self) -> Path:
        return self.venv_dir / "bin"

    @property
    def venv_python(self) -> Path:
        return self.venv_bin / "python"

    @property
    def requirements_file(self) -> Path:
        return self.env_dir / "requirements.txt"

    @property
    def info_file(self) -> Path:
        return self.env_dir / "installation_info.txt"

    @property
    def uv_cache(self) -> Path:
        return self.install_base / ".uv-cache"

    @property
    def pip_cache(self) -> Path:
        return self.install_base / ".pip-cache"
