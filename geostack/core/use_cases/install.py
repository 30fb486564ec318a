"""
Install use case — provision a geospatial environment end to end.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from geostack.core.config.loader import ConfigError, load_config
from geostack.core.models.config import ProvisionConfig, ProvisionPaths
from geostack.core.services.provision.errors import ProvisionError
from geostack.core.services.provision.orchestration.orchestrator import (
    ProvisionRun,
    run_provision,
)


@dataclass
class InstallResult:
    """Result of an install run."""

    paths: ProvisionPaths | None = None
    run: ProvisionRun | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        data: dict = {
            "ok": self.ok,
            "error": self.error,
            "warnings": self.warnings,
        }
        if self.paths is not None:
            data["install_location"] = str(self.paths.env_dir)
            data["venv"] = str(self.paths.venv_dir)
        if self.run is not None:
            data["resolution"] = self.run.context.to_dict()
            data["package_count"] = len(self.run.manifest)
            data["install"] = self.run.report.to_dict()
            data["verification"] = self.run.verification.to_dict()
            data["summary_file"] = str(self.run.summary_path) if self.run.summary_path else None
        return data


def run_install(
    install_base: Path,
    work_dir: Path,
    *,
    env_name: str | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    on_step: Callable[[str], None] | None = None,
) -> InstallResult:
    """Load config, then run the provisioning workflow.

    Fatal errors are returned in ``result.error``, never raised.
    """
    result = InstallResult()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    if env_name:
        try:
            config = ProvisionConfig.model_validate({**config.model_dump(), "env_name": env_name})
        except ValidationError as e:
            result.error = f"Invalid environment name: {e.errors()[0]['msg']}"
            return result

    result.paths = ProvisionPaths(
        install_base=install_base,
        work_dir=work_dir,
        env_name=config.env_name,
    )

    try:
        result.run = run_provision(
            config,
            result.paths,
            os.environ if environ is None else environ,
            on_step=on_step,
        )
    except ProvisionError as e:
        result.error = str(e)
        return result

    result.warnings = list(result.run.warnings)
    return result
