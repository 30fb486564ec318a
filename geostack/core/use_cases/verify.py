"""
Verify use case — re-run the import check on an existing environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from geostack.core.config.loader import ConfigError, load_config
from geostack.core.models.config import ProvisionPaths
from geostack.core.models.outcome import VerificationReport
from geostack.core.services.provision.execution.environment import (
    activated_environ,
    build_child_environ,
)
from geostack.core.services.provision.execution.verifier import verify_environment


@dataclass
class VerifyResult:
    """Result of an import check."""

    report: VerificationReport | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.report is None:
            return {"error": self.error}
        return self.report.to_dict()


def run_verify(
    install_base: Path,
    *,
    env_name: str | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> VerifyResult:
    result = VerifyResult()
    try:
        config = load_config(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    paths = ProvisionPaths(
        install_base=install_base,
        work_dir=Path.cwd(),
        env_name=env_name or config.env_name,
    )
    if not paths.venv_python.exists():
        result.error = f"No environment found at {paths.venv_dir}"
        return result

    child = build_child_environ(os.environ if environ is None else environ, paths)
    result.report = verify_environment(
        paths.venv_python,
        config.verify_packages,
        activated_environ(child, paths),
    )
    return result
