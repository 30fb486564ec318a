"""
L5 Orchestration — The provisioning run.

Resolve → configure → create env → manifest → install → verify → report.
Fatal problems raise ``ProvisionError``; everything else ends up in
the returned ``ProvisionRun``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from geostack.core.models.config import ProvisionConfig, ProvisionPaths
from geostack.core.models.manifest import Manifest
from geostack.core.models.outcome import InstallReport, VerificationReport
from geostack.core.models.resolution import ResolutionContext
from geostack.core.services.provision.execution.environment import (
    build_child_environ,
    create_virtualenv,
    prepare_directories,
)
from geostack.core.services.provision.execution.installer import install_all
from geostack.core.services.provision.execution.report import (
    render_summary,
    write_summary,
)
from geostack.core.services.provision.execution.verifier import verify_environment
from geostack.core.services.provision.resolver.installer_tool import select_installer_tool
from geostack.core.services.provision.resolver.manifest import (
    generate_manifest,
    write_manifest,
)
from geostack.core.services.provision.resolver.resolution import resolve_environment

logger = logging.getLogger(__name__)


@dataclass
class ProvisionRun:
    """Everything a completed run produced."""

    context: ResolutionContext
    manifest: Manifest
    report: InstallReport
    verification: VerificationReport
    summary_path: Path | None = None
    warnings: list[str] = field(default_factory=list)


def run_provision(
    config: ProvisionConfig,
    paths: ProvisionPaths,
    environ: Mapping[str, str],
    *,
    on_step: Callable[[str], None] | None = None,
) -> ProvisionRun:
    """Provision the environment described by ``paths``.

    Args:
        config: Preference lists and package lists.
        paths: Install base, working dir and environment name.
        environ: Starting environment (usually ``os.environ``).
        on_step: Progress callback, called with a short label per stage.

    Raises:
        ProvisionError: No usable runtime, unusable install base,
            venv creation failure or manifest write failure.
    """
    def step(label: str) -> None:
        logger.info(label)
        if on_step is not None:
            on_step(label)

    step("Loading system modules...")
    ctx = resolve_environment(config, environ)

    step("Setting up environment variables...")
    child_environ = build_child_environ(ctx.environ, paths)

    step("Creating installation directories...")
    prepare_directories(paths)

    step("Selecting package installer...")
    tool = select_installer_tool(
        child_environ,
        ctx.runtime_command,
        bootstrap=config.bootstrap_uv,
        url=config.uv_install_url,
    )

    step("Creating Python virtual environment...")
    venv_environ = create_virtualenv(ctx, paths, child_environ)

    step("Creating requirements.txt...")
    manifest = generate_manifest(ctx, gdal_default=config.gdal_default_version)
    write_manifest(manifest, paths.requirements_file)

    step(f"Installing Python packages with {tool.name}...")
    report = install_all(manifest, ctx, paths, venv_environ, tool, config)

    step("Verifying installation...")
    verification = verify_environment(paths.venv_python, config.verify_packages, venv_environ)

    summary = render_summary(ctx, paths, manifest, report, verification)
    summary_path = write_summary(summary, paths.info_file)

    return ProvisionRun(
        context=ctx,
        manifest=manifest,
        report=report,
        verification=verification,
        summary_path=summary_path,
        warnings=[*ctx.warnings, *report.warnings],
    )
