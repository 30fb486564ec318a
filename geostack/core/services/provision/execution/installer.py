"""
L4 Execution — Package installation.

Install order:

  1. core tooling (pip, setuptools, wheel, cython) and the numpy pin
  2. GDAL bindings matching the resolved native library
  3. revision-pinned git packages
  4. bulk install of requirements.txt; if that fails, each critical
     package once, on its own

No step aborts the run. Every attempt becomes an ``InstallOutcome``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path

from geostack.core.models.config import ProvisionConfig, ProvisionPaths
from geostack.core.models.manifest import Manifest
from geostack.core.models.outcome import InstallOutcome, InstallReport
from geostack.core.models.resolution import ResolutionContext
from geostack.core.services.provision.data.packages import (
    CORE_TOOLING,
    GDAL_MODULE_HINT,
    GDAL_PACKAGE,
    GIT_PACKAGES,
    NUMPY_PACKAGE,
)
from geostack.core.services.provision.execution.subprocess_runner import run_command
from geostack.core.services.provision.resolver.installer_tool import InstallerTool

logger = logging.getLogger(__name__)


def _install(
    tool: InstallerTool,
    venv_python: Path,
    args: list[str],
    environ: Mapping[str, str],
    *,
    package: str,
    phase: str,
) -> InstallOutcome:
    """One installer invocation → one outcome."""
    started_at = datetime.now(UTC).isoformat()
    start = time.monotonic()
    result = run_command(tool.install_cmd(venv_python, *args), environ=environ, stream=True)
    timing = {
        "started_at": started_at,
        "ended_at": datetime.now(UTC).isoformat(),
        "duration_ms": int((time.monotonic() - start) * 1000),
    }
    if result["ok"]:
        return InstallOutcome.installed(package, phase=phase, **timing)
    return InstallOutcome.failure(
        package,
        result.get("error", "install failed"),
        phase=phase,
        **timing,
    )


def _warn(report: InstallReport, message: str) -> None:
    logger.warning(message)
    report.warnings.append(message)


def install_core(
    report: InstallReport,
    manifest: Manifest,
    tool: InstallerTool,
    paths: ProvisionPaths,
    environ: Mapping[str, str],
) -> None:
    """Step 1: build tooling, then numpy at its computed pin."""
    outcome = report.add(_install(
        tool, paths.venv_python, ["--upgrade", *CORE_TOOLING], environ,
        package=" ".join(CORE_TOOLING), phase="core",
    ))
    if outcome.failed:
        _warn(report, f"Core tooling upgrade failed: {outcome.error}")

    numpy = manifest.get(NUMPY_PACKAGE)
    if numpy is None:
        return
    outcome = report.add(_install(
        tool, paths.venv_python, [numpy.line], environ,
        package=numpy.line, phase="core",
    ))
    if outcome.failed:
        _warn(report, f"{numpy.line} installation failed: {outcome.error}")


def install_native_binding(
    report: InstallReport,
    ctx: ResolutionContext,
    manifest: Manifest,
    tool: InstallerTool,
    paths: ProvisionPaths,
    environ: Mapping[str, str],
) -> None:
    """Step 2: GDAL bindings.

    With a detected system GDAL the exact version is tried first and an
    unpinned install second. Without one, only the default pin is tried.
    """
    pinned = manifest.get(GDAL_PACKAGE)
    line = pinned.line if pinned else GDAL_PACKAGE

    if ctx.native_library_version is not None:
        logger.info(
            "Installing GDAL Python bindings to match system GDAL %s",
            ctx.native_library_version,
        )
        outcome = report.add(_install(
            tool, paths.venv_python, [line], environ, package=line, phase="native",
        ))
        if outcome.ok:
            return
        _warn(report, "Exact GDAL version match failed, trying without version pin...")
        outcome = report.add(_install(
            tool, paths.venv_python, [GDAL_PACKAGE], environ,
            package=GDAL_PACKAGE, phase="native",
        ))
        if outcome.failed:
            _warn(report, f"Unpinned GDAL installation failed: {outcome.error}")
        return

    _warn(report, "No system GDAL detected, attempting to install from pip...")
    outcome = report.add(_install(
        tool, paths.venv_python, [line], environ, package=line, phase="native",
    ))
    if outcome.failed:
        _warn(
            report,
            "GDAL installation failed. You may need to load a GDAL module first "
            f"(try: module load {GDAL_MODULE_HINT}).",
        )


def install_git_packages(
    report: InstallReport,
    tool: InstallerTool,
    paths: ProvisionPaths,
    environ: Mapping[str, str],
    packages: tuple[tuple[str, str], ...] = GIT_PACKAGES,
) -> None:
    """Step 3: externally hosted packages; each may fail on its own."""
    for name, url in packages:
        outcome = report.add(_install(
            tool, paths.venv_python, [url], environ, package=name, phase="git",
        ))
        if outcome.failed:
            _warn(report, f"{name} installation failed")


def install_bulk(
    report: InstallReport,
    tool: InstallerTool,
    paths: ProvisionPaths,
    environ: Mapping[str, str],
    critical: list[str] | tuple[str, ...],
) -> None:
    """Step 4: everything at once; degrade to the critical subset."""
    outcome = report.add(_install(
        tool, paths.venv_python, ["-r", str(paths.requirements_file)], environ,
        package="requirements.txt", phase="bulk",
    ))
    report.bulk_ok = outcome.ok
    if outcome.ok:
        return

    report.degraded = True
    _warn(report, "Some packages failed. Attempting individual installation...")
    for package in critical:
        outcome = report.add(_install(
            tool, paths.venv_python, [package], environ,
            package=package, phase="critical",
        ))
        if outcome.failed:
            _warn(report, f"{package} installation failed")


def install_all(
    manifest: Manifest,
    ctx: ResolutionContext,
    paths: ProvisionPaths,
    environ: Mapping[str, str],
    tool: InstallerTool,
    config: ProvisionConfig | None = None,
) -> InstallReport:
    """Run every install step against the environment at ``paths``."""
    config = config or ProvisionConfig()
    report = InstallReport(tool=tool.name)

    logger.info("Step 1/4: Installing core dependencies...")
    install_core(report, manifest, tool, paths, environ)

    logger.info("Step 2/4: Installing GDAL Python bindings...")
    install_native_binding(report, ctx, manifest, tool, paths, environ)

    logger.info("Step 3/4: Installing custom Git packages...")
    install_git_packages(report, tool, paths, environ)

    logger.info("Step 4/4: Installing all packages from requirements.txt...")
    install_bulk(report, tool, paths, environ, config.critical_packages)

    logger.info(
        "Package installation completed: %d ok, %d failed",
        len(report.installed), len(report.failed),
    )
    return report
