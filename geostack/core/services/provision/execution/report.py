"""
L4 Execution — Installation summary file.

Writes ``installation_info.txt`` next to the environment.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from geostack.core.models.config import ProvisionPaths
from geostack.core.models.manifest import Manifest
from geostack.core.models.outcome import InstallReport, VerificationReport
from geostack.core.models.resolution import ResolutionContext

logger = logging.getLogger(__name__)


def activation_commands(ctx: ResolutionContext, paths: ProvisionPaths) -> list[str]:
    """Shell lines that re-enter the environment later."""
    lines = []
    if ctx.module_system:
        lines.append("module purge")
    if ctx.runtime_module:
        lines.append(f"module load {ctx.runtime_module}")
    if ctx.lib_module:
        lines.append(f"module load {ctx.lib_module}")
    lines.append(f"source {paths.venv_dir / 'bin' / 'activate'}")
    return lines


def render_summary(
    ctx: ResolutionContext,
    paths: ProvisionPaths,
    manifest: Manifest,
    report: InstallReport,
    verification: VerificationReport,
    *,
    now: datetime | None = None,
) -> str:
    now = now or datetime.now()
    gdal = str(ctx.native_library_version) if ctx.native_library_version else "Not detected"

    lines = [
        "Geospatial Environment Installation Summary",
        "=========================================",
        f"Installation Date: {now:%Y-%m-%d %H:%M:%S}",
        f"Install Location: {paths.env_dir}",
        f"Working Directory: {paths.work_dir}",
        f"Python Version: {ctx.runtime_version} ({ctx.runtime_source.value})",
        f"GDAL Version: {gdal} ({ctx.lib_source.value})",
        f"Virtual Environment: {paths.venv_dir}",
        f"Package Count: {len(manifest)}",
        f"Installer: {report.tool}",
        "",
    ]

    if report.degraded:
        lines.append("Bulk install failed; critical packages were installed individually.")
    if report.failed:
        lines.append("Failed installs: " + ", ".join(report.failed))
    if verification.failed:
        lines.append("Failed imports: " + ", ".join(verification.failed))
    else:
        lines.append("All critical packages verified.")
    lines.append("")

    lines.append("To activate this environment:")
    lines.extend(f"  {cmd}" for cmd in activation_commands(ctx, paths))
    lines += [
        "",
        "To update packages:",
        "  Activate environment first, then:",
        "  uv pip install --upgrade package_name",
        "",
        "To add new packages:",
        "  Activate environment first, then:",
        "  uv pip install new_package_name",
    ]
    return "\n".join(lines) + "\n"


def write_summary(text: str, path: Path) -> Path | None:
    """Write the summary. A write failure is logged, not raised."""
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot write installation info to %s: %s", path, e)
        return None
    logger.info("Installation info saved to %s", path)
    return path
