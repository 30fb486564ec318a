"""
L2 Resolver — Manifest generation.

Turns a ``ResolutionContext`` into the pinned requirements list. Pure
and deterministic; the only I/O is ``write_manifest``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from geostack.core.models.manifest import Manifest, ManifestSection, Requirement
from geostack.core.models.resolution import ResolutionContext, SemVer
from geostack.core.services.provision.data.packages import (
    GDAL_DEFAULT_VERSION,
    GDAL_PACKAGE,
    MANIFEST_SECTIONS,
    NUMPY_CURRENT_VERSION,
    NUMPY_LEGACY_VERSION,
    NUMPY_PACKAGE,
    NUMPY_SPLIT_MINOR,
)
from geostack.core.services.provision.errors import ManifestError

logger = logging.getLogger(__name__)


def gdal_pin(ctx: ResolutionContext, default: str = GDAL_DEFAULT_VERSION) -> str:
    """GDAL binding version: the detected library, else the default."""
    if ctx.native_library_version is not None:
        return str(ctx.native_library_version)
    return default


def numpy_pin(runtime_version: SemVer | None) -> str:
    """numpy 1.x for Python 3.9/3.10, numpy 2.x otherwise."""
    if (
        runtime_version is not None
        and runtime_version.major == 3
        and runtime_version.minor < NUMPY_SPLIT_MINOR
    ):
        return NUMPY_LEGACY_VERSION
    return NUMPY_CURRENT_VERSION


def generate_manifest(
    ctx: ResolutionContext,
    *,
    sections: tuple[tuple[str, tuple[str, ...]], ...] = MANIFEST_SECTIONS,
    gdal_default: str = GDAL_DEFAULT_VERSION,
) -> Manifest:
    """Render the static package list with the two computed pins."""
    computed = {
        GDAL_PACKAGE: f"=={gdal_pin(ctx, gdal_default)}",
        NUMPY_PACKAGE: f"=={numpy_pin(ctx.runtime_version)}",
    }

    built: list[ManifestSection] = []
    for title, lines in sections:
        reqs: list[Requirement] = []
        for line in lines:
            req = Requirement.parse(line)
            if req.name in computed:
                req = Requirement(name=req.name, spec=computed[req.name])
            reqs.append(req)
        built.append(ManifestSection(title=title, requirements=tuple(reqs)))

    manifest = Manifest(sections=tuple(built))
    logger.info(
        "Manifest: %d packages (gdal%s, numpy%s)",
        len(manifest), computed[GDAL_PACKAGE], computed[NUMPY_PACKAGE],
    )
    return manifest


def render_manifest(manifest: Manifest) -> str:
    """requirements.txt text, one commented block per section."""
    blocks = []
    for section in manifest.sections:
        lines = [f"# {section.title}"]
        lines.extend(req.line for req in section.requirements)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def write_manifest(manifest: Manifest, path: Path) -> Path:
    """Write the manifest; a filesystem error aborts the run.

    Raises:
        ManifestError: The file could not be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_manifest(manifest), encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot write {path}: {e}") from e
    logger.info("Requirements file created: %s", path)
    return path
