"""
L2 Resolver — Module / runtime resolution with fallback.

Probes the Python runtime and the native GDAL library, then folds both
results into a ``ResolutionContext``. Runtime resolution order:

  1. Python modules, in preference order (if a module system exists)
  2. Local interpreters on the search path (``python3.12`` … ``python3``)
  3. Nothing left → fatal ``ResolutionError``

GDAL resolution order:

  1. GDAL modules, in preference order (if a module system exists)
  2. ``gdalinfo`` already on the search path
  3. Not found → the manifest uses the default pin
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from geostack.core.models.config import ProvisionConfig
from geostack.core.models.resolution import (
    ResolutionContext,
    ResourceSource,
    SemVer,
)
from geostack.core.services.provision.detection.modules import ModuleSystem
from geostack.core.services.provision.detection.runtime import (
    find_executable,
    get_tool_version,
)
from geostack.core.services.provision.domain.probe import probe_first
from geostack.core.services.provision.domain.version import (
    MIN_PYTHON,
    check_version_floor,
)
from geostack.core.services.provision.errors import ResolutionError

logger = logging.getLogger(__name__)


@dataclass
class RuntimeProbe:
    """Outcome of probing for a Python runtime."""

    command: str = ""
    source: ResourceSource = ResourceSource.NOT_FOUND
    module: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class LibraryProbe:
    """Outcome of probing for the native GDAL library."""

    version: SemVer | None = None
    source: ResourceSource = ResourceSource.NOT_FOUND
    module: str | None = None
    warnings: list[str] = field(default_factory=list)


def _available_listing(modules: ModuleSystem, pattern: str) -> str:
    lines = modules.avail(pattern)
    return "\n".join(lines) if lines else "(none)"


def resolve_runtime(
    config: ProvisionConfig,
    environ: Mapping[str, str],
    modules: ModuleSystem | None = None,
) -> RuntimeProbe:
    """Pick the Python interpreter command.

    When ``modules`` is given, a successful load updates
    ``modules.environ``; the interpreter is then looked up there.
    """
    probe = RuntimeProbe()

    if modules is not None:
        chosen = probe_first(
            config.python_candidates(),
            lambda c: modules.load(c.name),
            label="Python module",
        )
        if chosen is not None:
            probe.command = chosen.command
            probe.source = ResourceSource.MODULE
            probe.module = chosen.name
            return probe

        msg = "No Python module found. Using system Python."
        logger.warning(msg)
        logger.warning("Available Python modules:\n%s", _available_listing(modules, "python"))
        probe.warnings.append(msg)
        environ = modules.environ

    chosen = probe_first(
        config.interpreter_candidates(),
        lambda c: find_executable(c.command, environ) is not None,
        label="local interpreter",
    )
    if chosen is not None:
        probe.command = chosen.command
        probe.source = ResourceSource.SYSTEM
    return probe


def resolve_native_library(
    environ: Mapping[str, str],
    modules: ModuleSystem | None = None,
    config: ProvisionConfig | None = None,
) -> LibraryProbe:
    """Find the native GDAL version. Absence is never an error."""
    config = config or ProvisionConfig()
    probe = LibraryProbe()

    if modules is not None:
        chosen = probe_first(
            config.gdal_candidates(),
            lambda c: modules.load(c.name),
            label="GDAL module",
        )
        if chosen is not None:
            probe.source = ResourceSource.MODULE
            probe.module = chosen.name
            probe.version = get_tool_version("gdal", modules.environ)
            if probe.version is None:
                msg = (
                    f"GDAL module {chosen.name} loaded but its version could not "
                    f"be determined; using default GDAL {config.gdal_default_version}"
                )
                logger.warning(msg)
                probe.warnings.append(msg)
            else:
                logger.info("System GDAL version: %s", probe.version)
            return probe

        msg = "No GDAL module found. Will attempt to install from pip."
        logger.warning(msg)
        logger.warning("Available GDAL modules:\n%s", _available_listing(modules, "gdal"))
        probe.warnings.append(msg)
        environ = modules.environ

    if find_executable("gdalinfo", environ):
        probe.source = ResourceSource.SYSTEM
        probe.version = get_tool_version("gdal", environ)
        if probe.version is None:
            msg = "gdalinfo found but its version could not be determined"
            logger.warning(msg)
            probe.warnings.append(msg)
    return probe


def build_context(
    runtime: RuntimeProbe,
    library: LibraryProbe,
    environ: Mapping[str, str],
    *,
    module_system: bool = False,
    floor: SemVer = MIN_PYTHON,
    warnings: list[str] | None = None,
) -> ResolutionContext:
    """Combine both probe results and enforce the runtime floor.

    Raises:
        ResolutionError: No interpreter, unreadable version, or a
            version below ``floor``.
    """
    if not runtime.command:
        raise ResolutionError("No suitable Python found. Please load a Python module.")

    executable = find_executable(runtime.command, environ)
    if not executable:
        raise ResolutionError(
            f"Python command '{runtime.command}' is not on the search path. "
            "Please load a Python module."
        )

    version = get_tool_version("python", environ, executable=executable)
    if version is None:
        raise ResolutionError(f"Could not determine the version of {executable}")

    check = check_version_floor(version, floor)
    if not check["valid"]:
        raise ResolutionError(check["message"])

    logger.info("Using Python: %s (version %s)", executable, version)
    return ResolutionContext(
        runtime_command=executable,
        runtime_version=version,
        native_library_version=library.version,
        runtime_source=runtime.source,
        lib_source=library.source,
        module_system=module_system,
        runtime_module=runtime.module,
        lib_module=library.module,
        environ=dict(environ),
        warnings=[*(warnings or []), *runtime.warnings, *library.warnings],
    )


def resolve_environment(
    config: ProvisionConfig | None = None,
    environ: Mapping[str, str] | None = None,
) -> ResolutionContext:
    """Run the full probe: purge, runtime, GDAL, context."""
    config = config or ProvisionConfig()
    base = dict(os.environ if environ is None else environ)

    warnings: list[str] = []
    modules = ModuleSystem.detect(base)
    if modules is None:
        logger.warning("Module system not available. Using system Python and GDAL.")
    elif not modules.purge():
        msg = "module purge failed; previously loaded modules may still be active"
        logger.warning(msg)
        warnings.append(msg)

    runtime = resolve_runtime(config, base, modules)
    library = resolve_native_library(base, modules, config)

    final_environ = modules.environ if modules is not None else base
    return build_context(
        runtime,
        library,
        final_environ,
        module_system=modules is not None,
        warnings=warnings,
    )
