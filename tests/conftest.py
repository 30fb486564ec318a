"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from geostack.core.models.config import ProvisionPaths
from geostack.core.models.resolution import ResolutionContext, ResourceSource, SemVer


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def paths(tmp_path: Path) -> ProvisionPaths:
    """Install layout rooted in a temporary data partition."""
    return ProvisionPaths(
        install_base=tmp_path / "data",
        work_dir=tmp_path / "work",
        env_name="geo-stack",
    )


def make_context(
    python: str = "3.12.9",
    gdal: str | None = "3.11.0",
    *,
    modules: bool = True,
) -> ResolutionContext:
    """Build a resolved context without probing anything."""
    return ResolutionContext(
        runtime_command="/opt/python/3.12.9/bin/python3.12",
        runtime_version=SemVer.parse(python),
        native_library_version=SemVer.parse(gdal) if gdal else None,
        runtime_source=ResourceSource.MODULE if modules else ResourceSource.SYSTEM,
        lib_source=(
            ResourceSource.NOT_FOUND if gdal is None
            else ResourceSource.MODULE if modules else ResourceSource.SYSTEM
        ),
        module_system=modules,
        runtime_module="python/3.12.9/anaconda" if modules else None,
        lib_module="rh9/gdal/3.11.0" if modules and gdal else None,
        environ={"PATH": "/opt/python/3.12.9/bin:/usr/bin"},
    )


@pytest.fixture
def context() -> ResolutionContext:
    """Scenario A: Python and GDAL both loaded from modules."""
    return make_context()
