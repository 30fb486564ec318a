"""
Tests for module/runtime resolution — the fallback scenarios.

The module system and every executable lookup are faked, so these run
the same on a laptop as on a cluster login node.
"""

from unittest.mock import patch

import pytest

from geostack.core.models.config import ProvisionConfig
from geostack.core.models.resolution import ResourceSource, SemVer
from geostack.core.services.provision.detection.modules import ModuleSystem
from geostack.core.services.provision.errors import ResolutionError
from geostack.core.services.provision.resolver import resolution
from geostack.core.services.provision.resolver.resolution import (
    LibraryProbe,
    RuntimeProbe,
    build_context,
    resolve_environment,
    resolve_native_library,
    resolve_runtime,
)


class FakeModules:
    """Stands in for ``ModuleSystem``: loads succeed for ``available`` names."""

    def __init__(self, available, environ=None, purge_ok=True):
        self.available = list(available)
        self.purge_ok = purge_ok
        self.environ = dict(environ or {"PATH": "/usr/bin"})
        self.loaded = []
        self.purged = False
        self.attempts = []

    def purge(self):
        self.purged = True
        return self.purge_ok

    def load(self, name):
        self.attempts.append(name)
        if name not in self.available:
            return False
        self.loaded.append(name)
        self.environ = {**self.environ, "LOADEDMODULES": ":".join(self.loaded)}
        return True

    def avail(self, pattern):
        return [n for n in self.available if pattern in n]


def _fake_which(*present):
    def which(name, environ):
        if name.startswith("/"):
            return name
        return f"/opt/bin/{name}" if name in present else None
    return which


def _fake_versions(python="3.12.9", gdal="3.11.0"):
    def version(tool, environ, *, executable=None):
        if tool == "python":
            return SemVer.parse(python) if python else None
        if tool == "gdal":
            return SemVer.parse(gdal) if gdal else None
        return None
    return version


def _patched(fake_modules, which, version):
    return (
        patch.object(ModuleSystem, "detect", return_value=fake_modules),
        patch.object(resolution, "find_executable", side_effect=which),
        patch.object(resolution, "get_tool_version", side_effect=version),
    )


def _resolve(fake_modules, which, version, config=None):
    p1, p2, p3 = _patched(fake_modules, which, version)
    with p1, p2, p3:
        return resolve_environment(config or ProvisionConfig(), {"PATH": "/usr/bin"})


class TestScenarios:
    def test_everything_from_modules(self):
        fake = FakeModules(["python/3.12.9/anaconda", "rh9/gdal/3.11.0"])
        ctx = _resolve(fake, _fake_which("python3.12", "gdalinfo"), _fake_versions())

        assert fake.purged
        assert ctx.module_system is True
        assert ctx.runtime_source == ResourceSource.MODULE
        assert ctx.runtime_module == "python/3.12.9/anaconda"
        assert ctx.runtime_command == "/opt/bin/python3.12"
        assert ctx.runtime_version == SemVer(major=3, minor=12, patch=9)
        assert ctx.lib_source == ResourceSource.MODULE
        assert ctx.lib_module == "rh9/gdal/3.11.0"
        assert str(ctx.native_library_version) == "3.11.0"
        assert ctx.warnings == []
        # the loaded modules' environment is carried forward
        assert ctx.environ["LOADEDMODULES"] == "python/3.12.9/anaconda:rh9/gdal/3.11.0"

    def test_fallback_python_no_gdal(self):
        fake = FakeModules(["python/3.11"])
        ctx = _resolve(fake, _fake_which("python3.11"), _fake_versions("3.11.7", None))

        assert ctx.runtime_module == "python/3.11"
        assert ctx.runtime_command == "/opt/bin/python3.11"
        assert ctx.native_library_version is None
        assert ctx.lib_source == ResourceSource.NOT_FOUND
        assert "No GDAL module found. Will attempt to install from pip." in ctx.warnings
        # every GDAL candidate was tried in preference order
        gdal_attempts = [a for a in fake.attempts if "gdal" in a]
        assert gdal_attempts == ["rh9/gdal/3.11.0", "gdal/3.11.0", "gdal/3.11", "gdal"]

    def test_failed_purge_is_reported(self):
        fake = FakeModules(["python/3.12.9/anaconda", "rh9/gdal/3.11.0"], purge_ok=False)
        ctx = _resolve(fake, _fake_which("python3.12", "gdalinfo"), _fake_versions())

        assert fake.purged
        assert ctx.runtime_module == "python/3.12.9/anaconda"
        assert ctx.warnings == [
            "module purge failed; previously loaded modules may still be active",
        ]

    def test_nothing_anywhere_is_fatal(self):
        with pytest.raises(ResolutionError, match="No suitable Python found"):
            _resolve(None, _fake_which(), _fake_versions(None, None))

    def test_preferred_module_wins(self):
        fake = FakeModules(["python/3.11", "python/3.12"])
        ctx = _resolve(fake, _fake_which("python3.12", "python3.11"), _fake_versions())
        assert ctx.runtime_module == "python/3.12"
        assert "python/3.11" not in fake.loaded

    def test_no_module_system_uses_local_interpreter(self):
        ctx = _resolve(None, _fake_which("python3.10", "python3"), _fake_versions("3.10.12", None))
        assert ctx.module_system is False
        assert ctx.runtime_source == ResourceSource.SYSTEM
        assert ctx.runtime_command == "/opt/bin/python3.10"
        assert ctx.runtime_module is None

    def test_system_gdal_on_path(self):
        ctx = _resolve(None, _fake_which("python3", "gdalinfo"), _fake_versions("3.12.1", "3.8.4"))
        assert ctx.lib_source == ResourceSource.SYSTEM
        assert str(ctx.native_library_version) == "3.8.4"

    def test_modules_present_but_no_python_module(self):
        fake = FakeModules(["rh9/gdal/3.11.0"])
        ctx = _resolve(fake, _fake_which("python3", "gdalinfo"), _fake_versions("3.9.18"))
        assert ctx.runtime_source == ResourceSource.SYSTEM
        assert ctx.runtime_command == "/opt/bin/python3"
        assert "No Python module found. Using system Python." in ctx.warnings
        assert ctx.lib_module == "rh9/gdal/3.11.0"

    def test_below_floor_is_fatal(self):
        with pytest.raises(ResolutionError, match=r"Python 3\.9\+ required, but 3\.8\.19 found"):
            _resolve(None, _fake_which("python3"), _fake_versions("3.8.19", None))

    def test_unreadable_runtime_version_is_fatal(self):
        with pytest.raises(ResolutionError, match="Could not determine"):
            _resolve(None, _fake_which("python3"), _fake_versions(None, None))

    def test_gdal_module_with_unparseable_version(self):
        fake = FakeModules(["python/3.12", "gdal"])
        ctx = _resolve(fake, _fake_which("python3.12", "gdalinfo"), _fake_versions("3.12.0", None))
        assert ctx.lib_source == ResourceSource.MODULE
        assert ctx.lib_module == "gdal"
        assert ctx.native_library_version is None
        assert any("could not be determined" in w for w in ctx.warnings)

    def test_config_preferences(self):
        config = ProvisionConfig(
            python_modules=["site/python"],
            gdal_modules=["site/gdal"],
        )
        fake = FakeModules(["site/python", "site/gdal"])
        ctx = _resolve(fake, _fake_which("python3", "gdalinfo"), _fake_versions(), config)
        assert ctx.runtime_module == "site/python"
        assert ctx.lib_module == "site/gdal"


class TestResolveSteps:
    def test_runtime_probe_without_modules(self):
        with patch.object(resolution, "find_executable", side_effect=_fake_which("python3.11")):
            probe = resolve_runtime(ProvisionConfig(), {"PATH": "/usr/bin"})
        assert probe.command == "python3.11"
        assert probe.source == ResourceSource.SYSTEM

    def test_runtime_probe_exhausted(self):
        with patch.object(resolution, "find_executable", return_value=None):
            probe = resolve_runtime(ProvisionConfig(), {})
        assert probe.command == ""
        assert probe.source == ResourceSource.NOT_FOUND

    def test_library_probe_absent(self):
        with patch.object(resolution, "find_executable", return_value=None):
            probe = resolve_native_library({})
        assert probe.version is None
        assert probe.source == ResourceSource.NOT_FOUND
        assert probe.warnings == []

    def test_build_context_rejects_empty_command(self):
        with pytest.raises(ResolutionError):
            build_context(RuntimeProbe(), LibraryProbe(), {})

    def test_build_context_command_vanished(self):
        runtime = RuntimeProbe(command="python3.12", source=ResourceSource.MODULE)
        with patch.object(resolution, "find_executable", return_value=None):
            with pytest.raises(ResolutionError, match="not on the search path"):
                build_context(runtime, LibraryProbe(), {})
