"""
Tests for manifest generation — computed pins and determinism.
"""

from pathlib import Path

import pytest

from geostack.core.models.manifest import normalize_name
from geostack.core.services.provision.data.packages import MANIFEST_SECTIONS
from geostack.core.services.provision.errors import ManifestError
from geostack.core.services.provision.resolver.manifest import (
    gdal_pin,
    generate_manifest,
    numpy_pin,
    render_manifest,
    write_manifest,
)

from tests.conftest import make_context


class TestPins:
    @pytest.mark.parametrize("python,expected", [
        ("3.9.18", "1.26.4"),
        ("3.10.14", "1.26.4"),
        ("3.11.0", "2.3.3"),
        ("3.12.9", "2.3.3"),
        ("3.13.1", "2.3.3"),
        ("4.0.0", "2.3.3"),
        ("4.5.2", "2.3.3"),
    ])
    def test_numpy_by_minor(self, python, expected):
        assert numpy_pin(make_context(python).runtime_version) == expected

    def test_gdal_follows_detected(self):
        assert gdal_pin(make_context(gdal="3.10.2")) == "3.10.2"

    def test_gdal_default_when_absent(self):
        assert gdal_pin(make_context(gdal=None)) == "3.11.0"
        assert gdal_pin(make_context(gdal=None), "3.9.3") == "3.9.3"


class TestGenerateManifest:
    def test_modules_scenario(self):
        m = generate_manifest(make_context("3.12.9", "3.11.0"))
        assert m.get("gdal").line == "gdal==3.11.0"
        assert m.get("numpy").line == "numpy==2.3.3"

    def test_fallback_scenario(self):
        m = generate_manifest(make_context("3.11.7", None, modules=False))
        assert m.get("gdal").line == "gdal==3.11.0"
        assert m.get("numpy").line == "numpy==2.3.3"

    def test_old_fallback_python_without_gdal(self):
        m = generate_manifest(make_context("3.9.4", None, modules=False))
        assert m.get("gdal").line == "gdal==3.11.0"
        assert m.get("numpy").line == "numpy==1.26.4"

    def test_old_python(self):
        m = generate_manifest(make_context("3.10.4", "3.8.4"))
        assert m.get("numpy").line == "numpy==1.26.4"
        assert m.get("gdal").line == "gdal==3.8.4"

    def test_custom_gdal_default(self):
        m = generate_manifest(make_context(gdal=None), gdal_default="3.10.0")
        assert m.get("gdal").version == "3.10.0"

    def test_exactly_one_numpy_and_gdal(self):
        m = generate_manifest(make_context())
        names = [normalize_name(r.name) for r in m.requirements]
        assert names.count("numpy") == 1
        assert names.count("gdal") == 1

    def test_no_duplicate_packages(self):
        m = generate_manifest(make_context())
        names = [normalize_name(r.name) for r in m.requirements]
        assert len(names) == len(set(names))

    def test_static_pins_untouched(self):
        m = generate_manifest(make_context())
        assert m.get("setuptools").line == "setuptools==80.9.0"
        assert m.get("netCDF4").line == "netcdf4==1.7.2"
        assert m.get("wheel").line == "wheel"

    def test_section_order_kept(self):
        m = generate_manifest(make_context())
        assert [s.title for s in m.sections] == [title for title, _ in MANIFEST_SECTIONS]
        assert m.requirements[0].name == "numpy"

    def test_deterministic(self):
        ctx = make_context("3.11.2", "3.9.1")
        assert generate_manifest(ctx) == generate_manifest(ctx)
        assert render_manifest(generate_manifest(ctx)) == render_manifest(generate_manifest(ctx))


class TestRenderAndWrite:
    def test_render_layout(self):
        text = render_manifest(generate_manifest(make_context()))
        assert text.startswith("# Core dependencies - install first\nnumpy==2.3.3\n")
        assert "\n\n# GDAL and geospatial packages\ngdal==3.11.0\n" in text
        assert text.endswith("\n")
        assert not text.endswith("\n\n")

    def test_write_creates_parent(self, tmp_path: Path):
        target = tmp_path / "env" / "requirements.txt"
        m = generate_manifest(make_context())
        assert write_manifest(m, target) == target
        assert target.read_text() == render_manifest(m)

    def test_write_failure(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(ManifestError, match="Cannot write"):
            write_manifest(generate_manifest(make_context()), blocker / "requirements.txt")
