"""
Tests for version parsing and the runtime floor.
"""

import pytest

from geostack.core.models.resolution import SemVer
from geostack.core.services.provision.domain.version import (
    GDAL_VERSION_PATTERN,
    MIN_PYTHON,
    PYTHON_VERSION_PATTERN,
    UV_VERSION_PATTERN,
    check_version_floor,
    parse_version,
)


class TestSemVer:
    def test_parse_full(self):
        assert SemVer.parse("3.12.9") == SemVer(major=3, minor=12, patch=9)

    def test_parse_two_parts(self):
        v = SemVer.parse("3.11")
        assert v.as_tuple() == (3, 11, 0)

    def test_parse_embedded(self):
        assert str(SemVer.parse("GDAL 3.10.2, released 2025/02/11")) == "3.10.2"

    def test_parse_garbage(self):
        assert SemVer.parse("not a version") is None
        assert SemVer.parse("") is None


class TestParseVersion:
    def test_python(self):
        v = parse_version("Python 3.12.9\n", PYTHON_VERSION_PATTERN)
        assert v == SemVer(major=3, minor=12, patch=9)

    def test_gdal(self):
        v = parse_version('GDAL 3.11.0 "Eganville", released 2025/05/06', GDAL_VERSION_PATTERN)
        assert str(v) == "3.11.0"

    def test_uv(self):
        v = parse_version("uv 0.8.22 (ade2bdbd2 2025-09-23)", UV_VERSION_PATTERN)
        assert str(v) == "0.8.22"

    def test_no_match(self):
        assert parse_version("command not found", PYTHON_VERSION_PATTERN) is None

    def test_none_output(self):
        assert parse_version(None, PYTHON_VERSION_PATTERN) is None


class TestVersionFloor:
    def test_floor_is_three_nine(self):
        assert MIN_PYTHON.as_tuple()[:2] == (3, 9)

    @pytest.mark.parametrize("version", ["3.9.0", "3.9.18", "3.10.14", "3.12.9", "4.0.0"])
    def test_accepted(self, version):
        assert check_version_floor(SemVer.parse(version)) == {"valid": True}

    @pytest.mark.parametrize("version", ["3.8.19", "3.8.0", "2.7.18"])
    def test_rejected(self, version):
        result = check_version_floor(SemVer.parse(version))
        assert result["valid"] is False
        assert result["message"] == f"Python 3.9+ required, but {version} found"

    def test_patch_ignored(self):
        floor = SemVer(major=3, minor=11, patch=5)
        assert check_version_floor(SemVer(major=3, minor=11, patch=0), floor)["valid"]
