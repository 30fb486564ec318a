"""
Tests for the post-install import check.
"""

import json
from pathlib import Path
from unittest.mock import patch

from geostack.core.services.provision.execution import verifier
from geostack.core.services.provision.execution.verifier import (
    is_under_home,
    verify_environment,
)

VENV_PY = Path("/data/u/geo-stack/.venv/bin/python")


def _payload(executable: str, results: dict) -> dict:
    stdout = "some warning on stdout\n" + json.dumps(
        {"executable": executable, "results": results}
    ) + "\n"
    return {"ok": True, "stdout": stdout, "stderr": ""}


class TestVerifyEnvironment:
    def test_partition(self, tmp_path: Path):
        results = {"numpy": None, "gdal": "ModuleNotFoundError: No module named 'osgeo'"}
        with patch.object(verifier, "run_command",
                          return_value=_payload(str(VENV_PY), results)) as mock:
            report = verify_environment(VENV_PY, ["numpy", "gdal"], {}, home=tmp_path)

        assert report.succeeded == ["numpy"]
        assert report.failed == ["gdal"]
        assert report.in_home is False
        assert report.error is None

        cmd = mock.call_args.args[0]
        assert cmd[:2] == [str(VENV_PY), "-c"]
        assert json.loads(cmd[3]) == [["numpy", "numpy"], ["gdal", "osgeo.gdal"]]

    def test_all_ok(self, tmp_path: Path):
        with patch.object(verifier, "run_command",
                          return_value=_payload(str(VENV_PY), {"numpy": None, "torch": None})):
            report = verify_environment(VENV_PY, ["numpy", "torch"], {}, home=tmp_path)
        assert report.all_ok

    def test_python_in_home_flagged(self, tmp_path: Path):
        exe = tmp_path / "miniconda" / "bin" / "python"
        with patch.object(verifier, "run_command", return_value=_payload(str(exe), {"numpy": None})):
            report = verify_environment(VENV_PY, ["numpy"], {}, home=tmp_path)
        assert report.in_home is True
        assert report.python_path == str(exe)

    def test_missing_result_counts_as_failure(self, tmp_path: Path):
        with patch.object(verifier, "run_command", return_value=_payload(str(VENV_PY), {})):
            report = verify_environment(VENV_PY, ["xarray"], {}, home=tmp_path)
        assert report.failed == ["xarray"]

    def test_interpreter_cannot_run(self):
        with patch.object(verifier, "run_command",
                          return_value={"ok": False, "error": "No such file or directory"}):
            report = verify_environment(VENV_PY, ["numpy", "pandas"], {})
        assert report.failed == ["numpy", "pandas"]
        assert report.error == "No such file or directory"
        assert not report.all_ok

    def test_garbage_output(self):
        with patch.object(verifier, "run_command",
                          return_value={"ok": True, "stdout": "not json\n"}):
            report = verify_environment(VENV_PY, ["numpy"], {})
        assert report.failed == ["numpy"]
        assert report.error == "verification produced no output"


class TestIsUnderHome:
    def test_inside(self, tmp_path: Path):
        assert is_under_home(str(tmp_path / "x" / "python"), tmp_path)

    def test_outside(self, tmp_path: Path):
        assert not is_under_home("/gpfs/data1/u/.venv/bin/python", tmp_path)
