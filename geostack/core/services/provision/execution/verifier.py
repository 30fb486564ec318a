"""
L4 Execution — Post-install import check.

Runs the new environment's interpreter on a tiny script that imports
each critical package and prints a JSON verdict. Purely diagnostic:
nothing here can fail the run.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path

from geostack.core.models.outcome import VerificationReport
from geostack.core.services.provision.data.packages import IMPORT_NAMES
from geostack.core.services.provision.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

_VERIFY_SCRIPT = """\
import importlib, json, sys
results = {}
for name, module in json.loads(sys.argv[1]):
    try:
        importlib.import_module(module)
        results[name] = None
    except Exception as exc:
        results[name] = "%s: %s" % (type(exc).__name__, exc)
print(json.dumps({"executable": sys.executable, "results": results}))
"""


def is_under_home(path: str, home: Path | None = None) -> bool:
    """Whether ``path`` lives inside the user's home directory."""
    home = home or Path.home()
    try:
        Path(path).relative_to(home)
    except ValueError:
        return False
    return True


def verify_environment(
    venv_python: Path,
    packages: list[str] | tuple[str, ...],
    environ: Mapping[str, str],
    *,
    home: Path | None = None,
) -> VerificationReport:
    """Import every name in ``packages`` inside the environment.

    Returns:
        Succeeded/failed partition. If the interpreter itself cannot
        run, every package is reported failed and ``error`` is set.
    """
    pairs = [[name, IMPORT_NAMES.get(name, name)] for name in packages]
    report = VerificationReport(python_path=str(venv_python))

    result = run_command(
        [str(venv_python), "-c", _VERIFY_SCRIPT, json.dumps(pairs)],
        environ=environ,
    )
    payload: dict = {}
    if result["ok"]:
        lines = result.get("stdout", "").strip().splitlines()
        try:
            payload = json.loads(lines[-1]) if lines else {}
        except json.JSONDecodeError:
            payload = {}

    if not payload:
        report.error = result.get("error") or "verification produced no output"
        report.failed = list(packages)
        logger.warning("Verification could not run: %s", report.error)
        return report

    report.python_path = payload.get("executable") or report.python_path
    results = payload.get("results", {})
    for name in packages:
        error = results.get(name, "not checked")
        if error is None:
            report.succeeded.append(name)
        else:
            report.failed.append(name)
            logger.warning("%s import failed: %s", name, error)

    report.in_home = is_under_home(report.python_path, home)
    if report.in_home:
        logger.warning("Python appears to be in home directory: %s", report.python_path)
    return report
