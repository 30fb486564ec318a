"""
Tests for environment setup — child env vars, directories, venv.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from geostack.core.services.provision.errors import EnvironmentSetupError
from geostack.core.services.provision.execution import environment
from geostack.core.services.provision.execution.environment import (
    activated_environ,
    build_child_environ,
    create_virtualenv,
    prepare_directories,
)


class TestChildEnviron:
    def test_isolation_vars(self, paths, tmp_path: Path):
        home = tmp_path / "home"
        base = {"PATH": "/usr/bin", "PYTHONPATH": "/home/u/lib", "LANG": "C"}
        env = build_child_environ(base, paths, home=home)

        assert "PYTHONPATH" not in env
        assert env["PYTHONNOUSERSITE"] == "1"
        assert env["PIP_USER"] == "0"
        assert env["UV_CACHE_DIR"] == str(paths.uv_cache)
        assert env["PIP_CACHE_DIR"] == str(paths.pip_cache)
        assert env["LANG"] == "C"
        assert env["PATH"].split(os.pathsep) == [
            str(home / ".cargo" / "bin"),
            str(home / ".local" / "bin"),
            "/usr/bin",
        ]

    def test_base_not_mutated(self, paths, tmp_path: Path):
        base = {"PATH": "/usr/bin", "PYTHONPATH": "/x"}
        build_child_environ(base, paths, home=tmp_path)
        assert base == {"PATH": "/usr/bin", "PYTHONPATH": "/x"}

    def test_process_environment_untouched(self, paths, tmp_path: Path):
        before = dict(os.environ)
        build_child_environ({"PATH": "/usr/bin"}, paths, home=tmp_path)
        assert dict(os.environ) == before

    def test_activated(self, paths):
        env = activated_environ({"PATH": "/usr/bin", "PYTHONHOME": "/bad"}, paths)
        assert env["VIRTUAL_ENV"] == str(paths.venv_dir)
        assert env["PATH"].split(os.pathsep)[0] == str(paths.venv_bin)
        assert "PYTHONHOME" not in env


class TestPrepareDirectories:
    def test_creates_all(self, paths):
        prepare_directories(paths)
        for d in (paths.install_base, paths.uv_cache, paths.pip_cache, paths.env_dir):
            assert d.is_dir()

    def test_idempotent(self, paths):
        prepare_directories(paths)
        prepare_directories(paths)
        assert paths.env_dir.is_dir()

    def test_not_writable(self, paths):
        with patch.object(environment.os, "access", return_value=False):
            with pytest.raises(EnvironmentSetupError, match="No write permission"):
                prepare_directories(paths)

    def test_cannot_create(self, paths):
        paths.install_base.parent.mkdir(parents=True, exist_ok=True)
        paths.install_base.write_text("a file, not a directory")
        with pytest.raises(EnvironmentSetupError, match="Cannot create"):
            prepare_directories(paths)


class TestCreateVirtualenv:
    def test_runs_venv_with_resolved_python(self, paths, context):
        prepare_directories(paths)
        with patch.object(environment, "run_command", return_value={"ok": True}) as mock:
            env = create_virtualenv(context, paths, {"PATH": "/usr/bin"})

        assert mock.call_args.args[0] == [
            context.runtime_command, "-m", "venv", str(paths.venv_dir),
        ]
        assert mock.call_args.kwargs["cwd"] == str(paths.install_base)
        assert env["VIRTUAL_ENV"] == str(paths.venv_dir)

    def test_stale_environment_removed(self, paths, context):
        stale = paths.venv_dir / "lib" / "stale.txt"
        stale.parent.mkdir(parents=True)
        stale.write_text("old")
        with patch.object(environment, "run_command", return_value={"ok": True}):
            create_virtualenv(context, paths, {})
        assert not stale.exists()

    def test_rerun_is_clean(self, paths, context):
        def fake_venv(cmd, **kwargs):
            (Path(cmd[-1]) / "bin").mkdir(parents=True)
            return {"ok": True}

        prepare_directories(paths)
        with patch.object(environment, "run_command", side_effect=fake_venv):
            create_virtualenv(context, paths, {})
            create_virtualenv(context, paths, {})
        assert (paths.venv_dir / "bin").is_dir()

    def test_failure_raises(self, paths, context):
        with patch.object(environment, "run_command", return_value={
            "ok": False, "error": "Command failed (exit 1)", "stderr": "ensurepip is not available\n",
        }):
            with pytest.raises(EnvironmentSetupError, match="ensurepip is not available"):
                create_virtualenv(context, paths, {})
