"""Tests for docpreview.compiler.elm — the compiler wrapper.

``subprocess.run`` is mocked throughout; no compiler needs to be installed.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from docpreview._errors import CompilerError, ConfigError
from docpreview.compiler.elm import CANDIDATES, Compiler
from docpreview.compiler.manifest import load_manifest
from docpreview.diffing.api import Magnitude

RUN = "docpreview.compiler.elm.subprocess.run"


def _completed(
    args: Any = (), returncode: int = 0, stdout: str = "", stderr: str = ""
) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)


def _docs_arg(args: list[str]) -> Path:
    (flag,) = [a for a in args if a.startswith("--docs=")]
    return Path(flag.removeprefix("--docs="))


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


class TestDiscover:
    def test_first_candidate(self) -> None:
        with patch(RUN, return_value=_completed(stdout="0.19.1\n")) as run:
            compiler = Compiler.discover()
        assert compiler.command == CANDIDATES[0]
        assert compiler.version == "0.19.1"
        assert run.call_args.args[0] == [*CANDIDATES[0], "--version"]

    def test_falls_back_to_next_candidate(self) -> None:
        results = [OSError("npx missing"), _completed(stdout="0.19.1\n")]
        with patch(RUN, side_effect=results):
            compiler = Compiler.discover()
        assert compiler.command == ("elm",)

    def test_candidate_with_stderr_rejected(self) -> None:
        results = [_completed(stderr="npm ERR!"), _completed(stdout="0.19.0\n")]
        with patch(RUN, side_effect=results):
            compiler = Compiler.discover()
        assert compiler.command == ("elm",)
        assert compiler.version == "0.19.0"

    def test_explicit_command(self) -> None:
        with patch(RUN, return_value=_completed(stdout="0.19.1\n")) as run:
            compiler = Compiler.discover("/opt/elm")
        assert compiler.command == ("/opt/elm",)
        run.assert_called_once()

    def test_nothing_runs(self) -> None:
        with patch(RUN, side_effect=OSError("missing")):
            with pytest.raises(CompilerError, match="--version"):
                Compiler.discover()

    def test_unsupported_version(self) -> None:
        with patch(RUN, return_value=_completed(stdout="0.18.0\n")):
            with pytest.raises(ConfigError, match="0.18.0"):
                Compiler.discover()


class TestRun:
    def test_with_home_sets_environment(self, tmp_path: Path) -> None:
        compiler = Compiler(("elm",), "0.19.1").with_home(tmp_path / "home")
        with patch(RUN, return_value=_completed()) as run:
            compiler.run(["make"], tmp_path)
        env = run.call_args.kwargs["env"]
        assert env["ELM_HOME"] == str(tmp_path / "home")

    def test_no_env_inherits(self, tmp_path: Path) -> None:
        with patch(RUN, return_value=_completed()) as run:
            Compiler(("elm",), "0.19.1").run(["make"], tmp_path)
        assert run.call_args.kwargs["env"] is None
        assert run.call_args.args[0] == ["elm", "make"]


# ---------------------------------------------------------------------------
# Documentation builds
# ---------------------------------------------------------------------------


class TestBuildPackageDocs:
    def test_returns_docs(self, package_project: Path) -> None:
        docs = [{"name": "Main", "comment": "", "unions": [], "aliases": [], "values": [], "binops": []}]

        def fake_run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            _docs_arg(args).write_text(json.dumps(docs))
            return _completed(args)

        with patch(RUN, side_effect=fake_run) as run:
            result = Compiler(("elm",), "0.19.1").build_package_docs(package_project)

        assert result == docs
        assert "--report=json" in run.call_args.args[0]
        assert not _docs_arg(run.call_args.args[0]).exists()

    def test_keep_leaves_docs_file(self, package_project: Path) -> None:
        def fake_run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            _docs_arg(args).write_text("[]")
            return _completed(args)

        with patch(RUN, side_effect=fake_run) as run:
            Compiler(("elm",), "0.19.1").build_package_docs(package_project, keep=True)
        docs_file = _docs_arg(run.call_args.args[0])
        assert docs_file.exists()
        docs_file.unlink()

    def test_error_report_fallback(self, package_project: Path) -> None:
        report = {
            "type": "compile-errors",
            "errors": [
                {
                    "path": str(package_project.resolve() / "src" / "Main.elm"),
                    "problems": [{"title": "SYNTAX PROBLEM", "message": ["oops"]}],
                }
            ],
        }
        with patch(RUN, return_value=_completed(returncode=1, stderr=json.dumps(report))):
            result = Compiler(("elm",), "0.19.1").build_package_docs(package_project)
        assert result["type"] == "compile-errors"
        assert result["errors"][0]["path"] == "src/Main.elm"

    def test_no_output_is_empty_object(self, package_project: Path) -> None:
        with patch(RUN, return_value=_completed(returncode=1, stderr="segfault")):
            assert Compiler(("elm",), "0.19.1").build_package_docs(package_project) == {}

    def test_spawn_failure_is_empty_object(self, package_project: Path) -> None:
        with patch(RUN, side_effect=OSError("gone")):
            assert Compiler(("elm",), "0.19.1").build_package_docs(package_project) == {}


class TestBuildDocs:
    def test_unknown_type(self, tmp_path: Path) -> None:
        with patch(RUN) as run:
            assert Compiler(("elm",), "0.19.1").build_docs({"type": "other"}, tmp_path) == {}
        run.assert_not_called()

    def test_application_staged_and_cleaned(self, application_project: Path) -> None:
        manifest = load_manifest(application_project / "elm.json")
        assert manifest is not None
        seen: dict[str, Path] = {}

        def fake_run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
            seen["cwd"] = Path(kwargs["cwd"])
            staged = json.loads((seen["cwd"] / "elm.json").read_text())
            assert staged["type"] == "package"
            _docs_arg(args).write_text("[]")
            return _completed(args)

        with patch(RUN, side_effect=fake_run):
            result = Compiler(("elm",), "0.19.1").build_docs(manifest, application_project)

        assert result == []
        assert seen["cwd"].parent == (application_project / "elm-stuff")
        assert not seen["cwd"].exists()


# ---------------------------------------------------------------------------
# API diff
# ---------------------------------------------------------------------------


class TestDiff:
    def test_parses_report(self, package_project: Path) -> None:
        output = "This is a MINOR change.\n\n---- ADDED MODULES - MINOR ----\n\n    New\n"
        with patch(RUN, return_value=_completed(stdout=output)) as run:
            diff = Compiler(("elm",), "0.19.1").diff(package_project)
        assert diff is not None
        assert diff.magnitude is Magnitude.MINOR
        assert diff.added_modules == ("New",)
        assert run.call_args.kwargs["input"] == ""

    def test_failure_is_none(self, package_project: Path) -> None:
        with patch(RUN, return_value=_completed(returncode=1, stderr="no published")):
            assert Compiler(("elm",), "0.19.1").diff(package_project) is None

    def test_timeout_is_none(self, package_project: Path) -> None:
        with patch(RUN, side_effect=subprocess.TimeoutExpired("elm", 5)):
            assert Compiler(("elm",), "0.19.1").diff(package_project, timeout=5) is None
