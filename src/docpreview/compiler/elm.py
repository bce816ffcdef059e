"""Compiler wrapper — discovery, documentation builds and API diffs.

Every compiler invocation is a blocking ``subprocess.run``; async callers
wrap them in ``asyncio.to_thread``.
"""

from __future__ import annotations

import json
import os
import shutil
import subprocess
import tempfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from docpreview._errors import CompilerError, ConfigError
from docpreview.compiler.manifest import Manifest
from docpreview.compiler.project import stage_application
from docpreview.compiler.report import relativize_report, render_report
from docpreview.console import error, info, progress
from docpreview.diffing.api import ApiDiff, parse_diff_output

# Tried in order when no explicit compiler is configured.
CANDIDATES: tuple[tuple[str, ...], ...] = (
    ("npx", "--no-install", "elm"),
    ("elm",),
)


def _probe(command: Sequence[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            [*command, "--version"],
            capture_output=True,
            text=True,
            timeout=30,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None


@dataclass(frozen=True, slots=True)
class Compiler:
    """A located, version-checked compiler.

    Attributes:
        command: Argument prefix that runs the compiler.
        version: Output of ``--version``, e.g. ``0.19.1``.
        env: Extra environment variables for every invocation.

    """

    command: tuple[str, ...]
    version: str
    env: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def discover(cls, explicit: str | None = None) -> Compiler:
        """Find a working compiler.

        Raises:
            CompilerError: If no candidate runs.
            ConfigError: If the compiler is not a 0.19 release.

        """
        candidates = ((explicit,),) if explicit else CANDIDATES
        result = None
        command: tuple[str, ...] = ()
        for command in candidates:
            result = _probe(command)
            if result is not None and result.returncode == 0 and not result.stderr:
                break
        else:
            detail = result.stderr.strip() if result is not None else "not found"
            msg = f"cannot run '{' '.join(command)} --version' ({detail})"
            raise CompilerError(msg)

        version = result.stdout.strip()
        if not version.startswith("0.19"):
            msg = f"unsupported Elm version {version}"
            raise ConfigError(msg)
        return cls(command=command, version=version)

    def with_home(self, home: Path) -> Compiler:
        """Return a copy that runs with ``ELM_HOME`` set to *home*."""
        return replace(self, env={**self.env, "ELM_HOME": str(home)})

    def run(
        self,
        args: Sequence[str],
        cwd: Path,
        *,
        timeout: float | None = None,
        stdin: str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run the compiler with *args* in *cwd*.

        Raises:
            OSError: If the process cannot be spawned.
            subprocess.TimeoutExpired: If *timeout* elapses.

        """
        env = {**os.environ, **self.env} if self.env else None
        return subprocess.run(
            [*self.command, *args],
            cwd=cwd,
            env=env,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )

    # ----- Documentation -----

    def build_package_docs(
        self,
        directory: Path,
        *,
        keep: bool = False,
        verbose: bool = False,
        timeout: float | None = None,
    ) -> Any:
        """Build package documentation in *directory*.

        Returns the decoded ``docs.json`` (a list of modules).  When the
        build produced no documentation, returns the compiler's JSON error
        report with paths relative to *directory*, or ``{}`` if there is
        none.

        """
        build_dir = directory.resolve()
        handle, name = tempfile.mkstemp(prefix="elm-docs", suffix=".json")
        os.close(handle)
        docs_file = Path(name)
        if keep:
            progress(f"generating {docs_file} documentation")

        stderr = ""
        try:
            build = self.run(
                ["make", f"--docs={docs_file}", "--report=json"],
                build_dir,
                timeout=timeout,
            )
            stderr = build.stderr
        except (OSError, subprocess.TimeoutExpired) as exc:
            error(f"cannot build documentation ({exc})")

        try:
            docs: Any = json.loads(docs_file.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            try:
                docs = relativize_report(json.loads(stderr), build_dir)
            except ValueError:
                docs = {}
            if verbose:
                rendered = render_report(docs)
                if rendered:
                    info(rendered)
        finally:
            if not keep:
                docs_file.unlink(missing_ok=True)
        return docs

    def build_application_docs(
        self,
        manifest: Manifest,
        root: Path,
        *,
        keep: bool = False,
        verbose: bool = False,
        timeout: float | None = None,
    ) -> Any:
        """Stage the application under ``elm-stuff/`` and document it."""
        elm_stuff = root / "elm-stuff"
        elm_stuff.mkdir(exist_ok=True)
        staging_dir = Path(tempfile.mkdtemp(prefix="elm-application-", dir=elm_stuff))
        if keep:
            progress(f"generating {staging_dir} package")
        try:
            stage_application(manifest, root, staging_dir)
            return self.build_package_docs(
                staging_dir, keep=keep, verbose=verbose, timeout=timeout
            )
        finally:
            if not keep:
                shutil.rmtree(staging_dir, ignore_errors=True)

    def build_docs(
        self,
        manifest: Manifest,
        root: Path,
        *,
        keep: bool = False,
        verbose: bool = False,
        timeout: float | None = None,
    ) -> Any:
        """Build documentation for a package or an application.

        Returns ``{}`` for a manifest of unknown type.

        """
        progress(f"building {root.resolve()} documentation")
        kind = manifest.get("type")
        if kind == "package":
            return self.build_package_docs(
                root, keep=keep, verbose=verbose, timeout=timeout
            )
        if kind == "application":
            return self.build_application_docs(
                manifest, root, keep=keep, verbose=verbose, timeout=timeout
            )
        return {}

    # ----- API diff -----

    def diff(self, root: Path, *, timeout: float | None = None) -> ApiDiff | None:
        """Run the compiler's diff against the latest published release.

        Returns None on spawn failure, timeout, a non-zero exit or output
        that is not a diff report.

        """
        try:
            result = self.run(["diff"], root, timeout=timeout, stdin="")
        except (OSError, subprocess.TimeoutExpired):
            return None
        if result.returncode != 0:
            return None
        return parse_diff_output(result.stdout)
