"""Compiler integration — manifests, documentation builds and diffs."""

from docpreview.compiler.elm import Compiler
from docpreview.compiler.manifest import (
    complete_application,
    exposed_modules,
    full_name,
    load_manifest,
)
from docpreview.compiler.project import import_modules, stage_application, stub_ports
from docpreview.compiler.report import render_report

__all__ = [
    "Compiler",
    "complete_application",
    "exposed_modules",
    "full_name",
    "import_modules",
    "load_manifest",
    "render_report",
    "stage_application",
    "stub_ports",
]
