"""Shared test fixtures for docpreview."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


def make_module(
    name: str = "Main",
    *,
    comment: str = "",
    values: list[dict[str, Any]] | None = None,
    aliases: list[dict[str, Any]] | None = None,
    unions: list[dict[str, Any]] | None = None,
    binops: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build one ``docs.json`` module record."""
    return {
        "name": name,
        "comment": comment,
        "unions": unions or [],
        "aliases": aliases or [],
        "values": values or [],
        "binops": binops or [],
    }


def value(name: str, type_: str, comment: str = "") -> dict[str, Any]:
    return {"name": name, "comment": comment, "type": type_}


PACKAGE_MANIFEST: dict[str, Any] = {
    "type": "package",
    "name": "author/project",
    "summary": "A test package",
    "license": "BSD-3-Clause",
    "version": "1.0.0",
    "exposed-modules": ["Main"],
    "elm-version": "0.19.0 <= v < 0.20.0",
    "dependencies": {"elm/core": "1.0.0 <= v < 2.0.0"},
    "test-dependencies": {},
}

APPLICATION_MANIFEST: dict[str, Any] = {
    "type": "application",
    "source-directories": ["src"],
    "elm-version": "0.19.1",
    "dependencies": {
        "direct": {"elm/core": "1.0.5", "elm/json": "1.1.3"},
        "indirect": {},
    },
    "test-dependencies": {"direct": {}, "indirect": {}},
}


@pytest.fixture
def package_project(tmp_path: Path) -> Path:
    """A minimal package project: elm.json, README.md and one module."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "elm.json").write_text(json.dumps(PACKAGE_MANIFEST))
    (root / "README.md").write_text("# Project\n\nCurrent readme.\n")
    (root / "src" / "Main.elm").write_text("module Main exposing (x)\n\nx = 1\n")
    return root


@pytest.fixture
def application_project(tmp_path: Path) -> Path:
    """A minimal application project with one port module."""
    root = tmp_path / "app"
    (root / "src" / "Page").mkdir(parents=True)
    (root / "elm.json").write_text(json.dumps(APPLICATION_MANIFEST))
    (root / "src" / "Main.elm").write_text(
        "port module Main exposing (main)\n\n"
        "port sendMessage : String -> Cmd msg\n"
        "port messageReceiver : (String -> msg) -> Sub msg\n"
    )
    (root / "src" / "Page" / "Home.elm").write_text("module Page.Home exposing (view)\n")
    return root


@pytest.fixture
def package_cache(tmp_path: Path) -> Path:
    """A package cache holding two releases of author/project and elm/core."""
    root = tmp_path / "elm-home" / "0.19.1" / "packages"
    releases = {
        ("author/project", "1.0.0"): "Old readme.\n",
        ("author/project", "1.2.0"): "# Project\n\nPublished readme.\n",
        ("elm/core", "1.0.5"): "Core.\n",
    }
    for (name, version), readme in releases.items():
        directory = root / name / version
        directory.mkdir(parents=True)
        manifest = {**PACKAGE_MANIFEST, "name": name, "version": version}
        (directory / "elm.json").write_text(json.dumps(manifest))
        (directory / "README.md").write_text(readme)
        (directory / "docs.json").write_text(
            json.dumps([make_module("Main", values=[value("x", "Int", "Old comment.")])])
        )
    return root
