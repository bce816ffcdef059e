"""Load PreviewConfig from docpreview.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from docpreview._errors import ConfigError
from docpreview.config import PreviewConfig

_PATH_KEYS = ("elm_home", "static_dir", "work_dir", "seed_dir")

_KNOWN_KEYS = frozenset({
    "address", "port", "browser", "reload", "debug", "compiler",
    "elm_home", "registry_url", "github_api_url", "codeload_url",
    "static_dir", "work_dir", "seed_dir",
    "build_timeout", "diff_timeout", "http_timeout", "workers",
})


def load_config(root: Path, **overrides: object) -> PreviewConfig:
    """Load PreviewConfig for root, optionally merging docpreview.yaml.

    Looks for docpreview.yaml, docpreview.yml, or docpreview.toml in root.
    If found, loads and merges with overrides.  Overrides whose value is
    None are ignored; the rest take precedence.

    Raises:
        ConfigError: If the config file cannot be parsed or names an
            unknown key.

    """
    base = root.parent if root.is_file() else root
    file_config = _read_config_file(base)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    for key in _PATH_KEYS:
        if key in merged and not isinstance(merged[key], Path):
            merged[key] = Path(str(merged[key])).expanduser()
    return PreviewConfig(root=root, **merged)


def _read_config_file(root: Path) -> dict[str, object]:
    """Read config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("docpreview.yaml", "docpreview.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "docpreview.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_section(data, path)


def _flatten_section(data: object, path: Path) -> dict[str, object]:
    """Extract docpreview.* keys into top-level config."""
    if not isinstance(data, dict):
        msg = f"Invalid {path.name}: expected a mapping at top level"
        raise ConfigError(msg)
    result: dict[str, object] = {}
    section = data.get("docpreview")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "docpreview":
            result[k] = v
    unknown = sorted(set(result) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown option(s) in {path.name}: {', '.join(unknown)}"
        raise ConfigError(msg)
    return result
