"""Published package resolution — version ordering, local cache, registry."""

from docpreview.registry.cache import PackageCache, cache_dir
from docpreview.registry.client import RegistryClient
from docpreview.registry.resolver import PublishedBaseline, PublishedResolver
from docpreview.registry.versions import (
    is_older,
    latest_version,
    parse_version,
    version_to_constraint,
)

__all__ = [
    "PackageCache",
    "PublishedBaseline",
    "PublishedResolver",
    "RegistryClient",
    "cache_dir",
    "is_older",
    "latest_version",
    "parse_version",
    "version_to_constraint",
]
