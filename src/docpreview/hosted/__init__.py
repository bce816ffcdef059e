"""Hosted mode — on-demand previews of GitHub refs."""

from docpreview.hosted.github import GitHubClient, extract_tarball, is_full_sha
from docpreview.hosted.preview import HostedPreviewer, cache_control_for, should_run_diff
from docpreview.hosted.source import fetch_source, restore_seed

__all__ = [
    "GitHubClient",
    "HostedPreviewer",
    "cache_control_for",
    "extract_tarball",
    "fetch_source",
    "is_full_sha",
    "restore_seed",
    "should_run_diff",
]
