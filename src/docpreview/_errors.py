"""docpreview error hierarchy.

All docpreview-specific errors inherit from DocPreviewError for easy catching.
The diff engines never raise; these errors belong to the orchestration layer.
"""

from __future__ import annotations

from typing import Any


class DocPreviewError(Exception):
    """Base error for all docpreview operations."""


class ConfigError(DocPreviewError):
    """Invalid or missing configuration (including an unsupported compiler)."""


class CompilerError(DocPreviewError):
    """The compiler could not be run or produced no documentation.

    Attributes:
        report: Decoded JSON error report from the compiler, if any.

    """

    def __init__(self, message: str, report: Any = None) -> None:
        super().__init__(message)
        self.report = report


class SourceError(DocPreviewError):
    """Hosted-mode source retrieval failed (ref resolution, tarball download)."""
