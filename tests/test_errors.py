"""Tests for docpreview._errors."""

from docpreview._errors import (
    CompilerError,
    ConfigError,
    DocPreviewError,
    SourceError,
)


class TestErrorHierarchy:
    """All docpreview errors inherit from DocPreviewError."""

    def test_base_is_exception(self) -> None:
        assert issubclass(DocPreviewError, Exception)

    def test_config_error_inherits(self) -> None:
        assert issubclass(ConfigError, DocPreviewError)

    def test_compiler_error_inherits(self) -> None:
        assert issubclass(CompilerError, DocPreviewError)

    def test_source_error_inherits(self) -> None:
        assert issubclass(SourceError, DocPreviewError)

    def test_catch_all(self) -> None:
        """All specific errors are catchable via DocPreviewError."""
        for error_cls in (ConfigError, CompilerError, SourceError):
            try:
                raise error_cls("test")
            except DocPreviewError as exc:
                assert str(exc) == "test"


class TestCompilerError:
    def test_report_defaults_to_none(self) -> None:
        assert CompilerError("failed").report is None

    def test_carries_report(self) -> None:
        report = {"type": "compile-errors", "errors": []}
        exc = CompilerError("failed", report)
        assert exc.report is report
        assert str(exc) == "failed"
