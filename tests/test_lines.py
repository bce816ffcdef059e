"""Tests for docpreview.diffing.lines — line-level text diffs."""

from __future__ import annotations

import pytest

from docpreview.diffing.lines import (
    DiffLine,
    DiffStatus,
    compute_line_diff,
    line_diff_to_json,
)

A = DiffStatus.ADDED
R = DiffStatus.REMOVED
C = DiffStatus.CONTEXT


class TestDiffLine:
    """DiffLine model and its wire encoding."""

    def test_status_values(self) -> None:
        assert int(DiffStatus.CONTEXT) == 0
        assert int(DiffStatus.ADDED) == 1
        assert int(DiffStatus.REMOVED) == -1

    def test_to_json_pair(self) -> None:
        assert DiffLine(R, "old").to_json() == [-1, "old"]

    def test_frozen(self) -> None:
        line = DiffLine(C, "x")
        with pytest.raises(AttributeError):
            line.text = "y"  # type: ignore[misc]

    def test_none_encodes_as_none(self) -> None:
        assert line_diff_to_json(None) is None


class TestComputeLineDiff:
    """compute_line_diff — LCS-style line diff."""

    @pytest.mark.parametrize("text", ["", "one line", "a\nb\nc\n", "\n\n"])
    def test_identical_texts_have_no_diff(self, text: str) -> None:
        assert compute_line_diff(text, text) is None

    def test_appended_line(self) -> None:
        result = compute_line_diff("a\nb\n", "a\nb\nc\n")
        assert result == (DiffLine(C, "a"), DiffLine(C, "b"), DiffLine(A, "c"))

    def test_deleted_line(self) -> None:
        result = compute_line_diff("a\nb\nc\n", "a\nc\n")
        assert result == (DiffLine(C, "a"), DiffLine(R, "b"), DiffLine(C, "c"))

    def test_substitution_has_removed_then_added(self) -> None:
        result = compute_line_diff("old\n", "new\n")
        assert result == (DiffLine(R, "old"), DiffLine(A, "new"))

    def test_every_line_differs_has_no_context(self) -> None:
        result = compute_line_diff("a\nb\n", "c\nd\n")
        assert result is not None
        assert all(line.status != C for line in result)
        assert any(line.status == A for line in result)
        assert any(line.status == R for line in result)

    def test_trailing_newline_adds_no_empty_line(self) -> None:
        result = compute_line_diff("a\n", "a\nb\n")
        assert result is not None
        assert [line.text for line in result] == ["a", "b"]

    def test_only_one_newline_stripped(self) -> None:
        result = compute_line_diff("a\n", "a\n\n")
        assert result == (DiffLine(C, "a"), DiffLine(A, ""))

    def test_from_empty_text(self) -> None:
        result = compute_line_diff("", "x\ny")
        assert result == (DiffLine(A, "x"), DiffLine(A, "y"))

    def test_json_encoding(self) -> None:
        result = compute_line_diff("a\n", "b\n")
        assert line_diff_to_json(result) == [[-1, "a"], [1, "b"]]
