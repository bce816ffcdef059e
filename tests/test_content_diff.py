"""Tests for docpreview.diffing.content — entity-level documentation diffs."""

from __future__ import annotations

from docpreview.diffing.content import (
    ContentDiff,
    compute_content_diff,
    format_alias_annotation,
    format_annotation,
    format_union_annotation,
)
from docpreview.diffing.docs import Alias, Binop, DocumentedModule, Union, UnionCase, Value
from docpreview.diffing.lines import DiffLine, DiffStatus


def _module(name: str = "Main", **collections: tuple) -> DocumentedModule:
    return DocumentedModule(name=name, **collections)


# ---------------------------------------------------------------------------
# Declaration rendering
# ---------------------------------------------------------------------------


class TestFormatting:
    def test_value_annotation(self) -> None:
        assert format_annotation(Value("foo", "", "Int -> String")) == "foo : Int -> String"

    def test_binop_annotation(self) -> None:
        binop = Binop("+", "", "number -> number -> number")
        assert format_annotation(binop) == "+ : number -> number -> number"

    def test_alias_without_args(self) -> None:
        alias = Alias("Name", "", (), "String")
        assert format_alias_annotation(alias) == "type alias Name = String"

    def test_alias_with_args(self) -> None:
        alias = Alias("Pair", "", ("a", "b"), "( a, b )")
        assert format_alias_annotation(alias) == "type alias Pair a b = ( a, b )"

    def test_union_with_constructors(self) -> None:
        union = Union(
            "Result",
            "",
            ("e", "a"),
            (UnionCase("Ok", ("a",)), UnionCase("Err", ("e",))),
        )
        assert format_union_annotation(union) == "type Result e a = Ok a | Err e"

    def test_union_nullary_constructors(self) -> None:
        union = Union("Color", "", (), (UnionCase("Red"), UnionCase("Green")))
        assert format_union_annotation(union) == "type Color = Red | Green"

    def test_union_multiple_constructor_args(self) -> None:
        union = Union("Shape", "", (), (UnionCase("Rect", ("Float", "Float")),))
        assert format_union_annotation(union) == "type Shape = Rect Float Float"


# ---------------------------------------------------------------------------
# compute_content_diff
# ---------------------------------------------------------------------------


class TestMissingInputs:
    def test_missing_published_snapshot(self) -> None:
        assert compute_content_diff(None, (_module(),), "a", "b") is None

    def test_missing_current_snapshot(self) -> None:
        assert compute_content_diff((_module(),), None, "a", "b") is None

    def test_identical_inputs(self) -> None:
        modules = (_module(values=(Value("x", "Doc.", "Int"),)),)
        assert compute_content_diff(modules, modules, "readme", "readme") is None

    def test_missing_readme_skips_readme_only(self) -> None:
        published = (_module(values=(Value("x", "Old.", "Int"),)),)
        current = (_module(values=(Value("x", "New.", "Int"),)),)
        result = compute_content_diff(published, current, None, "readme")
        assert result is not None
        assert result.readme_diff is None
        assert "x" in result.modules["Main"].items


class TestValueChanges:
    def test_comment_and_type_change(self) -> None:
        published = (_module(values=(Value("foo", "Old doc", "Int"),)),)
        current = (_module(values=(Value("foo", "New doc", "String"),)),)

        result = compute_content_diff(published, current, None, None)

        assert result is not None
        item = result.modules["Main"].items["foo"]
        assert item.old_annotation == "foo : Int"
        assert item.comment_diff == (
            DiffLine(DiffStatus.REMOVED, "Old doc"),
            DiffLine(DiffStatus.ADDED, "New doc"),
        )

    def test_type_change_only(self) -> None:
        published = (_module(values=(Value("foo", "Doc", "Int"),)),)
        current = (_module(values=(Value("foo", "Doc", "Float"),)),)
        result = compute_content_diff(published, current, None, None)
        assert result is not None
        item = result.modules["Main"].items["foo"]
        assert item.comment_diff is None
        assert item.old_annotation == "foo : Int"

    def test_comment_change_only(self) -> None:
        published = (_module(values=(Value("foo", "A\nB", "Int"),)),)
        current = (_module(values=(Value("foo", "A\nC", "Int"),)),)
        result = compute_content_diff(published, current, None, None)
        assert result is not None
        item = result.modules["Main"].items["foo"]
        assert item.old_annotation is None
        assert item.comment_diff is not None

    def test_unchanged_entities_omitted(self) -> None:
        published = (_module(values=(Value("a", "Same", "Int"), Value("b", "Old", "Int"))),)
        current = (_module(values=(Value("a", "Same", "Int"), Value("b", "New", "Int"))),)
        result = compute_content_diff(published, current, None, None)
        assert result is not None
        assert list(result.modules["Main"].items) == ["b"]


class TestTypeChanges:
    def test_alias_args_change(self) -> None:
        published = (_module(aliases=(Alias("Box", "", ("a",), "{ value : a }"),)),)
        current = (_module(aliases=(Alias("Box", "", ("a", "b"), "{ value : a }"),)),)
        result = compute_content_diff(published, current, None, None)
        assert result is not None
        assert (
            result.modules["Main"].items["Box"].old_annotation
            == "type alias Box a = { value : a }"
        )

    def test_union_case_change_renders_full_declaration(self) -> None:
        published = (
            _module(unions=(Union("Msg", "", (), (UnionCase("Click"), UnionCase("Input", ("String",)))),)),
        )
        current = (_module(unions=(Union("Msg", "", (), (UnionCase("Click"),)),)),)
        result = compute_content_diff(published, current, None, None)
        assert result is not None
        assert (
            result.modules["Main"].items["Msg"].old_annotation
            == "type Msg = Click | Input String"
        )

    def test_binop_type_change(self) -> None:
        published = (_module(binops=(Binop("|=", "", "Int"),)),)
        current = (_module(binops=(Binop("|=", "", "Float"),)),)
        result = compute_content_diff(published, current, None, None)
        assert result is not None
        assert result.modules["Main"].items["|="].old_annotation == "|= : Int"


class TestIntersectionOnly:
    def test_added_and_removed_modules_ignored(self) -> None:
        published = (_module("Old", values=(Value("x", "a", "Int"),)),)
        current = (_module("New", values=(Value("x", "b", "Int"),)),)
        assert compute_content_diff(published, current, None, None) is None

    def test_added_and_removed_entities_ignored(self) -> None:
        published = (_module(values=(Value("gone", "", "Int"),)),)
        current = (_module(values=(Value("fresh", "", "Int"),)),)
        assert compute_content_diff(published, current, None, None) is None

    def test_entities_matched_within_kind(self) -> None:
        published = (_module(values=(Value("Thing", "", "Int"),)),)
        current = (_module(aliases=(Alias("Thing", "", (), "String"),)),)
        assert compute_content_diff(published, current, None, None) is None


class TestReadme:
    def test_readme_only_change(self) -> None:
        modules = (_module(),)
        result = compute_content_diff(modules, modules, "# Title\nOld\n", "# Title\nNew\n")
        assert result is not None
        assert result.modules == {}
        assert result.readme_diff == (
            DiffLine(DiffStatus.CONTEXT, "# Title"),
            DiffLine(DiffStatus.REMOVED, "Old"),
            DiffLine(DiffStatus.ADDED, "New"),
        )


class TestToJson:
    def test_wire_shape(self) -> None:
        published = (_module(values=(Value("foo", "Old", "Int"),)),)
        current = (_module(values=(Value("foo", "New", "String"),)),)
        result = compute_content_diff(published, current, "a\n", "b\n")
        assert result is not None
        assert result.to_json() == {
            "modules": {
                "Main": {
                    "items": {
                        "foo": {
                            "commentDiff": [[-1, "Old"], [1, "New"]],
                            "oldAnnotation": "foo : Int",
                        }
                    }
                }
            },
            "readmeDiff": [[-1, "a"], [1, "b"]],
        }

    def test_unchanged_fields_omitted(self) -> None:
        diff = ContentDiff()
        assert diff.to_json() == {"modules": {}}
