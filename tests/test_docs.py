"""Tests for docpreview.diffing.docs — decoding docs.json snapshots."""

from __future__ import annotations

import pytest

from docpreview.diffing.docs import DocumentedModule, UnionCase, load_snapshot
from tests.conftest import make_module, value


class TestLoadSnapshot:
    def test_decodes_all_kinds(self) -> None:
        data = [
            make_module(
                "Maybe.Extra",
                comment="Helpers.",
                values=[value("isJust", "Maybe a -> Bool", "Check.")],
                aliases=[{"name": "Pred", "comment": "", "args": ["a"], "type": "a -> Bool"}],
                unions=[
                    {
                        "name": "Tri",
                        "comment": "",
                        "args": [],
                        "cases": [["Yes", []], ["No", []], ["Other", ["String"]]],
                    }
                ],
                binops=[
                    {
                        "name": "?",
                        "comment": "",
                        "type": "Maybe a -> a -> a",
                        "associativity": "right",
                        "precedence": 5,
                    }
                ],
            )
        ]

        snapshot = load_snapshot(data)

        assert snapshot is not None
        (module,) = snapshot
        assert module.name == "Maybe.Extra"
        assert module.values[0].type == "Maybe a -> Bool"
        assert module.aliases[0].args == ("a",)
        assert module.unions[0].cases[2] == UnionCase("Other", ("String",))
        assert module.binops[0].associativity == "right"
        assert module.binops[0].precedence == 5

    def test_structural_equality(self) -> None:
        data = [make_module(values=[value("x", "Int")])]
        assert load_snapshot(data) == load_snapshot(data)

    def test_empty_list(self) -> None:
        assert load_snapshot([]) == ()

    @pytest.mark.parametrize("data", [{}, {"type": "compile-errors"}, None, "text"])
    def test_non_list_is_none(self, data: object) -> None:
        assert load_snapshot(data) is None

    def test_malformed_record_is_none(self) -> None:
        assert load_snapshot([{"comment": "no name"}]) is None

    def test_missing_collections_default_empty(self) -> None:
        snapshot = load_snapshot([{"name": "Bare"}])
        assert snapshot == (DocumentedModule(name="Bare"),)
