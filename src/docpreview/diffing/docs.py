"""Documentation snapshot model — the compiler's ``docs.json`` shape.

A snapshot is an ordered sequence of ``DocumentedModule`` records, one per
exposed module, as written by ``elm make --docs``.  All records are frozen
dataclasses holding tuples, so ``==`` is structural equality and snapshots
can be shared freely between concurrent diff computations.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Value:
    """A documented function or constant."""

    name: str
    comment: str
    type: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Value:
        return cls(name=data["name"], comment=data.get("comment", ""), type=data["type"])


@dataclass(frozen=True, slots=True)
class Binop:
    """A documented infix operator.

    ``associativity`` and ``precedence`` are carried for completeness; the
    diff engines ignore them.
    """

    name: str
    comment: str
    type: str
    associativity: str = "left"
    precedence: int = 9

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Binop:
        return cls(
            name=data["name"],
            comment=data.get("comment", ""),
            type=data["type"],
            associativity=data.get("associativity", "left"),
            precedence=data.get("precedence", 9),
        )


@dataclass(frozen=True, slots=True)
class Alias:
    """A documented type alias: ``type alias Name args = type``."""

    name: str
    comment: str
    args: tuple[str, ...]
    type: str

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Alias:
        return cls(
            name=data["name"],
            comment=data.get("comment", ""),
            args=tuple(data.get("args", ())),
            type=data["type"],
        )


@dataclass(frozen=True, slots=True)
class UnionCase:
    """One constructor of a union type and its argument types."""

    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Union:
    """A documented union (sum) type."""

    name: str
    comment: str
    args: tuple[str, ...]
    cases: tuple[UnionCase, ...]

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Union:
        # Each case is encoded as a [constructor, [argType, ...]] pair.
        return cls(
            name=data["name"],
            comment=data.get("comment", ""),
            args=tuple(data.get("args", ())),
            cases=tuple(UnionCase(case[0], tuple(case[1])) for case in data.get("cases", ())),
        )


@dataclass(frozen=True, slots=True)
class DocumentedModule:
    """One compiled module's public surface.

    Attributes:
        name: Dotted module name, unique within a snapshot.
        comment: Module-level doc comment.
        unions: Documented union types.
        aliases: Documented type aliases.
        values: Documented functions and constants.
        binops: Documented infix operators.

    """

    name: str
    comment: str = ""
    unions: tuple[Union, ...] = ()
    aliases: tuple[Alias, ...] = ()
    values: tuple[Value, ...] = ()
    binops: tuple[Binop, ...] = ()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> DocumentedModule:
        return cls(
            name=data["name"],
            comment=data.get("comment", ""),
            unions=tuple(Union.from_json(u) for u in data.get("unions", ())),
            aliases=tuple(Alias.from_json(a) for a in data.get("aliases", ())),
            values=tuple(Value.from_json(v) for v in data.get("values", ())),
            binops=tuple(Binop.from_json(b) for b in data.get("binops", ())),
        )


type Snapshot = tuple[DocumentedModule, ...]


def load_snapshot(data: Any) -> Snapshot | None:
    """Decode a ``docs.json`` payload into a snapshot.

    Returns ``None`` for anything that is not a list of modules, such as the
    compiler's JSON error report or the empty object produced by a failed
    build, and for a list holding malformed module records.

    """
    if not isinstance(data, list):
        return None
    try:
        return tuple(DocumentedModule.from_json(module) for module in data)
    except (KeyError, TypeError, AttributeError):
        return None
