"""Content diff — doc-comment, signature and README changes.

Compares the published and current documentation snapshots of a package
entity by entity.  Only the intersection is inspected: modules and entities
that exist on one side only are the API diff's concern, not this engine's.

The four entity kinds share one comparison routine, parameterised by an
``EntityKind`` record holding the kind's signature-equality predicate and
its declaration renderer.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from docpreview.diffing.docs import Alias, Binop, DocumentedModule, Union, Value
from docpreview.diffing.lines import DiffLine, compute_line_diff, line_diff_to_json


@dataclass(frozen=True, slots=True)
class ItemContentDiff:
    """Changes to one documented entity.

    Attributes:
        comment_diff: Line diff of the doc comment, or None if unchanged.
        old_annotation: Rendered published declaration, or None if the
            signature is unchanged.

    """

    comment_diff: tuple[DiffLine, ...] | None = None
    old_annotation: str | None = None

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.comment_diff is not None:
            data["commentDiff"] = line_diff_to_json(self.comment_diff)
        if self.old_annotation is not None:
            data["oldAnnotation"] = self.old_annotation
        return data


@dataclass(frozen=True, slots=True)
class ModuleContentDiff:
    """Changed entities of one module, keyed by entity name."""

    items: dict[str, ItemContentDiff] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return {"items": {name: item.to_json() for name, item in self.items.items()}}


@dataclass(frozen=True, slots=True)
class ContentDiff:
    """Content changes between the published and the current version.

    Attributes:
        modules: Modules with at least one changed entity, keyed by name.
        readme_diff: Line diff of the README, or None if unchanged.

    """

    modules: dict[str, ModuleContentDiff] = field(default_factory=dict)
    readme_diff: tuple[DiffLine, ...] | None = None

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "modules": {name: mod.to_json() for name, mod in self.modules.items()},
        }
        if self.readme_diff is not None:
            data["readmeDiff"] = line_diff_to_json(self.readme_diff)
        return data


# ---------------------------------------------------------------------------
# Declaration rendering
# ---------------------------------------------------------------------------


def _args_suffix(args: Sequence[str]) -> str:
    return " " + " ".join(args) if args else ""


def format_annotation(item: Value | Binop) -> str:
    """Render ``name : type``."""
    return f"{item.name} : {item.type}"


def format_alias_annotation(alias: Alias) -> str:
    """Render ``type alias Name args = type``."""
    return f"type alias {alias.name}{_args_suffix(alias.args)} = {alias.type}"


def format_union_annotation(union: Union) -> str:
    """Render ``type Name args = Ctor argTypes | Ctor ...``."""
    ctors = " | ".join(case.name + _args_suffix(case.args) for case in union.cases)
    return f"type {union.name}{_args_suffix(union.args)} = {ctors}"


# ---------------------------------------------------------------------------
# Entity kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EntityKind:
    """How to compare and render one kind of documented entity.

    Attributes:
        collection: Attribute of ``DocumentedModule`` holding the entities.
        same_signature: True when two same-named entities have equal signatures.
        render: Renders an entity's full declaration.

    """

    collection: str
    same_signature: Callable[[Any, Any], bool]
    render: Callable[[Any], str]


ENTITY_KINDS: tuple[EntityKind, ...] = (
    EntityKind(
        "values",
        lambda old, new: old.type == new.type,
        format_annotation,
    ),
    EntityKind(
        "binops",
        lambda old, new: old.type == new.type,
        format_annotation,
    ),
    EntityKind(
        "aliases",
        lambda old, new: old.type == new.type and old.args == new.args,
        format_alias_annotation,
    ),
    EntityKind(
        "unions",
        lambda old, new: old.cases == new.cases and old.args == new.args,
        format_union_annotation,
    ),
)


def diff_item(published: Any, current: Any, kind: EntityKind) -> ItemContentDiff | None:
    """Compare two same-named entities of the same kind.

    Returns None when neither the comment nor the signature changed.

    """
    comment_diff = None
    if published.comment != current.comment:
        comment_diff = compute_line_diff(published.comment, current.comment)

    old_annotation = None
    if not kind.same_signature(published, current):
        old_annotation = kind.render(published)

    if comment_diff is None and old_annotation is None:
        return None
    return ItemContentDiff(comment_diff=comment_diff, old_annotation=old_annotation)


def diff_module(published: DocumentedModule, current: DocumentedModule) -> ModuleContentDiff | None:
    """Compare the shared entities of two versions of one module."""
    items: dict[str, ItemContentDiff] = {}
    for kind in ENTITY_KINDS:
        published_by_name = {e.name: e for e in getattr(published, kind.collection)}
        for entity in getattr(current, kind.collection):
            old = published_by_name.get(entity.name)
            if old is None:
                continue
            item = diff_item(old, entity, kind)
            if item is not None:
                items[entity.name] = item

    return ModuleContentDiff(items=items) if items else None


def compute_content_diff(
    published_modules: Sequence[DocumentedModule] | None,
    current_modules: Sequence[DocumentedModule] | None,
    published_readme: str | None,
    current_readme: str | None,
) -> ContentDiff | None:
    """Compute the content diff between two documentation snapshots.

    Returns None when either snapshot is missing, or when no shared entity
    changed and the README produced no diff.  A missing README on either
    side skips the README comparison only.

    """
    if published_modules is None or current_modules is None:
        return None

    published_by_name = {module.name: module for module in published_modules}

    modules: dict[str, ModuleContentDiff] = {}
    for current in current_modules:
        published = published_by_name.get(current.name)
        if published is None:
            continue
        module_diff = diff_module(published, current)
        if module_diff is not None:
            modules[current.name] = module_diff

    readme_diff = None
    if (
        published_readme is not None
        and current_readme is not None
        and published_readme != current_readme
    ):
        readme_diff = compute_line_diff(published_readme, current_readme)

    if not modules and readme_diff is None:
        return None
    return ContentDiff(modules=modules, readme_diff=readme_diff)
