"""Grammar for the type-parameter constraints in overload table cells.

The WGSL source describes each overload's generic parameters in prose-like
markup, for example::

    <td><var ignore>A</var> is [=i32=], or [=u32=]<br>
        |F| is a [=texel format=]<br>
        <var ignore>CF</var> depends on the storage texel format |F|.
    <td>

Each line becomes a :class:`Bound`: a union of concrete types, a named trait,
or free prose when neither shape applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from .primitives import Cursor, Identifier, normalize_whitespace, parse_complete
from .type_expr import TypeExpr, read_type

__all__ = [
    "Bound",
    "BoundKind",
    "Parametrization",
    "ProseBound",
    "TraitBound",
    "UnionBound",
    "parse_parametrization",
    "read_bound",
    "read_generic_arg",
    "read_parametrization",
]

LINE_BREAK = "<br>"
CELL_OPEN = "<td>"
VAR_OPEN = "<var ignore>"
VAR_CLOSE = "</var>"


@dataclass(frozen=True, slots=True)
class UnionBound:
    """``T is [=i32=], [=u32=], or [=f32=]``."""

    variants: tuple[TypeExpr, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.variants, tuple):
            object.__setattr__(self, "variants", tuple(self.variants))
        if not self.variants:
            raise ValueError("union bound needs at least one variant")

    def __iter__(self) -> Iterator[TypeExpr]:
        return iter(self.variants)

    def __len__(self) -> int:
        return len(self.variants)

    def __str__(self) -> str:
        return "is " + " | ".join(str(ty) for ty in self.variants)


@dataclass(frozen=True, slots=True)
class TraitBound:
    """``T is a [=texel format=]``; kept symbolic."""

    name: str

    def __str__(self) -> str:
        return f"is a `{self.name}`"


@dataclass(frozen=True, slots=True)
class ProseBound:
    """Free text that fits neither of the structured shapes."""

    text: str

    def __str__(self) -> str:
        return f'"{self.text}"'


BoundKind = Union[UnionBound, TraitBound, ProseBound]


@dataclass(frozen=True, slots=True)
class Bound:
    type_param: Identifier
    kind: BoundKind

    @property
    def is_union(self) -> bool:
        return isinstance(self.kind, UnionBound)

    def __str__(self) -> str:
        return f"{self.type_param}: {self.kind}"


@dataclass(frozen=True, slots=True)
class Parametrization:
    """Ordered bounds of one overload row."""

    bounds: tuple[Bound, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.bounds, tuple):
            object.__setattr__(self, "bounds", tuple(self.bounds))

    def __iter__(self) -> Iterator[Bound]:
        return iter(self.bounds)

    def __len__(self) -> int:
        return len(self.bounds)

    def unions(self) -> tuple[Bound, ...]:
        return tuple(bound for bound in self.bounds if bound.is_union)

    def leftovers(self) -> tuple[Bound, ...]:
        return tuple(bound for bound in self.bounds if not bound.is_union)

    def __str__(self) -> str:
        return ",\n".join(f"    {bound}" for bound in self.bounds)


# ---------------------------------------------------------------------------
# Grammar


def read_generic_arg(cursor: Cursor) -> Identifier:
    """``<var ignore>T</var>``, ``|T|`` or a bare ``T``."""

    with cursor.context("generic argument"):
        cursor.skip_ws()
        if cursor.match(VAR_OPEN):
            with cursor.committed():
                cursor.skip_ws()
                ident = _read_plain_or_barred(cursor)
                cursor.skip_ws()
                cursor.expect(VAR_CLOSE)
            return ident
        return _read_plain_or_barred(cursor)


def _read_plain_or_barred(cursor: Cursor) -> Identifier:
    if cursor.match("|"):
        with cursor.committed():
            cursor.skip_ws()
            ident = cursor.read_identifier()
            cursor.expect("|")
        return ident
    return cursor.read_identifier()


def read_trait_name(cursor: Cursor) -> str:
    """``[=words and spaces=]``."""

    with cursor.context("trait name"):
        cursor.expect("[=")
        with cursor.committed():
            name = cursor.take_while(lambda ch: ch.isspace() or ch.isalnum())
            if not name:
                raise cursor.error("expected trait name")
            cursor.expect("=]")
    return name


def _read_trait_bound(cursor: Cursor) -> TraitBound:
    _read_is(cursor)
    cursor.skip_ws()
    if not (cursor.match_word("an") or cursor.match_word("a")):
        raise cursor.error("expected 'a' or 'an'")
    return TraitBound(read_trait_name(cursor))


def _read_union_bound(cursor: Cursor) -> UnionBound:
    _read_is(cursor)
    with cursor.context("union bound"):
        variants = [_read_union_variant(cursor)]
        while True:
            mark = cursor.pos
            if not _match_union_separator(cursor):
                break
            variant = cursor.attempt(_read_union_variant)
            if variant is None:
                cursor.pos = mark
                break
            variants.append(variant)
    return UnionBound(tuple(variants))


def _match_union_separator(cursor: Cursor) -> bool:
    mark = cursor.pos
    cursor.skip_ws()
    if cursor.match(","):
        after_comma = cursor.pos
        cursor.skip_ws()
        if not cursor.match_word("or"):
            cursor.pos = after_comma
        return True
    if cursor.match_word("or"):
        return True
    cursor.pos = mark
    return False


def _read_union_variant(cursor: Cursor) -> TypeExpr:
    cursor.skip_ws()
    if cursor.match("[="):
        with cursor.committed():
            ty = read_type(cursor)
        # "[=texel format=]" style links are not types; let the caller fall back.
        cursor.expect("=]")
        return ty
    cursor.expect("`")
    ty = read_type(cursor)
    cursor.expect("`")
    return ty


def _read_is(cursor: Cursor) -> None:
    cursor.skip_ws()
    if not cursor.match_word("is"):
        raise cursor.error("expected 'is'")


def _read_prose(cursor: Cursor) -> ProseBound:
    with cursor.context("prose bound"):
        text = cursor.take_until(LINE_BREAK, CELL_OPEN)
    return ProseBound(normalize_whitespace(text))


def read_bound(cursor: Cursor) -> Bound:
    with cursor.context("bound"):
        type_param = read_generic_arg(cursor)
        kind: BoundKind | None = cursor.attempt(_read_trait_bound)
        if kind is None:
            kind = cursor.attempt(_read_union_bound)
        if kind is None:
            kind = _read_prose(cursor)
    return Bound(type_param, kind)


def _read_bound_line(cursor: Cursor) -> Bound:
    cursor.skip_ws()
    bound = read_bound(cursor)
    while True:
        mark = cursor.pos
        cursor.skip_ws()
        if not cursor.match(LINE_BREAK):
            cursor.pos = mark
            break
    return bound


def read_parametrization(cursor: Cursor) -> Parametrization:
    """One or more bounds, each optionally followed by ``<br>`` tokens."""

    with cursor.context("parametrization"):
        bounds = [_read_bound_line(cursor)]
        while True:
            bound = cursor.attempt(_read_bound_line)
            if bound is None:
                break
            bounds.append(bound)
    return Parametrization(tuple(bounds))


def parse_parametrization(text: str) -> Parametrization:
    return parse_complete(text, read_parametrization)
