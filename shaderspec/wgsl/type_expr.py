"""Type expressions as they appear in WGSL builtin signatures.

A type expression is a *kind* (``void``, ``vecN``, ``matCxR``, a texture, or
any other name) plus an ordered tuple of generic parameters, e.g.
``vec4<f32>`` or ``texture_storage_2d<F, A>``.  Values are immutable;
substitution produces new trees.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from .primitives import Cursor, Identifier, parse_complete
from .texture import TextureDescriptor, read_texture_name

__all__ = [
    "Matrix",
    "Named",
    "Texture",
    "TypeExpr",
    "TypeKind",
    "Vector",
    "Void",
    "kind_from_identifier",
    "parse_type",
    "read_type",
]


# ---------------------------------------------------------------------------
# Kinds


@dataclass(frozen=True, slots=True)
class Void:
    """Return type of a function that returns nothing."""

    def __str__(self) -> str:
        return "void"


@dataclass(frozen=True, slots=True)
class Vector:
    """``vecN``: ``dimension`` is the single character after ``vec``."""

    dimension: str

    def __str__(self) -> str:
        return f"vec{self.dimension}"


@dataclass(frozen=True, slots=True)
class Matrix:
    """``matCxR``."""

    columns: str
    rows: str

    def __str__(self) -> str:
        return f"mat{self.columns}x{self.rows}"


@dataclass(frozen=True, slots=True)
class Texture:
    descriptor: TextureDescriptor

    def __str__(self) -> str:
        return str(self.descriptor)


@dataclass(frozen=True, slots=True)
class Named:
    """Scalars, type variables and everything without a more specific shape."""

    name: Identifier

    def __str__(self) -> str:
        return str(self.name)


TypeKind = Union[Void, Vector, Matrix, Texture, Named]


def kind_from_identifier(ident: Identifier | str) -> TypeKind:
    """Classify a bare type name; the first matching shape wins."""

    if not isinstance(ident, Identifier):
        ident = Identifier(ident)
    name = ident.as_str()
    if name == "void":
        return Void()
    if len(name) == 4 and name.startswith("vec"):
        return Vector(name[3])
    if len(name) == 6 and name.startswith("mat") and name[4] == "x":
        return Matrix(name[3], name[5])
    if name.startswith("texture"):
        cursor = Cursor(name)
        descriptor = cursor.attempt(read_texture_name)
        if descriptor is not None and cursor.eof:
            return Texture(descriptor)
    return Named(ident)


# ---------------------------------------------------------------------------
# Type expressions


@dataclass(frozen=True, slots=True)
class TypeExpr:
    kind: TypeKind
    params: tuple["TypeExpr", ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.params, tuple):
            object.__setattr__(self, "params", tuple(self.params))

    @classmethod
    def from_identifier(
        cls, name: Identifier | str, params: Iterable["TypeExpr"] = ()
    ) -> "TypeExpr":
        return cls(kind_from_identifier(name), tuple(params))

    @classmethod
    def void(cls) -> "TypeExpr":
        return cls(Void())

    @property
    def is_void(self) -> bool:
        return isinstance(self.kind, Void) and not self.params

    def walk(self) -> Iterator["TypeExpr"]:
        """Pre-order traversal over this node and its transitive parameters."""

        yield self
        for param in self.params:
            yield from param.walk()

    def find(self, target: "TypeExpr") -> Optional["TypeExpr"]:
        """Return the first node (pre-order) structurally equal to ``target``."""

        for node in self.walk():
            if node == target:
                return node
        return None

    def replace(self, target: "TypeExpr", replacement: "TypeExpr") -> "TypeExpr":
        """Return a copy with every node equal to ``target`` swapped for ``replacement``."""

        if self == target:
            return replacement
        if not self.params:
            return self
        return TypeExpr(self.kind, tuple(p.replace(target, replacement) for p in self.params))

    def __str__(self) -> str:
        if not self.params:
            return str(self.kind)
        return f"{self.kind}<{', '.join(str(p) for p in self.params)}>"


# ---------------------------------------------------------------------------
# Grammar


def read_type(cursor: Cursor) -> TypeExpr:
    """Read ``kind [< T, ... >]`` at the cursor."""

    with cursor.context("type"):
        kind = kind_from_identifier(cursor.read_identifier())
        params = cursor.attempt(_read_type_params)
    return TypeExpr(kind, params or ())


def _read_type_params(cursor: Cursor) -> tuple[TypeExpr, ...]:
    cursor.skip_ws()
    cursor.expect("<")
    params = [_read_nested(cursor)]
    while True:
        mark = cursor.pos
        cursor.skip_ws()
        if not cursor.match(","):
            cursor.pos = mark
            break
        params.append(_read_nested(cursor))
    cursor.skip_ws()
    cursor.expect(">")
    return tuple(params)


def _read_nested(cursor: Cursor) -> TypeExpr:
    cursor.skip_ws()
    return read_type(cursor)


def parse_type(text: str) -> TypeExpr:
    """Parse ``text`` as one complete type expression."""

    return parse_complete(text, read_type)
