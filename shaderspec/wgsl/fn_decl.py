"""Function signature grammar: ``fn name(arg: Type, ...) -> Type``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .primitives import Cursor, Identifier, parse_complete
from .type_expr import TypeExpr, read_type

__all__ = ["FunctionDecl", "parse_fn_decl", "read_fn_decl"]

_INDENT = "    "


@dataclass(frozen=True, slots=True)
class FunctionDecl:
    """A builtin declaration; ``returns`` is ``void`` when no arrow is written."""

    name: Identifier
    args: tuple[tuple[Identifier, TypeExpr], ...] = ()
    returns: TypeExpr = TypeExpr.void()

    def __post_init__(self) -> None:
        if not isinstance(self.name, Identifier):
            object.__setattr__(self, "name", Identifier(self.name))
        args = tuple(
            (arg if isinstance(arg, Identifier) else Identifier(arg), ty) for arg, ty in self.args
        )
        object.__setattr__(self, "args", args)

    @classmethod
    def build(
        cls,
        name: str,
        args: Iterable[tuple[str, str | TypeExpr]] = (),
        returns: str | TypeExpr | None = None,
    ) -> "FunctionDecl":
        """Convenience constructor accepting type strings."""

        def as_type(value: str | TypeExpr) -> TypeExpr:
            return value if isinstance(value, TypeExpr) else TypeExpr.from_identifier(value)

        return cls(
            name=Identifier(name),
            args=tuple((Identifier(arg), as_type(ty)) for arg, ty in args),
            returns=TypeExpr.void() if returns is None else as_type(returns),
        )

    def types_mentioned(self) -> Iterator[TypeExpr]:
        """Yield the return type followed by each argument type."""

        yield self.returns
        for _, ty in self.args:
            yield ty

    def mentions(self, target: TypeExpr) -> bool:
        return any(ty.find(target) is not None for ty in self.types_mentioned())

    def replace(self, target: TypeExpr, replacement: TypeExpr) -> "FunctionDecl":
        return FunctionDecl(
            name=self.name,
            args=tuple((arg, ty.replace(target, replacement)) for arg, ty in self.args),
            returns=self.returns.replace(target, replacement),
        )

    def signature(self) -> str:
        """Single-line form, e.g. ``fn abs(e: f32) -> f32``."""

        args = ", ".join(f"{arg}: {ty}" for arg, ty in self.args)
        return f"fn {self.name}({args}) -> {self.returns}"

    def __str__(self) -> str:
        lines = [f"fn {self.name}("]
        width = max((len(arg) for arg, _ in self.args), default=0)
        last = len(self.args) - 1
        for index, (arg, ty) in enumerate(self.args):
            comma = "," if index != last else ""
            lines.append(f"{_INDENT}{arg.as_str().ljust(width)} : {ty}{comma}")
        lines.append(f") -> {self.returns}")
        return "\n".join(lines)


def read_fn_decl(cursor: Cursor) -> FunctionDecl:
    with cursor.context("fn decl"):
        cursor.expect("fn")
        cursor.expect_ws()
        name = cursor.read_identifier()
        with cursor.committed():
            cursor.skip_ws()
            cursor.expect("(")
            args = _read_arguments(cursor)
            cursor.skip_ws()
            cursor.expect(")")
        returns = cursor.attempt(_read_return_type) or TypeExpr.void()
    return FunctionDecl(name=name, args=args, returns=returns)


def _read_arguments(cursor: Cursor) -> tuple[tuple[Identifier, TypeExpr], ...]:
    args: list[tuple[Identifier, TypeExpr]] = []
    first = cursor.attempt(_read_argument)
    if first is None:
        return ()
    args.append(first)
    while True:
        mark = cursor.pos
        cursor.skip_ws()
        if not cursor.match(","):
            cursor.pos = mark
            break
        following = cursor.attempt(_read_argument)
        if following is None:
            cursor.pos = mark
            break
        args.append(following)
    return tuple(args)


def _read_argument(cursor: Cursor) -> tuple[Identifier, TypeExpr]:
    with cursor.context("argument"):
        cursor.skip_ws()
        name = cursor.read_identifier()
        cursor.skip_ws()
        cursor.expect(":")
        cursor.skip_ws()
        return name, read_type(cursor)


def _read_return_type(cursor: Cursor) -> TypeExpr:
    cursor.skip_ws()
    cursor.expect("->")
    cursor.skip_ws()
    return read_type(cursor)


def parse_fn_decl(text: str) -> FunctionDecl:
    """Parse ``text`` as one complete function signature."""

    return parse_complete(text, read_fn_decl)
