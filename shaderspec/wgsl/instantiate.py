"""Expand union-bounded overload rows into concrete signatures.

Union bounds such as ``T is i32 or u32`` are applied by substituting every
occurrence of ``T`` in the signature with each variant.  Several union bounds
multiply: two bounds of two variants each give four overloads, and so on.
Trait and prose bounds cannot be expanded and stay attached to every result.
"""

from __future__ import annotations

from typing import Sequence, cast

from .fn_decl import FunctionDecl
from .overload_row import OverloadRow
from .parametrization import Parametrization, UnionBound
from .primitives import Identifier
from .type_expr import TypeExpr

__all__ = ["NotApplicable", "instantiate", "instantiate_type_param", "instantiate_type_param_multi"]


class NotApplicable(Exception):
    """The type parameter does not occur in the signature."""


def instantiate_type_param(
    union: UnionBound, param: Identifier, fn_decl: FunctionDecl
) -> list[FunctionDecl]:
    """One declaration per variant of ``union`` with ``param`` substituted.

    Raises :class:`NotApplicable` when ``param`` is not mentioned anywhere in
    ``fn_decl``.
    """

    target = TypeExpr.from_identifier(param)
    if not fn_decl.mentions(target):
        raise NotApplicable(param.as_str())
    return [fn_decl.replace(target, variant) for variant in union]


def instantiate_type_param_multi(
    union: UnionBound, param: Identifier, fn_decls: Sequence[FunctionDecl]
) -> list[FunctionDecl]:
    """Apply ``union`` to each of ``fn_decls``, keeping the ones it does not touch."""

    expanded: list[FunctionDecl] = []
    for fn_decl in fn_decls:
        try:
            expanded.extend(instantiate_type_param(union, param, fn_decl))
        except NotApplicable:
            expanded.append(fn_decl)
    return expanded


def instantiate(row: OverloadRow) -> list[OverloadRow]:
    """Resolve every union bound of ``row``.

    Bounds are processed in source order, so the last union bound varies
    fastest in the result.  Every produced row keeps the source algorithm
    label and only the non-union bounds.
    """

    leftover = Parametrization(row.parametrization.leftovers())
    fn_decls = [row.fn_decl]
    for bound in row.parametrization.unions():
        union = cast(UnionBound, bound.kind)
        fn_decls = instantiate_type_param_multi(union, bound.type_param, fn_decls)
    return [
        OverloadRow(algorithm=row.algorithm, parametrization=leftover, fn_decl=fn_decl)
        for fn_decl in fn_decls
    ]
