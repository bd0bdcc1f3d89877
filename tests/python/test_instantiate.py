"""Tests for expanding union bounds into concrete overloads."""

from __future__ import annotations

import itertools

import pytest

from shaderspec.wgsl.fn_decl import parse_fn_decl
from shaderspec.wgsl.instantiate import (
    NotApplicable,
    instantiate,
    instantiate_type_param,
    instantiate_type_param_multi,
)
from shaderspec.wgsl.overload_row import OverloadRow
from shaderspec.wgsl.parametrization import (
    Bound,
    Parametrization,
    ProseBound,
    TraitBound,
    UnionBound,
    parse_parametrization,
)
from shaderspec.wgsl.primitives import Identifier
from shaderspec.wgsl.type_expr import parse_type


def union(*names: str) -> UnionBound:
    return UnionBound(tuple(parse_type(name) for name in names))


def make_row(signature: str, *bounds: Bound) -> OverloadRow:
    return OverloadRow(
        algorithm="test",
        parametrization=Parametrization(bounds),
        fn_decl=parse_fn_decl(signature),
    )


def test_single_parameter_substitution() -> None:
    decls = instantiate_type_param(
        union("i32", "u32"), Identifier("T"), parse_fn_decl("fn f(a: T, b: vec2<T>) -> T")
    )
    assert [decl.signature() for decl in decls] == [
        "fn f(a: i32, b: vec2<i32>) -> i32",
        "fn f(a: u32, b: vec2<u32>) -> u32",
    ]


def test_unmentioned_parameter_is_not_applicable() -> None:
    with pytest.raises(NotApplicable):
        instantiate_type_param(union("i32"), Identifier("T"), parse_fn_decl("fn f(a: u32)"))


def test_multi_keeps_untouched_declarations() -> None:
    decls = [parse_fn_decl("fn f(a: T)"), parse_fn_decl("fn g(a: u32)")]
    expanded = instantiate_type_param_multi(union("i32", "f32"), Identifier("T"), decls)
    assert [decl.signature() for decl in expanded] == [
        "fn f(a: i32) -> void",
        "fn f(a: f32) -> void",
        "fn g(a: u32) -> void",
    ]


def test_two_unions_give_every_pairing() -> None:
    row = make_row(
        "fn clamp(e: N, low: N, high: N) -> N",
        Bound(Identifier("N"), union("vec2<S>", "vec3<S>")),
        Bound(Identifier("S"), union("i32", "u32", "f32")),
    )
    rows = instantiate(row)
    assert len(rows) == 6
    expected = [
        f"fn clamp(e: {vec}<{scalar}>, low: {vec}<{scalar}>, high: {vec}<{scalar}>)"
        f" -> {vec}<{scalar}>"
        for vec, scalar in itertools.product(["vec2", "vec3"], ["i32", "u32", "f32"])
    ]
    assert [r.fn_decl.signature() for r in rows] == expected


def test_union_order_decides_which_parameter_varies_fastest() -> None:
    row = make_row(
        "fn f(a: A, b: B)",
        Bound(Identifier("A"), union("i32", "u32")),
        Bound(Identifier("B"), union("f16", "f32")),
    )
    pairs = [(str(r.fn_decl.args[0][1]), str(r.fn_decl.args[1][1])) for r in instantiate(row)]
    assert pairs == [("i32", "f16"), ("i32", "f32"), ("u32", "f16"), ("u32", "f32")]


def test_unused_union_is_a_no_op_multiplier() -> None:
    row = make_row(
        "fn abs(e: T) -> T",
        Bound(Identifier("S"), union("i32", "u32", "f32")),
    )
    rows = instantiate(row)
    assert len(rows) == 1
    assert rows[0].fn_decl == row.fn_decl


def test_leftover_bounds_follow_every_result() -> None:
    trait = Bound(Identifier("F"), TraitBound("texel format"))
    prose = Bound(Identifier("CF"), ProseBound("depends on F"))
    row = make_row(
        "fn load(t: texture_storage_2d<F, A>) -> vec4<CF>",
        trait,
        Bound(Identifier("A"), union("read", "write")),
        prose,
    )
    rows = instantiate(row)
    assert [str(r.fn_decl.args[0][1]) for r in rows] == [
        "texture_storage_2d<F, read>",
        "texture_storage_2d<F, write>",
    ]
    for produced in rows:
        assert produced.parametrization.bounds == (trait, prose)
        assert produced.algorithm == "test"


def test_row_without_unions_is_returned_unchanged() -> None:
    row = make_row("fn f(a: T)", Bound(Identifier("T"), TraitBound("concrete type")))
    assert instantiate(row) == [row]


def test_variant_may_mention_a_later_parameter() -> None:
    row = make_row(
        "fn f(e: N) -> N",
        Bound(Identifier("N"), union("vec2<S>")),
        Bound(Identifier("S"), union("i32", "u32")),
    )
    assert [r.fn_decl.signature() for r in instantiate(row)] == [
        "fn f(e: vec2<i32>) -> vec2<i32>",
        "fn f(e: vec2<u32>) -> vec2<u32>",
    ]


def test_duplicate_variants_are_not_collapsed() -> None:
    row = make_row("fn x(a: T)", *parse_parametrization("T is [=i32=], [=i32=]").bounds)
    rows = instantiate(row)
    assert len(rows) == 2
    assert [r.fn_decl.signature() for r in rows] == ["fn x(a: i32) -> void"] * 2
