"""Tests for overload table rows and their instantiation."""

from __future__ import annotations

import pytest

from shaderspec.wgsl.instantiate import instantiate
from shaderspec.wgsl.overload_row import parse_overload_row, read_overload_row
from shaderspec.wgsl.parametrization import ProseBound
from shaderspec.wgsl.primitives import Cursor, GrammarError

SAMPLE_ROW = (
    '<tr algorithm="sample"><td><var ignore>A</var> is [=i32=], or [=u32=]'
    "<td><xmp highlight=rust>fn sample(x: A) -> A</xmp>"
)

TEXTURE_ROW = """<tr algorithm="textureSampleLevel 2d array">
    <td><var ignore>A</var> is [=i32=], or [=u32=]<br>
    <var ignore>X</var> is [=i32=] or [=u32=]
    <var ignore>Y</var> is [=i32=], [=u32=] or [=f32=]
    <var ignore>CF</var> depends on the storage texel format |F|.
        [See the texel format table](#storage-texel-formats) for the mapping of texel
        format to channel format.
    <td><xmp highlight=rust>
        fn textureSampleLevel(t: texture_2d_array<f32>,
                            s: sampler,
                            coords: vec2<f32>,
                            array_index: A,
                            level: f32) -> vec4<f32></xmp>"""


def test_parse_sample_row() -> None:
    row = parse_overload_row(SAMPLE_ROW)
    assert row.algorithm == "sample"
    assert len(row.parametrization) == 1
    assert row.fn_decl.signature() == "fn sample(x: A) -> A"


def test_sample_row_instantiates_each_variant() -> None:
    rows = instantiate(parse_overload_row(SAMPLE_ROW))
    assert [row.fn_decl.signature() for row in rows] == [
        "fn sample(x: i32) -> i32",
        "fn sample(x: u32) -> u32",
    ]
    assert all(row.algorithm == "sample" for row in rows)
    assert all(len(row.parametrization) == 0 for row in rows)


def test_parse_texture_row() -> None:
    row = parse_overload_row(TEXTURE_ROW)
    assert row.algorithm == "textureSampleLevel 2d array"
    assert [bound.type_param.as_str() for bound in row.parametrization] == ["A", "X", "Y", "CF"]
    assert row.fn_decl.name.as_str() == "textureSampleLevel"
    assert len(row.fn_decl.args) == 5


def test_unused_unions_do_not_multiply() -> None:
    rows = instantiate(parse_overload_row(TEXTURE_ROW))
    assert [str(row.fn_decl.args[3][1]) for row in rows] == ["i32", "u32"]
    for row in rows:
        (leftover,) = row.parametrization.bounds
        assert leftover.type_param.as_str() == "CF"
        assert isinstance(leftover.kind, ProseBound)


def test_reader_leaves_trailing_markup() -> None:
    cursor = Cursor(SAMPLE_ROW + "\n  <tr><td>Description")
    read_overload_row(cursor)
    assert cursor.rest == "\n  <tr><td>Description"


def test_render_lists_bounds_after_signature() -> None:
    row = parse_overload_row(SAMPLE_ROW)
    assert str(row) == (
        "#[sample]\n"
        "fn sample(\n"
        "    x : A\n"
        ") -> A\n"
        "where\n"
        "    A: is i32 | u32"
    )
    (concrete, _) = instantiate(row)
    assert str(concrete) == "#[sample]\nfn sample(\n    x : i32\n) -> i32"


@pytest.mark.parametrize(
    ("text", "committed"),
    [
        ('<tr algorithm="x">', False),
        ('<tr algorithm="x"><td>\n<td><xmp highlight=rust>fn x()</xmp>', False),
        ('<tr algorithm="x"><td><var ignore>1x</var> is [=i32=]<td>', True),
        ('<tr algorithm="x"><td>T is [=i32=]<td><xmp highlight=rust>fn x(</xmp>', True),
        ("<tr><td>Description", False),
    ],
)
def test_row_failures(text: str, committed: bool) -> None:
    with pytest.raises(GrammarError) as exc:
        parse_overload_row(text)
    assert exc.value.committed is committed
