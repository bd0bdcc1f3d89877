"""Grammar for one row of a builtin overload table.

Rows look like::

    <tr algorithm="textureSampleLevel 2d array">
        <td><var ignore>A</var> is [=i32=], or [=u32=]
        <td><xmp highlight=rust>
    fn textureSampleLevel(t: texture_2d_array<f32>,
                          s: sampler,
                          coords: vec2<f32>,
                          array_index: A,
                          level: f32) -> vec4<f32></xmp>
"""

from __future__ import annotations

from dataclasses import dataclass

from .fn_decl import FunctionDecl, read_fn_decl
from .parametrization import CELL_OPEN, Parametrization, read_parametrization
from .primitives import Cursor, parse_complete

__all__ = ["ROW_PREFIX", "OverloadRow", "parse_overload_row", "read_overload_row"]

ROW_PREFIX = '<tr algorithm="'
CODE_OPEN = "<xmp highlight=rust>"
CODE_CLOSE = "</xmp>"


@dataclass(frozen=True, slots=True)
class OverloadRow:
    algorithm: str
    parametrization: Parametrization
    fn_decl: FunctionDecl

    def __str__(self) -> str:
        text = f"#[{self.algorithm}]\n{self.fn_decl}"
        if self.parametrization.bounds:
            text += f"\nwhere\n{self.parametrization}"
        return text


def read_overload_row(cursor: Cursor) -> OverloadRow:
    with cursor.context("overload row"):
        cursor.expect(ROW_PREFIX)
        algorithm = cursor.take_while(lambda ch: ch != '"')
        cursor.expect('">')

        cursor.skip_ws()
        cursor.expect(CELL_OPEN)
        cursor.skip_ws()
        parametrization = read_parametrization(cursor)

        cursor.skip_ws()
        cursor.expect(CELL_OPEN)
        cursor.skip_ws()
        cursor.expect(CODE_OPEN)
        cursor.skip_ws()
        fn_decl = read_fn_decl(cursor)
        cursor.skip_ws()
        cursor.expect(CODE_CLOSE)
    return OverloadRow(algorithm=algorithm, parametrization=parametrization, fn_decl=fn_decl)


def parse_overload_row(text: str) -> OverloadRow:
    return parse_complete(text, read_overload_row)
