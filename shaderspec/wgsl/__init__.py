"""Builtin-signature extraction from the WGSL specification source."""

from .document import SpecDocument
from .fn_decl import FunctionDecl, parse_fn_decl
from .instantiate import instantiate
from .options import DEFAULT_SOURCE_URL, ExtractorOptions, load_options
from .overload_row import OverloadRow, parse_overload_row
from .parametrization import (
    Bound,
    Parametrization,
    ProseBound,
    TraitBound,
    UnionBound,
    parse_parametrization,
)
from .primitives import GrammarError, Identifier
from .texture import TextureDescriptor, parse_texture_name
from .type_expr import Matrix, Named, Texture, TypeExpr, Vector, Void, parse_type

__all__ = [
    "DEFAULT_SOURCE_URL",
    "Bound",
    "ExtractorOptions",
    "FunctionDecl",
    "GrammarError",
    "Identifier",
    "Matrix",
    "Named",
    "OverloadRow",
    "Parametrization",
    "ProseBound",
    "SpecDocument",
    "Texture",
    "TextureDescriptor",
    "TraitBound",
    "TypeExpr",
    "UnionBound",
    "Vector",
    "Void",
    "instantiate",
    "load_options",
    "parse_fn_decl",
    "parse_overload_row",
    "parse_parametrization",
    "parse_texture_name",
    "parse_type",
]
