"""Canonical JSON export of the builtin catalogue.

Types are written in their canonical textual form so generators can consume
them directly.  Each function and row carries a content-addressed ``id``
derived from its structural encoding; reading a payload back recomputes the
hash to detect hand edits or corruption.
"""

from __future__ import annotations

import hashlib
import json
from collections import OrderedDict
from typing import Any, Iterable, Mapping

from .fn_decl import FunctionDecl
from .overload_row import OverloadRow
from .parametrization import Bound, BoundKind, Parametrization, ProseBound, TraitBound, UnionBound
from .primitives import Identifier
from .type_expr import parse_type

__all__ = ["catalogue_to_json", "from_json", "rows_from_payload", "to_json"]


def to_json(rows: Iterable[OverloadRow], *, ensure_ascii: bool = True) -> str:
    """Serialize overload rows into canonical JSON."""

    payload = [_serialize_row(row) for row in rows]
    return json.dumps(payload, indent=2, separators=(",", ": "), ensure_ascii=ensure_ascii)


def catalogue_to_json(
    fns: Iterable[FunctionDecl], rows: Iterable[OverloadRow], *, ensure_ascii: bool = True
) -> str:
    payload = OrderedDict(
        [
            ("functions", [_serialize_fn(fn_decl) for fn_decl in fns]),
            ("overloads", [_serialize_row(row) for row in rows]),
        ]
    )
    return json.dumps(payload, indent=2, separators=(",", ": "), ensure_ascii=ensure_ascii)


def from_json(payload: str) -> list[OverloadRow]:
    """Read rows written by :func:`to_json`, validating every hash."""

    raw = json.loads(payload)
    if not isinstance(raw, list):
        raise ValueError("expected a JSON array of overload rows")
    return rows_from_payload(raw)


def rows_from_payload(raw: Iterable[Mapping[str, Any]]) -> list[OverloadRow]:
    return [_deserialize_row(entry) for entry in raw]


# ---------------------------------------------------------------------------
# Serialization helpers


def _serialize_fn(fn_decl: FunctionDecl) -> OrderedDict[str, Any]:
    data: OrderedDict[str, Any] = OrderedDict()
    data["name"] = fn_decl.name.as_str()
    data["args"] = [
        OrderedDict([("name", arg.as_str()), ("type", str(ty))]) for arg, ty in fn_decl.args
    ]
    data["returns"] = str(fn_decl.returns)
    data["id"] = _hash_payload(data)
    return data


def _serialize_bound(bound: Bound) -> OrderedDict[str, Any]:
    data: OrderedDict[str, Any] = OrderedDict()
    data["param"] = bound.type_param.as_str()
    kind = bound.kind
    if isinstance(kind, UnionBound):
        data["kind"] = "union"
        data["variants"] = [str(ty) for ty in kind]
    elif isinstance(kind, TraitBound):
        data["kind"] = "trait"
        data["name"] = kind.name
    else:
        data["kind"] = "prose"
        data["text"] = kind.text
    return data


def _serialize_row(row: OverloadRow) -> OrderedDict[str, Any]:
    data: OrderedDict[str, Any] = OrderedDict()
    data["algorithm"] = row.algorithm
    data["bounds"] = [_serialize_bound(bound) for bound in row.parametrization]
    data["fn"] = _serialize_fn(row.fn_decl)
    data["id"] = _hash_payload(data)
    return data


def _hash_payload(data: Mapping[str, Any]) -> str:
    normalized = json.dumps(
        _strip_ids(data), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]


def _strip_ids(data: Any) -> Any:
    if isinstance(data, Mapping):
        return {key: _strip_ids(value) for key, value in data.items() if key != "id"}
    if isinstance(data, list):
        return [_strip_ids(item) for item in data]
    return data


# ---------------------------------------------------------------------------
# Deserialization helpers


def _deserialize_fn(data: Mapping[str, Any]) -> FunctionDecl:
    _verify_hash(data)
    return FunctionDecl(
        name=Identifier(data["name"]),
        args=tuple((Identifier(arg["name"]), parse_type(arg["type"])) for arg in data["args"]),
        returns=parse_type(data["returns"]),
    )


def _deserialize_bound(data: Mapping[str, Any]) -> Bound:
    kind_name = data.get("kind")
    kind: BoundKind
    if kind_name == "union":
        kind = UnionBound(tuple(parse_type(text) for text in data["variants"]))
    elif kind_name == "trait":
        kind = TraitBound(str(data["name"]))
    elif kind_name == "prose":
        kind = ProseBound(str(data["text"]))
    else:
        raise ValueError(f"unknown bound kind {kind_name!r}")
    return Bound(Identifier(data["param"]), kind)


def _deserialize_row(data: Mapping[str, Any]) -> OverloadRow:
    _verify_hash(data)
    return OverloadRow(
        algorithm=str(data["algorithm"]),
        parametrization=Parametrization(tuple(_deserialize_bound(b) for b in data["bounds"])),
        fn_decl=_deserialize_fn(data["fn"]),
    )


def _verify_hash(data: Mapping[str, Any]) -> None:
    stored = data.get("id")
    if stored is None:
        raise ValueError("serialized entry is missing 'id'")
    if stored != _hash_payload(data):
        raise ValueError("serialized entry failed integrity check")
