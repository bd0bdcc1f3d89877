"""Decoder for the ``texture_*`` family of WGSL type names.

A texture name is decomposed into a :class:`TextureDescriptor`.  The segments
have a single legal order::

    texture [_depth] [_storage] [_multisampled] (_1d|_2d|_3d|_cube|_external) [_array]

``_external`` occupies the dimensionality slot but is recorded as a flag with
the dimensionality normalised to ``2d``.  Anything out of order is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from .primitives import Cursor

__all__ = ["DIMENSIONALITIES", "TextureDescriptor", "parse_texture_name", "read_texture_name"]

DIMENSIONALITIES = ("1d", "2d", "3d", "cube")

_FLAG_SEGMENTS = ("depth", "storage", "multisampled")


@dataclass(frozen=True, slots=True)
class TextureDescriptor:
    """Structured form of a texture type identifier."""

    dimensionality: str = "2d"
    depth: bool = False
    storage: bool = False
    multisampled: bool = False
    external: bool = False
    array: bool = False

    def __post_init__(self) -> None:
        if self.dimensionality not in DIMENSIONALITIES:
            raise ValueError(f"unknown texture dimensionality: {self.dimensionality!r}")
        if self.external:
            object.__setattr__(self, "dimensionality", "2d")

    @property
    def sampled_type_required(self) -> bool:
        """Whether the texture takes a sampled-type parameter (``texture_2d<T>``)."""

        return not (self.depth or self.storage or self.external)

    def __str__(self) -> str:
        parts = ["texture"]
        if self.depth:
            parts.append("depth")
        if self.storage:
            parts.append("storage")
        if self.multisampled:
            parts.append("multisampled")
        parts.append("external" if self.external else self.dimensionality)
        if self.array:
            parts.append("array")
        return "_".join(parts)


def read_texture_name(cursor: Cursor) -> TextureDescriptor:
    """Decode a texture identifier starting at ``cursor``.

    The whole identifier must be consumed: a trailing ``[A-Za-z0-9_]`` after
    the last recognised segment is an error.
    """

    with cursor.context("texture name"):
        cursor.expect("texture")
        flags = {name: cursor.match(f"_{name}") for name in _FLAG_SEGMENTS}

        external = False
        dimensionality = None
        if cursor.match("_external"):
            external = True
            dimensionality = "2d"
        else:
            for candidate in DIMENSIONALITIES:
                if cursor.match(f"_{candidate}"):
                    dimensionality = candidate
                    break
        if dimensionality is None:
            raise cursor.error(f"expected texture dimensionality, found {cursor.peek(12)!r}")

        array = cursor.match("_array")
        following = cursor.peek()
        if following and (following.isalnum() or following == "_"):
            raise cursor.error(f"unexpected texture name segment {cursor.peek(12)!r}")

    return TextureDescriptor(
        dimensionality=dimensionality,
        depth=flags["depth"],
        storage=flags["storage"],
        multisampled=flags["multisampled"],
        external=external,
        array=array,
    )


def parse_texture_name(text: str) -> TextureDescriptor:
    """Decode ``text`` as a complete texture identifier."""

    cursor = Cursor(text)
    descriptor = read_texture_name(cursor)
    if not cursor.eof:
        raise cursor.error(f"unexpected trailing input {cursor.peek(12)!r}")
    return descriptor
