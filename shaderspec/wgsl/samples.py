"""Helpers for loading the bundled sample documents used in tests.

The repository ships a few ``.bs`` excerpts of the WGSL source that capture
the markup the scanner has to cope with.  The helpers here load and parse
them on demand so tests can focus on semantic checks instead of I/O
boilerplate.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from .document import SpecDocument

SAMPLE_ROOT = Path(__file__).resolve().parents[2] / "tests" / "python" / "fixtures" / "documents"


@dataclass(frozen=True)
class SampleDocument:
    """A parsed sample together with where it came from."""

    name: str
    path: Path
    text: str
    document: SpecDocument


def load_sample_documents(root: Path | None = None) -> Iterable[SampleDocument]:
    """Yield parsed representations of the bundled sample documents.

    Parameters
    ----------
    root:
        Optional directory override.  When omitted the default collection
        under ``tests/python/fixtures/documents`` is used.
    """

    yield from _iter_samples(root or SAMPLE_ROOT)


def _iter_samples(root: Path) -> Iterator[SampleDocument]:
    if not root.exists():
        return
    for path in sorted(root.glob("*.bs")):
        text = path.read_text(encoding="utf-8")
        yield SampleDocument(
            name=path.stem, path=path, text=text, document=SpecDocument.from_text(text)
        )


__all__ = ["SAMPLE_ROOT", "SampleDocument", "load_sample_documents"]
