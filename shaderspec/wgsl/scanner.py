"""Locate grammar matches inside an arbitrary haystack of text.

The scanner walks forward through the text and tries a reader at each
candidate offset; the first offset where the reader succeeds yields a match
and scanning resumes right after it.  When a literal ``prefix`` is supplied,
only offsets where that prefix occurs are tried.

Failures at a candidate offset fall into two groups.  Soft failures mean the
construct does not start there and are never reported.  Committed failures
mean the construct started but is malformed; by default they are counted and
skipped, with ``strict=True`` they are raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, Optional, TypeVar

from shaderspec.telemetry import metrics as telemetry_metrics
from shaderspec.telemetry.logger import get_logger

from .primitives import Cursor, GrammarError

__all__ = ["Match", "ScanResult", "iter_matches", "scan", "search"]

T = TypeVar("T")
Reader = Callable[[Cursor], T]

_LOGGER = get_logger("shaderspec.scanner")


@dataclass(frozen=True, slots=True)
class Match(Generic[T]):
    """A located construct together with the text skipped to reach it."""

    skipped: str
    value: T
    start: int
    end: int


@dataclass(slots=True)
class ScanResult(Generic[T]):
    matches: list[Match[T]] = field(default_factory=list)
    malformed: list[GrammarError] = field(default_factory=list)

    @property
    def values(self) -> list[T]:
        return [match.value for match in self.matches]


def search(
    text: str,
    reader: Reader[T],
    *,
    start: int = 0,
    prefix: Optional[str] = None,
    strict: bool = False,
    malformed: Optional[list[GrammarError]] = None,
) -> Optional[Match[T]]:
    """Return the first match at or after ``start``, or ``None``.

    Committed failures raise when ``strict`` is set; otherwise they are
    appended to ``malformed`` (when given) and the search moves on.
    """

    offset = start
    length = len(text)
    while offset <= length:
        if prefix is not None:
            offset = text.find(prefix, offset)
            if offset < 0:
                return None
        cursor = Cursor(text, offset)
        try:
            value = reader(cursor)
        except GrammarError as exc:
            if exc.committed:
                if strict:
                    raise
                _LOGGER.debug("skipping malformed candidate at %d: %s", offset, exc)
                if malformed is not None:
                    malformed.append(exc)
            offset += 1
            continue
        return Match(skipped=text[start:offset], value=value, start=offset, end=cursor.pos)
    return None


def iter_matches(
    text: str,
    reader: Reader[T],
    *,
    prefix: Optional[str] = None,
    strict: bool = False,
    malformed: Optional[list[GrammarError]] = None,
) -> Iterator[Match[T]]:
    position = 0
    while True:
        match = search(
            text, reader, start=position, prefix=prefix, strict=strict, malformed=malformed
        )
        if match is None:
            return
        yield match
        position = match.end if match.end > match.start else match.start + 1


def scan(
    text: str,
    reader: Reader[T],
    *,
    prefix: Optional[str] = None,
    strict: bool = False,
) -> ScanResult[T]:
    """Collect every match of ``reader`` in ``text`` in document order."""

    result: ScanResult[T] = ScanResult()
    result.matches.extend(
        iter_matches(text, reader, prefix=prefix, strict=strict, malformed=result.malformed)
    )
    if result.malformed:
        telemetry_metrics.emit("shaderspec.scanner.malformed", len(result.malformed))
    return result
