"""Low-level building blocks shared by every WGSL grammar.

The grammars in this package are written as small recursive-descent readers
that operate on a :class:`Cursor`.  A reader either returns a value and leaves
the cursor after the consumed text, or raises :class:`GrammarError`.  Errors are
*soft* by default: :meth:`Cursor.attempt` rewinds and lets the caller try an
alternative.  Inside :meth:`Cursor.committed` errors become *committed*; they
mean "this construct definitely started here and is malformed" and are not
recovered by ``attempt``.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, TypeVar

T = TypeVar("T")

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class GrammarError(RuntimeError):
    """Structured grammar failure with location and rule context."""

    def __init__(
        self,
        message: str,
        *,
        offset: int,
        line: int = 1,
        column: int = 1,
        contexts: tuple[str, ...] = (),
        committed: bool = False,
    ) -> None:
        where = f" (in {' > '.join(contexts)})" if contexts else ""
        super().__init__(f"{line}:{column}: {message}{where}")
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column
        self.contexts = contexts
        self.committed = committed


@dataclass(frozen=True, order=True, slots=True)
class Identifier:
    """Validated ``[A-Za-z_][A-Za-z0-9_]*`` name."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or _IDENT_RE.fullmatch(self.value) is None:
            raise ValueError(f"invalid identifier: {self.value!r}")

    def as_str(self) -> str:
        return self.value

    def __len__(self) -> int:
        return len(self.value)

    def __str__(self) -> str:
        return self.value


class Cursor:
    """Mutable read position over an immutable text."""

    __slots__ = ("text", "pos", "_contexts")

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos
        self._contexts: list[str] = []

    # ------------------------------------------------------------------
    # Inspection

    @property
    def eof(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def rest(self) -> str:
        return self.text[self.pos :]

    def peek(self, count: int = 1) -> str:
        return self.text[self.pos : self.pos + count]

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    # ------------------------------------------------------------------
    # Errors and backtracking

    def error(self, message: str, *, at: Optional[int] = None) -> GrammarError:
        offset = self.pos if at is None else at
        line = self.text.count("\n", 0, offset) + 1
        column = offset - (self.text.rfind("\n", 0, offset) + 1) + 1
        return GrammarError(
            message,
            offset=offset,
            line=line,
            column=column,
            contexts=tuple(self._contexts),
        )

    @contextmanager
    def context(self, name: str) -> Iterator[None]:
        self._contexts.append(name)
        try:
            yield
        finally:
            self._contexts.pop()

    @contextmanager
    def committed(self) -> Iterator[None]:
        # Alternatives nested inside still backtrack; only the failure that
        # leaves this block is promoted.
        try:
            yield
        except GrammarError as exc:
            exc.committed = True
            raise

    def attempt(self, reader: Callable[["Cursor"], T]) -> Optional[T]:
        """Run ``reader``; rewind and return ``None`` on a soft failure."""

        start = self.pos
        try:
            return reader(self)
        except GrammarError as exc:
            if exc.committed:
                raise
            self.pos = start
            return None

    # ------------------------------------------------------------------
    # Consumers

    def match(self, literal: str) -> bool:
        if self.text.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def expect(self, literal: str) -> None:
        if not self.match(literal):
            raise self.error(f"expected {literal!r}, found {self.peek(12)!r}")

    def skip_ws(self) -> int:
        start = self.pos
        text = self.text
        while self.pos < len(text) and text[self.pos].isspace():
            self.pos += 1
        return self.pos - start

    def expect_ws(self) -> None:
        if self.skip_ws() == 0:
            raise self.error(f"expected whitespace, found {self.peek(12)!r}")

    def match_word(self, word: str) -> bool:
        """Consume ``word`` followed by at least one whitespace character."""

        start = self.pos
        if self.match(word) and self.skip_ws() > 0:
            return True
        self.pos = start
        return False

    def take_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        text = self.text
        while self.pos < len(text) and predicate(text[self.pos]):
            self.pos += 1
        return text[start : self.pos]

    def take_until(self, *literals: str) -> str:
        """Consume up to (not including) the nearest of ``literals``."""

        found = [idx for idx in (self.text.find(lit, self.pos) for lit in literals) if idx >= 0]
        if not found:
            raise self.error(f"expected one of {', '.join(map(repr, literals))}")
        end = min(found)
        chunk = self.text[self.pos : end]
        self.pos = end
        return chunk

    def read_identifier(self) -> Identifier:
        found = _IDENT_RE.match(self.text, self.pos)
        if found is None:
            raise self.error(f"expected identifier, found {self.peek(12)!r}")
        self.pos = found.end()
        return Identifier(found.group())

    def expect_end(self) -> None:
        self.skip_ws()
        if not self.eof:
            raise self.error(f"unexpected trailing input {self.peek(12)!r}")


def parse_identifier(text: str) -> Identifier:
    """Parse ``text`` as a complete identifier, raising :class:`GrammarError`."""

    cursor = Cursor(text)
    with cursor.context("identifier"):
        ident = cursor.read_identifier()
        if not cursor.eof:
            raise cursor.error(f"unexpected trailing input {cursor.peek(12)!r}")
    return ident


def parse_complete(text: str, reader: Callable[[Cursor], T]) -> T:
    """Run ``reader`` over the whole of ``text`` (surrounding whitespace allowed)."""

    cursor = Cursor(text)
    cursor.skip_ws()
    value = reader(cursor)
    cursor.expect_end()
    return value


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


__all__ = [
    "Cursor",
    "GrammarError",
    "Identifier",
    "normalize_whitespace",
    "parse_complete",
    "parse_identifier",
]
