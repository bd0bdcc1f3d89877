"""Aggregate view over a parsed WGSL specification source."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterable

import httpx

from shaderspec.telemetry import metrics as telemetry_metrics
from shaderspec.telemetry.logger import get_logger
from shaderspec.utils.fetch import DEFAULT_TIMEOUT, download_text

from . import scanner
from .fn_decl import FunctionDecl, read_fn_decl
from .instantiate import instantiate
from .options import DEFAULT_SOURCE_URL, ExtractorOptions
from .overload_row import ROW_PREFIX, OverloadRow, read_overload_row

__all__ = ["FN_PREFIX", "SpecDocument"]

FN_PREFIX = "fn"

_LOGGER = get_logger("shaderspec.document")


@dataclass(frozen=True, slots=True)
class SpecDocument:
    """Every builtin declaration and overload row found in one document.

    ``fns`` and ``overloads`` come from two independent scans, so a
    declaration inside an overload row's code block appears in both.
    """

    text: str
    fns: tuple[FunctionDecl, ...]
    overloads: tuple[OverloadRow, ...]
    malformed: int = 0

    @classmethod
    def from_text(cls, text: str, *, strict: bool = False) -> "SpecDocument":
        started = time.perf_counter()
        fn_scan = scanner.scan(text, read_fn_decl, prefix=FN_PREFIX, strict=strict)
        row_scan = scanner.scan(text, read_overload_row, prefix=ROW_PREFIX, strict=strict)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        document = cls(
            text=text,
            fns=tuple(fn_scan.values),
            overloads=tuple(row_scan.values),
            malformed=len(fn_scan.malformed) + len(row_scan.malformed),
        )
        telemetry_metrics.emit("shaderspec.document.functions", len(document.fns))
        telemetry_metrics.emit("shaderspec.document.overloads", len(document.overloads))
        telemetry_metrics.emit("shaderspec.document.parse_ms", elapsed_ms)
        _LOGGER.info(
            "parsed %d function declarations and %d overload rows (%d malformed skipped)",
            len(document.fns),
            len(document.overloads),
            document.malformed,
        )
        return document

    @classmethod
    def from_url(
        cls,
        url: str = DEFAULT_SOURCE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
        strict: bool = False,
    ) -> "SpecDocument":
        text = download_text(url, timeout=timeout, client=client)
        return cls.from_text(text, strict=strict)

    @classmethod
    def from_download(cls) -> "SpecDocument":
        return cls.from_url(DEFAULT_SOURCE_URL)

    @classmethod
    def from_options(
        cls, options: ExtractorOptions, *, client: httpx.Client | None = None
    ) -> "SpecDocument":
        return cls.from_url(
            options.source_url, timeout=options.timeout, client=client, strict=options.strict
        )

    def function_names(self) -> list[str]:
        """Distinct declaration names in order of first appearance."""

        seen: dict[str, None] = {}
        for fn_decl in self.fns:
            seen.setdefault(fn_decl.name.as_str(), None)
        return list(seen)

    def instantiated_overloads(self, exclude: Iterable[str] = ()) -> list[OverloadRow]:
        """Instantiate every overload row, skipping functions named in ``exclude``."""

        excluded = frozenset(exclude)
        rows: list[OverloadRow] = []
        for row in self.overloads:
            if row.fn_decl.name.as_str() in excluded:
                continue
            rows.extend(instantiate(row))
        return rows
