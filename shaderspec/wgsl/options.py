"""Configuration bundle for document extraction runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

from shaderspec.utils import config as config_loader

__all__ = ["DEFAULT_OPTIONS_PATH", "DEFAULT_SOURCE_URL", "ExtractorOptions", "load_options"]

DEFAULT_SOURCE_URL = "https://raw.githubusercontent.com/gpuweb/gpuweb/main/wgsl/index.bs"
DEFAULT_OPTIONS_PATH = config_loader.DEFAULT_CONFIG_DIR / "extractor.yaml"


def _coerce_float(value: Any, *, fallback: float) -> float:
    if value is None:
        return fallback
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid timeout: {value!r}") from exc


def _coerce_names(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset({value})
    if isinstance(value, Sequence) or isinstance(value, (set, frozenset)):
        return frozenset(str(item) for item in value)
    raise ValueError("exclude_functions must be a list of names")


@dataclass(frozen=True, slots=True)
class ExtractorOptions:
    """Where to read the document from and how strictly to scan it.

    ``exclude_functions`` lists names that appear in the document as
    illustrative examples rather than real builtins; they are dropped from the
    instantiated catalogue.
    """

    source_url: str = DEFAULT_SOURCE_URL
    timeout: float = 5.0
    strict: bool = False
    exclude_functions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ExtractorOptions":
        payload = dict(data or {})
        source = payload.get("source", {})
        if not isinstance(source, Mapping):
            raise ValueError("'source' must be a mapping")
        scanner = payload.get("scanner", {})
        if not isinstance(scanner, Mapping):
            raise ValueError("'scanner' must be a mapping")
        catalogue = payload.get("catalogue", {})
        if not isinstance(catalogue, Mapping):
            raise ValueError("'catalogue' must be a mapping")
        return cls(
            source_url=str(source.get("url") or DEFAULT_SOURCE_URL),
            timeout=_coerce_float(source.get("timeout"), fallback=5.0),
            strict=bool(scanner.get("strict", False)),
            exclude_functions=_coerce_names(catalogue.get("exclude_functions")),
        )

    def merge(self, overrides: Mapping[str, Any] | None) -> "ExtractorOptions":
        if not overrides:
            return self
        merged = config_loader.deep_update(self.to_dict(), overrides)
        return ExtractorOptions.from_mapping(merged)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": {"url": self.source_url, "timeout": self.timeout},
            "scanner": {"strict": self.strict},
            "catalogue": {"exclude_functions": sorted(self.exclude_functions)},
        }


def load_options(
    path: str | Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> ExtractorOptions:
    """Return options from ``path`` (default ``configs/extractor.yaml``) plus overrides."""

    data: Mapping[str, Any] | None = None
    if path is not None:
        data = config_loader.load_config(path)
    elif DEFAULT_OPTIONS_PATH.exists():
        data = config_loader.load_config(DEFAULT_OPTIONS_PATH)
    return ExtractorOptions.from_mapping(data).merge(overrides)
