"""In-memory metrics for extraction runs.

Two kinds of metric are tracked.  Counters accumulate (how many malformed
candidates the scanner skipped over a whole session), gauges describe the
latest observation (how many overload rows the last document contained).
Every series keeps its raw observations so tests can inspect them.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

COUNTER = "counter"
GAUGE = "gauge"


@dataclass(frozen=True)
class MetricDefinition:
    kind: str
    unit: str
    description: str


_CATALOG: Dict[str, MetricDefinition] = {
    "shaderspec.scanner.malformed": MetricDefinition(
        COUNTER, "count", "Candidates that started a construct but were malformed"
    ),
    "shaderspec.document.functions": MetricDefinition(
        GAUGE, "count", "Function declarations in the last parsed document"
    ),
    "shaderspec.document.overloads": MetricDefinition(
        GAUGE, "count", "Overload table rows in the last parsed document"
    ),
    "shaderspec.document.parse_ms": MetricDefinition(
        GAUGE, "milliseconds", "Time spent scanning the last document"
    ),
    "shaderspec.fetch.bytes": MetricDefinition(
        GAUGE, "bytes", "Size of the last downloaded document"
    ),
}


@dataclass(frozen=True)
class Observation:
    """One recorded value."""

    value: float
    timestamp: float
    tags: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"value": self.value, "timestamp": self.timestamp}
        if self.tags:
            payload["tags"] = dict(self.tags)
        return payload


@dataclass
class MetricSeries:
    name: str
    kind: str
    unit: str | None = None
    description: str | None = None
    observations: list[Observation] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(item.value for item in self.observations)

    @property
    def last(self) -> float | None:
        return self.observations[-1].value if self.observations else None

    def summary(self) -> Dict[str, Any]:
        """Counters report their running total, gauges their latest value and range."""

        result: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind,
            "count": len(self.observations),
        }
        if self.unit:
            result["unit"] = self.unit
        if not self.observations:
            return result
        if self.kind == COUNTER:
            result["total"] = self.total
        else:
            values = [item.value for item in self.observations]
            result["last"] = self.last
            result["min"] = min(values)
            result["max"] = max(values)
        return result


class MetricsRegistry:
    """Thread-safe store of metric series keyed by name."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._series: Dict[str, MetricSeries] = {}

    def emit(
        self, name: str, value: Any, *, tags: Mapping[str, str] | None = None
    ) -> Observation:
        if not isinstance(name, str) or not name:
            raise ValueError("metric name must be a non-empty string")
        observation = Observation(
            value=_as_number(value), timestamp=time.time(), tags=dict(tags or {})
        )
        with self._lock:
            series = self._series.get(name)
            if series is None:
                series = self._series[name] = _new_series(name)
            series.observations.append(observation)
        return observation

    def get_series(self, name: str) -> MetricSeries | None:
        """Return a copy of the series so callers cannot mutate the registry."""

        with self._lock:
            series = self._series.get(name)
            if series is None:
                return None
            return MetricSeries(
                name=series.name,
                kind=series.kind,
                unit=series.unit,
                description=series.description,
                observations=list(series.observations),
            )

    def summaries(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {name: series.summary() for name, series in sorted(self._series.items())}

    def reset(self) -> None:
        with self._lock:
            self._series.clear()


def _new_series(name: str) -> MetricSeries:
    definition = _CATALOG.get(name)
    if definition is None:
        return MetricSeries(name=name, kind=GAUGE)
    return MetricSeries(
        name=name,
        kind=definition.kind,
        unit=definition.unit,
        description=definition.description,
    )


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"metric value must be numeric, got {value!r}") from exc


_REGISTRY = MetricsRegistry()


def emit(metric: str, value: Any, *, tags: Mapping[str, str] | None = None) -> Observation:
    """Record ``value`` for ``metric`` in the process-wide registry."""

    return _REGISTRY.emit(metric, value, tags=tags)


def get_registry() -> MetricsRegistry:
    return _REGISTRY


__all__ = [
    "COUNTER",
    "GAUGE",
    "MetricDefinition",
    "MetricSeries",
    "MetricsRegistry",
    "Observation",
    "emit",
    "get_registry",
]
