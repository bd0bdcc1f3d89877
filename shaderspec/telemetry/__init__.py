"""Convenience exports for shaderspec telemetry utilities."""

from . import logger, metrics

__all__ = [
    "logger",
    "metrics",
]
