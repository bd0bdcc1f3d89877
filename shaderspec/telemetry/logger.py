"""Logging setup for the extractor.

Configuration comes from ``configs/logging.yaml`` through
:func:`logging.config.dictConfig`.  All package loggers live under the
``shaderspec`` namespace; scanner diagnostics for skipped candidates are
emitted at DEBUG, so pass ``level="DEBUG"`` to :func:`configure` to see them.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from threading import RLock
from typing import Any

from shaderspec.utils import config as config_loader

ROOT_LOGGER = "shaderspec"
DEFAULT_LOGGING_PATH = config_loader.DEFAULT_CONFIG_DIR / "logging.yaml"

_LOCK = RLock()
_CONFIGURED = False

_DICTCONFIG_KEYS = frozenset(
    {"version", "disable_existing_loggers", "formatters", "handlers", "root", "loggers"}
)


def _fallback_config() -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"plain": {"format": "%(levelname)s %(name)s: %(message)s"}},
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "plain",
            }
        },
        "root": {"level": "WARNING", "handlers": ["stderr"]},
        "loggers": {ROOT_LOGGER: {"level": "INFO", "handlers": ["stderr"], "propagate": False}},
    }


def _read_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return _fallback_config()
    try:
        data = config_loader.load_config(path)
    except ValueError as exc:
        logging.getLogger(f"{ROOT_LOGGER}.telemetry").warning(
            "ignoring unreadable %s: %s", path, exc
        )
        return _fallback_config()
    return config_loader.deep_update(
        _fallback_config(), {key: value for key, value in data.items() if key in _DICTCONFIG_KEYS}
    )


def configure(
    path: str | Path | None = None,
    *,
    level: str | int | None = None,
    force: bool = False,
) -> None:
    """Install the logging configuration once per process.

    ``level`` overrides the level of the ``shaderspec`` logger; ``force``
    re-applies the configuration even if it was already installed.
    """

    global _CONFIGURED
    with _LOCK:
        if _CONFIGURED and not force:
            return
        config = _read_config(Path(path) if path is not None else DEFAULT_LOGGING_PATH)
        if level is not None:
            config["loggers"].setdefault(ROOT_LOGGER, {})["level"] = (
                logging.getLevelName(level) if isinstance(level, int) else level.upper()
            )
        logging.config.dictConfig(config)
        _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    if not isinstance(name, str) or not name:
        raise ValueError("logger name must be a non-empty string")
    configure()
    return logging.getLogger(name)


__all__ = ["DEFAULT_LOGGING_PATH", "ROOT_LOGGER", "configure", "get_logger"]
