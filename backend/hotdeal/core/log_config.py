"""Structured logger construction.

The pipeline does not rely on a module-level log configuration. A logger is
built once per run with a fixed set of enabled levels and handed to the
components that need it.
"""

import logging
import sys
from typing import Iterable

import structlog


DEFAULT_LEVELS = frozenset({"info", "warning", "error"})

_LEVEL_ALIASES = {"warn": "warning", "success": "info", "critical": "error"}


def _normalize_levels(levels: Iterable[str]) -> frozenset:
    return frozenset(_LEVEL_ALIASES.get(level.lower(), level.lower()) for level in levels)


def _level_filter(enabled: frozenset):
    """Build a processor that drops events whose level is not enabled."""

    def _filter(logger, method_name: str, event_dict: dict) -> dict:
        if _LEVEL_ALIASES.get(method_name, method_name) not in enabled:
            raise structlog.DropEvent
        return event_dict

    return _filter


def build_logger(levels: Iterable[str] = DEFAULT_LEVELS, name: str = "hotdeal", stream=None):
    """Create a console logger with its enabled levels fixed at construction.

    Args:
        levels: Level names to emit ("debug", "info", "warning", "error")
        name: Logger name bound into every event
        stream: Output stream (defaults to stdout)

    Returns:
        Bound structlog logger
    """
    enabled = _normalize_levels(levels)
    return structlog.wrap_logger(
        structlog.PrintLogger(file=stream or sys.stdout),
        processors=[
            _level_filter(enabled),
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    ).bind(logger=name)
