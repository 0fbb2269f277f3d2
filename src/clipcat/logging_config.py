# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Log output for the clipcat CLI and for applications embedding clipcat.

Library modules only ever call ``logging.getLogger(__name__)``. This module
installs one stderr handler on the root logger that renders those records
(and anything sent through ``structlog.get_logger``) either as plain console
lines or as JSON lines. The handler is tagged, so calling ``configure`` again
replaces it without touching handlers the host application installed.
"""

from __future__ import annotations

import logging
import sys

import structlog

from clipcat.errors import ConfigError

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_LEVEL = "WARNING"

HANDLER_NAME = "clipcat"

# Applied to structlog events and to foreign stdlib records alike.
_SHARED_PROCESSORS: tuple = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.format_exc_info,
)


def resolve_level(level: str) -> int:
    """Map a level name (any case) from ``LOG_LEVELS`` to its stdlib number."""
    name = level.strip().upper()
    if name not in LOG_LEVELS:
        raise ConfigError(f"unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}")
    return getattr(logging, name)


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer(sort_keys=True)
    # Decision traces go to terminals and CI logs alike; no ANSI codes.
    return structlog.dev.ConsoleRenderer(colors=False)


def _build_handler(json_output: bool) -> logging.Handler:
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_output),
        ],
        foreign_pre_chain=list(_SHARED_PROCESSORS),
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)
    return handler


def configure(*, json_output: bool = False, level: str = DEFAULT_LEVEL) -> None:
    """Install (or replace) the clipcat stderr handler and set the root level.

    Args:
        json_output: True for JSON lines, False for console lines.
        level: One of ``LOG_LEVELS``. DEBUG traces every classification step.

    Raises:
        ConfigError: *level* is not a known level name.
    """
    numeric_level = resolve_level(level)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(_build_handler(json_output))
    root.setLevel(numeric_level)
