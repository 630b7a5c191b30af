"""Diagnostics for cascade resolution.

Resolution itself never fails loudly: unreadable headers, unknown keys and
out-of-range widths are skipped.  The only trace of those decisions is a
handful of debug events, so this module routes them somewhere visible:

``editorconfig_parsed``
    a config file was read (``path``, ``root``, ``sections``).
``section_dropped``
    a header named no recognised glob (``header``).
``override_rejected``
    a value parsed but was out of range (``field``, ``value``, ``config``).
``editorconfig_missing``
    no config governs a directory (``directory``).
``resolution_cache_cleared``
    the directory cache was emptied.

Run ``ecc --log-level debug ...`` to see them on stderr; stdout stays
reserved for the resolved options.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, MutableMapping
from typing import Any

import structlog


def _path_processor(
    _logger: Any,
    _method: str,
    event_dict: MutableMapping[str, Any],
) -> Mapping[str, Any]:
    """Turn config file and directory paths into plain strings."""
    for k, v in event_dict.items():
        if isinstance(v, os.PathLike):
            event_dict[k] = os.fspath(v)
    return event_dict


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, level: str = "WARNING", json_output: bool = True) -> None:
    """Send resolution events to stderr through the stdlib root logger.

    Parameters
    ----------
    level:
        Root log level name.  Unknown names fall back to ``WARNING``, which
        hides every resolution event (they are all debug).
    json_output:
        One JSON object per event when *True*; aligned console lines when
        *False*.

    Loggers are not cached, so reconfiguring (or capturing events in
    tests) takes effect on module loggers that were already used.
    """
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _path_processor,
    ]

    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_output),
            ],
            foreign_pre_chain=chain,
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
