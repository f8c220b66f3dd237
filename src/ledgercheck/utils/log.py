"""Structured logging setup.

Loggers are structlog wrappers around standard library loggers under the
``ledgercheck`` namespace, so importing the package leaves the global
structlog configuration alone. As a library, ledgercheck emits nothing until
the application configures stdlib logging. The CLI calls
``configure_logging`` once per invocation to send events to stderr, keeping
command output on stdout clean.
"""

import logging
import os
import sys

import structlog

DEFAULT_LEVEL = os.environ.get("LEDGERCHECK_LOG_LEVEL", "WARNING")


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is when a record is emitted."""

    def __init__(self, level=logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self):
        return sys.stderr


_root = logging.getLogger("ledgercheck")
_root.addHandler(logging.NullHandler())
_handler = _StderrHandler()

# Shared by every logger; configure_logging swaps the renderer in place.
_processors = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.dev.ConsoleRenderer(colors=False),
]


def configure_logging(level: str = DEFAULT_LEVEL, json_output: bool = False) -> None:
    """Send ledgercheck events to stderr at ``level``.

    Args:
        level: Standard logging level name (e.g. "INFO")
        json_output: Render events as JSON lines instead of key=value text
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    if _handler not in _root.handlers:
        _root.addHandler(_handler)
    _root.setLevel(numeric_level)
    _root.propagate = False

    _processors[-1] = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )


def get_logger(name: str):
    """Return a structlog logger under the ``ledgercheck`` namespace."""
    if not name.startswith("ledgercheck"):
        name = f"ledgercheck.{name}"
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
