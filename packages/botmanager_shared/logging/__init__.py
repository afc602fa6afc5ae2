"""Public logging API for Bot Manager.

This package wraps Python's ``logging`` module with opinionated defaults for
stream emission, structured context propagation and named file sinks.
"""

from .config import configure_logging, get_logger, init_log_sinks
from .context import bind_context, get_context, log_context

__all__ = [
    "bind_context",
    "configure_logging",
    "get_context",
    "get_logger",
    "init_log_sinks",
    "log_context",
]
