"""Run-scoped logging fields carried in a ``contextvars`` variable.

Fields bound here are copied onto every record by ``ContextFilter``, so a run
only states its ``action`` and ``mode`` once.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

_FIELDS: ContextVar[Mapping[str, str]] = ContextVar("botmanager_log_context", default={})


def get_context() -> dict[str, str]:
    """Return a copy of the fields bound in the current context."""
    return dict(_FIELDS.get())


def _with_values(values: Mapping[str, object]) -> dict[str, str]:
    fields = get_context()
    fields.update({str(key): str(value) for key, value in values.items() if value is not None})
    return fields


def bind_context(**values: object) -> None:
    """Add stringified fields to the current context; ``None`` is skipped."""
    if values:
        _FIELDS.set(_with_values(values))


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` for the duration of a block, then restore the previous fields."""
    token = _FIELDS.set(_with_values(values))
    try:
        yield
    finally:
        _FIELDS.reset(token)
