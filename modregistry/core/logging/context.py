# modregistry/core/logging/context.py
from __future__ import annotations
import contextvars
from collections.abc import Iterator
from contextlib import contextmanager

# Per-call log context (packageDir, requestedPath, ...). Read by the formatters.
_logContextVar: contextvars.ContextVar[dict[str, object] | None] = contextvars.ContextVar("modregistry.logctx", default=None)

def setLogContext(**kvs):
    """Set or update per-log context values. None values are ignored."""
    current = dict(_logContextVar.get() or {}) # use copy
    for key, value in kvs.items():
        if value is not None:
            current[key] = value
    _logContextVar.set(current)

def clearLogContext():
    """Clear context once a scan or lookup is fully handled."""
    _logContextVar.set(None)

def getLogContext():
    """Return current context dict or None."""
    return _logContextVar.get()

@contextmanager
def logContext(**kvs) -> Iterator[None]:
    """Scoped setLogContext(); the previous context is restored on exit."""
    current = dict(_logContextVar.get() or {})
    current.update({key: value for key, value in kvs.items() if value is not None})
    token = _logContextVar.set(current)
    try:
        yield
    finally:
        _logContextVar.reset(token)
