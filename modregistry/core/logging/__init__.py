# modregistry/core/logging/__init__.py
from __future__ import annotations

from .context import setLogContext, clearLogContext, getLogContext, logContext
from .setup import configureLogging, getLogger, getPackageLogger

__all__ = [
    "configureLogging",
    "getLogger",
    "getPackageLogger",
    "setLogContext",
    "clearLogContext",
    "getLogContext",
    "logContext",
]
