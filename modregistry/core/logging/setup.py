# modregistry/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers

from modregistry.app.settings import settings, settingsBool
from .formatters import DevFormatter, JsonFormatter

__all__ = [
    "configureLogging",
    "getLogger",
    "getPackageLogger",
]



def configureLogging() -> None:
    """
    Initiate the logging configuration for a host embedding the registry.

    Dev (logging.devMode = true):
      - Console pretty logs (DEBUG)
    Prod:
      - Console INFO

    When logging.file.enabled is set, a rotating JSON file handler is added
    at the same level (path, maxBytes and backupCount come from settings).
    """
    devMode = settingsBool("logging.devMode", True)
    rootLevel = logging.DEBUG if devMode else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    root.addHandler(consoleHandler)

    if settingsBool("logging.file.enabled", False):
        fileHandler = logging.handlers.RotatingFileHandler(
            str(settings("logging.file.path", "modregistry.log")),
            maxBytes=int(settings("logging.file.maxBytes", 10 * 1024 * 1024)),
            backupCount=int(settings("logging.file.backupCount", 5)),
            encoding="utf-8",
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        root.addHandler(fileHandler)



def getLogger(name: str, side: str = "") -> logging.Logger:
    side = str(side).strip()
    name = str(name).strip()
    return logging.getLogger(f"{side}.{name}" if side else name)



def getPackageLogger(directoryName: str) -> logging.Logger:
    """Logger scoped to a single mod package directory."""
    return logging.getLogger(f"modregistry.packages.{str(directoryName).strip()}")
