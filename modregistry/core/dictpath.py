# modregistry/core/dictpath.py
from __future__ import annotations
from typing import Any
from collections.abc import Mapping

__all__ = ["splitPath", "getByPath"]



_MISSING = object()



def splitPath(path: str) -> list[str]:
    """
    Splits a dotted/slashed settings path into segments.
    A backslash escapes the next character, so "paths.a\\.b" -> ["paths", "a.b"].

    Raises ValueError for empty paths, empty segments ("a..b", ".a") and a dangling escape.
    """
    if not isinstance(path, str) or not path:
        raise ValueError("Path must be a non-empty string")

    parts: list[str] = []
    curr: list[str] = []
    esc = False
    for ch in path:
        if esc:
            curr.append(ch)
            esc = False
        elif ch == "\\":
            esc = True
        elif ch in (".", "/"):
            parts.append("".join(curr))
            curr = []
        else:
            curr.append(ch)
    if esc:
        raise ValueError("Path ends with a dangling escape (trailing backslash)")
    parts.append("".join(curr))

    if any(part == "" for part in parts):
        raise ValueError(f"Path '{path}' contains empty segment(s)")
    return parts



def _walk(data: Any, path: str) -> Any:
    node = data
    for part in splitPath(path):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node



def getByPath(data: Any, path: str, default: Any = None) -> Any:
    """
    Returns the value stored at `path` inside nested mappings, or `default` when any
    segment is missing or an intermediate value is not a mapping.
    """
    value = _walk(data, path)
    return default if value is _MISSING else value
