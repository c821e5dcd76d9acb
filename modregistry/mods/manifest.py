# modregistry/mods/manifest.py
from __future__ import annotations
import json
from os import PathLike
from pathlib import Path
from typing import Any

import json5
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .constants import DEFAULT_MANIFEST_FILE_NAME, MANIFEST_FIELDS

__all__ = ["PackageManifest", "readManifest", "writeManifest"]



class PackageManifest(BaseModel):
    """
    Describes one mod package. Immutable once loaded.

    On disk the keys are capitalised ("Name", "Supported", ...), but key matching
    is case-insensitive. Unknown keys are ignored and missing ones become "".
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    description: str = ""
    author: str = ""
    version: str = ""
    # Opaque version/range marker; only the host's compatibility predicate reads it.
    supported: str = ""

    @model_validator(mode="before")
    @classmethod
    def _foldKeys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        out: dict[str, Any] = {}
        for key, value in data.items():
            lowered = str(key).lower()
            if lowered in MANIFEST_FIELDS and lowered not in out:
                out[lowered] = value
        return out

    @field_validator("*", mode="before")
    @classmethod
    def _coerceScalar(cls, value: Any) -> Any:
        if value is None:
            return ""
        # Hand-written manifests often carry "Version": 1.2 unquoted.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def toFileDict(self) -> dict[str, str]:
        """Field values keyed the way they are written to disk."""
        return {diskKey: getattr(self, field) for field, diskKey in MANIFEST_FIELDS.items()}



def readManifest(manifestPath: str | PathLike[str]) -> PackageManifest:
    """
    Parses a single manifest file. Raises ValueError (json5 or pydantic) when the
    content is not a valid manifest object, OSError when it cannot be read.
    """
    raw = json5.loads(Path(manifestPath).read_text(encoding="utf-8-sig"))
    if not isinstance(raw, dict):
        raise ValueError(f"Manifest must be a JSON object, got {type(raw).__name__}")
    return PackageManifest.model_validate(raw)



def writeManifest(
    directory: str | PathLike[str],
    manifest: PackageManifest,
    *,
    fileName: str = DEFAULT_MANIFEST_FILE_NAME,
) -> Path:
    """Writes `manifest` as indented JSON into `directory` (created if missing) and returns the file path."""
    target = Path(directory)
    target.mkdir(parents=True, exist_ok=True)
    manifestPath = target / fileName
    manifestPath.write_text(json.dumps(manifest.toFileDict(), ensure_ascii=False, indent=2), encoding="utf-8")
    return manifestPath
