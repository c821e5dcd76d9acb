import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from modregistry.app.settings import SETTINGS_ENV_VAR, loadSettings
from modregistry.mods.manifest import PackageManifest, writeManifest



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture(autouse=True)
def isolatedSettings(monkeypatch, tmp_path):
    """Point user settings at a file that does not exist yet, and drop the merge cache."""
    settingsPath = tmp_path / "user-settings.json5"
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(settingsPath))
    loadSettings.cache_clear()
    yield settingsPath
    loadSettings.cache_clear()



@pytest.fixture()
def roots(tmp_path) -> tuple[Path, Path]:
    """(fallbackRoot, modsRoot); only the fallback root exists up front."""
    fallback = tmp_path / "monitored"
    fallback.mkdir()
    return fallback, tmp_path / "mods"



@pytest.fixture()
def makePackage(roots) -> Callable[..., Path]:
    """Creates modsRoot/<dirName>/manifest.json and returns the package folder."""
    _fallback, mods = roots

    def _make(dirName: str, *, supported: str = "1.0", name: str | None = None, version: str = "1.0.0") -> Path:
        manifest = PackageManifest(
            name=name or dirName,
            description=f"{dirName} test package",
            author="tests",
            version=version,
            supported=supported,
        )
        writeManifest(mods / dirName, manifest)
        return mods / dirName

    return _make
