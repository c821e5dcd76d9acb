from __future__ import annotations

import pytest

from modregistry.mods.compat import HostCompatibility, classifyPackages
from modregistry.mods.manifest import PackageManifest


def _manifests(*supported: str) -> list[PackageManifest]:
    return [PackageManifest(name=f"pkg{i}", supported=value) for i, value in enumerate(supported)]


def test_classify_splits_by_predicate():
    calls: list[tuple[str, str]] = []

    def predicate(hostVersion: str, supported: str) -> bool:
        calls.append((hostVersion, supported))
        return hostVersion == supported

    compatible, incompatible = classifyPackages(_manifests("1.0", "^2.0", "1.0"), lambda: "1.0", predicate)

    assert compatible == (0, 2)
    assert incompatible == (1,)
    assert calls == [("1.0", "1.0"), ("1.0", "^2.0"), ("1.0", "1.0")]


def test_classify_asks_version_supplier_per_package():
    asked = []

    def supplier() -> str:
        asked.append(1)
        return "1.5"

    classifyPackages(_manifests("a", "b", "c"), supplier, lambda _host, _sup: True)
    assert len(asked) == 3


def test_classify_empty():
    assert classifyPackages([], lambda: "1.0", lambda _host, _sup: True) == ((), ())


def test_classify_propagates_collaborator_errors():
    def predicate(_host: str, _sup: str) -> bool:
        raise RuntimeError("host blew up")

    with pytest.raises(RuntimeError, match="host blew up"):
        classifyPackages(_manifests("1.0"), lambda: "1.0", predicate)


def test_host_protocol_is_runtime_checkable():
    class Host:
        def currentVersion(self) -> str:
            return "1.0"

        def isCompatible(self, hostVersion: str, supported: str) -> bool:
            return True

    assert isinstance(Host(), HostCompatibility)
    assert not isinstance(object(), HostCompatibility)
