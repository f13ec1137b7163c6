"""PackageRegistry 测试 - 规范实例 + 依赖方连接"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from pkgforge.core.exceptions import DuplicatePackageError, InvalidVersionError
from pkgforge.core.pkg import Package, PackageRegistry


def _pkg(name: str, version: str = "1.0.0", deps: list[Any] | None = None) -> Package:
    return Package({"package": {"name": name, "version": version, "dependencies": deps or []}})


def _write_descriptor(directory: Path, name: str, version: str, deps: list[Any] | None = None,
                      filename: str = "package.yml") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(yaml.dump({
        "package": {"name": name, "version": version, "dependencies": deps or []},
    }), encoding="utf-8")
    return path


class TestRegistration:
    def test_add_and_get(self) -> None:
        reg = PackageRegistry()
        pkg = reg.add(_pkg("zlib"))
        assert reg.get("zlib-1.0.0") is pkg
        assert "zlib-1.0.0" in reg
        assert len(reg) == 1

    def test_get_missing(self) -> None:
        assert PackageRegistry().get("nope-1.0.0") is None

    def test_add_same_instance_twice(self) -> None:
        reg = PackageRegistry()
        pkg = _pkg("zlib")
        reg.add(pkg)
        reg.add(pkg)
        assert len(reg) == 1

    def test_duplicate_full_name_rejected(self) -> None:
        reg = PackageRegistry()
        reg.add(_pkg("zlib"))
        with pytest.raises(DuplicatePackageError) as exc:
            reg.add(_pkg("zlib"))
        assert exc.value.full_name == "zlib-1.0.0"

    def test_find_all_versions(self) -> None:
        reg = PackageRegistry()
        reg.add(_pkg("zlib", "1.0.0"))
        reg.add(_pkg("openssl", "3.0.0"))
        reg.add(_pkg("zlib", "1.3.1"))
        assert [p.version for p in reg.find("zlib")] == ["1.0.0", "1.3.1"]
        assert reg.find("curl") == []

    def test_iteration_order(self) -> None:
        reg = PackageRegistry()
        for name in ("c", "a", "b"):
            reg.add(_pkg(name))
        assert [p.name for p in reg] == ["c", "a", "b"]


class TestLinking:
    def test_link(self) -> None:
        lib = _pkg("libc")
        app = _pkg("app")
        PackageRegistry.link(app, lib)
        assert lib.consumers["app-1.0.0"] is app

    def test_link_by_name(self) -> None:
        reg = PackageRegistry()
        reg.add(_pkg("libc"))
        reg.add(_pkg("zlib", deps=["libc"]))
        reg.add(_pkg("curl", deps=["libc", {"zlib": ">=1.0.0"}, "missing"]))

        assert reg.link_by_name() == 3
        assert reg.consumers_of("libc-1.0.0") == ["curl-1.0.0", "zlib-1.0.0"]
        assert reg.consumers_of("zlib-1.0.0") == ["curl-1.0.0"]
        assert reg.consumers_of("curl-1.0.0") == []

    def test_link_by_name_idempotent(self) -> None:
        reg = PackageRegistry()
        reg.add(_pkg("libc"))
        reg.add(_pkg("app", deps=["libc"]))
        reg.link_by_name()
        reg.link_by_name()
        assert reg.consumers_of("libc-1.0.0") == ["app-1.0.0"]

    def test_unregistered_dependency_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        reg = PackageRegistry()
        reg.add(_pkg("app", deps=["ghost"]))
        with caplog.at_level("WARNING"):
            assert reg.link_by_name() == 0
        assert "ghost" in caplog.text
        assert [r.package for r in caplog.records if r.levelname == "WARNING"] == ["app-1.0.0"]

    def test_consumers_of_unknown(self) -> None:
        assert PackageRegistry().consumers_of("nope-1.0.0") == []


class TestLoading:
    def test_load_dir(self, tmp_path: Path) -> None:
        _write_descriptor(tmp_path / "libc", "libc", "2.38.0")
        _write_descriptor(tmp_path / "nested" / "zlib", "zlib", "1.3.1", deps=["libc"])
        (tmp_path / "notes.yml").write_text("not: a package", encoding="utf-8")

        reg = PackageRegistry()
        loaded = reg.load_dir(tmp_path)
        assert {p.full_name for p in loaded} == {"libc-2.38.0", "zlib-1.3.1"}
        assert all(p.filename for p in loaded)

    def test_load_dir_custom_pattern(self, tmp_path: Path) -> None:
        _write_descriptor(tmp_path, "libc", "2.38.0", filename="libc.pkg.yml")
        reg = PackageRegistry()
        assert reg.load_dir(tmp_path, "*.pkg.yml")[0].name == "libc"

    def test_load_dir_uses_configured_name(self, tmp_path: Path, _isolated_config: Any) -> None:
        _isolated_config.descriptor_name = "PKG.yaml"
        _write_descriptor(tmp_path, "libc", "2.38.0", filename="PKG.yaml")
        _write_descriptor(tmp_path / "other", "zlib", "1.3.1")
        reg = PackageRegistry()
        assert [p.name for p in reg.load_dir(tmp_path)] == ["libc"]

    def test_load_dir_empty(self, tmp_path: Path) -> None:
        assert PackageRegistry().load_dir(tmp_path) == []

    def test_load_dir_error_propagates(self, tmp_path: Path) -> None:
        _write_descriptor(tmp_path, "bad", "not-a-version")
        with pytest.raises(InvalidVersionError):
            PackageRegistry().load_dir(tmp_path)
