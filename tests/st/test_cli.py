"""命令行端到端测试"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml
from click.testing import CliRunner

import pkgforge.cli as cli
from pkgforge import __version__
from pkgforge.utils.logger import setup_logging


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "setup_logging", lambda **_: None)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _write(directory: Path, meta: dict[str, Any], filename: str = "package.yml") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(yaml.dump(meta, allow_unicode=True), encoding="utf-8")
    return path


ZLIB = {
    "package": {
        "name": "zlib",
        "version": "1.3.1",
        "description": "压缩库",
        "dependencies": ["libc", {"cmake": ">=3.20.0"}],
    },
    "sources": [
        {"file": "zlib-1.3.1.tar.gz", "origins": ["https://zlib.net/zlib-1.3.1.tar.gz"]},
        {"dir": "patches", "packaged": True},
    ],
    "build": ["./configure --prefix=/usr", {"make": "install"}],
}


class TestShow:
    def test_text(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, ZLIB)
        result = runner.invoke(cli.main, ["show", str(path)])
        assert result.exit_code == 0, result.output
        assert "zlib-1.3.1  压缩库" in result.output
        assert "cmake >=3.20.0" in result.output
        assert "libc *" in result.output
        assert "https://zlib.net/zlib-1.3.1.tar.gz" in result.output
        assert "make install" in result.output

    def test_directory_argument(self, runner: CliRunner, tmp_path: Path) -> None:
        _write(tmp_path, ZLIB)
        result = runner.invoke(cli.main, ["show", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "zlib-1.3.1" in result.output

    def test_json(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, ZLIB)
        result = runner.invoke(cli.main, ["show", "--json", str(path)])
        assert result.exit_code == 0, result.output
        info = json.loads(result.output)
        assert info["full_name"] == "zlib-1.3.1"
        assert info["dependencies"][1] == {"name": "cmake", "version_constraint": ">=3.20.0"}
        assert info["sources"][0]["kind"] == "download"
        assert info["sources"][1] == {"file": "patches", "kind": "packaged", "is_dir": True}
        assert info["build"][1] == {"kind": "make", "argv": ["make", "install"]}

    def test_invalid_descriptor(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, {"package": {"name": "zlib", "version": "abc"}})
        result = runner.invoke(cli.main, ["show", str(path)])
        assert result.exit_code == 1
        assert "无效版本号" in result.output

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli.main, ["show", str(tmp_path / "nope.yml")])
        assert result.exit_code == 1


class TestCheck:
    def test_all_ok(self, runner: CliRunner, tmp_path: Path) -> None:
        a = _write(tmp_path / "a", ZLIB)
        b = _write(tmp_path / "b", {"package": {"name": "libc", "version": "2.38.0"}})
        result = runner.invoke(cli.main, ["check", str(a), str(b)])
        assert result.exit_code == 0, result.output
        assert "2 通过, 0 失败" in result.output

    def test_failure_sets_exit_code(self, runner: CliRunner, tmp_path: Path) -> None:
        good = _write(tmp_path / "good", ZLIB)
        bad = _write(tmp_path / "bad", {"package": {"name": "x", "version": "1.0.0"},
                                        "sources": [{"file": "x.tar.gz"}]})
        result = runner.invoke(cli.main, ["check", str(good), str(bad)])
        assert result.exit_code == 1
        assert "[FAIL]" in result.output
        assert "未知的文件来源" in result.output
        assert "1 通过, 1 失败" in result.output


class TestParseName:
    @pytest.mark.parametrize("full_name,name,version", [
        ("foo-1.2.3", "foo", "1.2.3"),
        ("foo", "foo", "-"),
    ])
    def test_parse(self, runner: CliRunner, full_name: str, name: str, version: str) -> None:
        result = runner.invoke(cli.main, ["parse-name", full_name])
        assert result.exit_code == 0
        assert result.output.splitlines() == [f"name: {name}", f"version: {version}"]


class TestConsumers:
    def test_reverse_edges(self, runner: CliRunner, tmp_path: Path) -> None:
        _write(tmp_path / "libc", {"package": {"name": "libc", "version": "2.38.0"}})
        _write(tmp_path / "zlib", {"package": {"name": "zlib", "version": "1.3.1",
                                               "dependencies": ["libc"]}})
        _write(tmp_path / "curl", {"package": {"name": "curl", "version": "8.5.0",
                                               "dependencies": ["libc", "zlib"]}})
        result = runner.invoke(cli.main, ["consumers", str(tmp_path)])
        assert result.exit_code == 0, result.output
        lines = set(result.output.splitlines())
        assert "libc-2.38.0: curl-8.5.0, zlib-1.3.1" in lines
        assert "zlib-1.3.1: curl-8.5.0" in lines
        assert "curl-8.5.0: -" in lines


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["--version"])
    assert __version__ in result.output


def test_config_option(runner: CliRunner, tmp_path: Path) -> None:
    cfg = tmp_path / "cfg.yml"
    cfg.write_text("descriptor_name: PKG.yml\n", encoding="utf-8")
    _write(tmp_path / "pkgs", ZLIB, filename="PKG.yml")
    result = runner.invoke(cli.main, ["--config", str(cfg), "show", str(tmp_path / "pkgs")])
    assert result.exit_code == 0, result.output
    assert "zlib-1.3.1" in result.output


def test_invalid_log_level(runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "setup_logging", setup_logging)
    monkeypatch.setenv("PKGFORGE_LOG_LEVEL", "verbose")
    path = _write(tmp_path, ZLIB)
    result = runner.invoke(cli.main, ["show", str(path)])
    assert result.exit_code == 1
    assert "verbose" in result.output
