"""包描述命令：show, check, parse-name, consumers"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
import yaml

from pkgforge.core.config import get_config
from pkgforge.core.exceptions import PkgForgeError
from pkgforge.core.pkg import Package, PackageRegistry
from pkgforge.core.pkg.models import SourceEntry


def register(main: click.Group) -> None:
    """注册包描述相关命令"""
    main.add_command(show)
    main.add_command(check)
    main.add_command(parse_name)
    main.add_command(consumers)


def _descriptor_path(path: str) -> Path:
    """目录参数补全为目录下的默认描述文件"""
    p = Path(path)
    if p.is_dir():
        return p / get_config().descriptor_name
    return p


def _load(path: str) -> Package:
    try:
        return Package.load(_descriptor_path(path))
    except (PkgForgeError, OSError, yaml.YAMLError, ValueError) as e:
        raise click.ClickException(f"{path}: {e}") from e


def _origin_label(origin: Any) -> str:
    return getattr(origin, "url", None) or getattr(origin, "path", "")


def _source_dict(src: SourceEntry) -> dict[str, Any]:
    info: dict[str, Any] = {"file": src.file, "kind": src.kind}
    if src.is_dir:
        info["is_dir"] = True
    if src.digest is not None:
        info["digest"] = str(src.digest)
    if src.repo:
        info["repo"] = src.repo
        info["dir"] = src.dir
    if src.origins:
        info["origins"] = [_origin_label(o) for o in src.origins]
    return info


def describe(pkg: Package) -> dict[str, Any]:
    """把 Package 展开为可序列化的字典"""
    return {
        "name": pkg.name,
        "version": pkg.version,
        "full_name": pkg.full_name,
        "description": pkg.description,
        "filename": pkg.filename,
        "dependencies": [
            {"name": d.name, "version_constraint": d.version_constraint}
            for d in pkg.dependencies
        ],
        "sources": [_source_dict(s) for s in pkg.sources],
        "build": [
            {"kind": step.engine.kind, "argv": step.engine.argv()}
            for step in pkg.build_steps
        ],
    }


@click.command()
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="以 JSON 格式输出")
def show(path: str, as_json: bool) -> None:
    """查看包描述（文件或包含描述文件的目录）"""
    pkg = _load(path)
    info = describe(pkg)
    if as_json:
        click.echo(json.dumps(info, ensure_ascii=False, indent=2))
        return

    click.echo(f"{pkg.full_name}  {pkg.description or ''}".rstrip())
    if info["dependencies"]:
        click.echo("依赖:")
        for d in info["dependencies"]:
            constraint = d["version_constraint"] or "*"
            click.echo(f"  - {d['name']} {constraint}")
    if info["sources"]:
        click.echo("源:")
        for s in info["sources"]:
            origin = s.get("repo") or ", ".join(s.get("origins", []))
            click.echo(f"  - [{s['kind']:8s}] {s['file']}  {origin}".rstrip())
    if info["build"]:
        click.echo("构建步骤:")
        for i, step in enumerate(info["build"], 1):
            click.echo(f"  {i}. ({step['kind']}) {' '.join(step['argv'])}")


@click.command()
@click.argument("paths", nargs=-1, required=True)
def check(paths: tuple[str, ...]) -> None:
    """校验一个或多个包描述，任一失败则退出码为 1"""
    failed = 0
    for path in paths:
        try:
            pkg = Package.load(_descriptor_path(path))
        except (PkgForgeError, OSError, yaml.YAMLError, ValueError) as e:
            failed += 1
            click.echo(f"  [FAIL] {path}: {e}")
            continue
        click.echo(f"  [OK  ] {path}: {pkg.full_name}")

    click.echo(f"校验完成: {len(paths) - failed} 通过, {failed} 失败")
    if failed:
        raise SystemExit(1)


@click.command(name="parse-name")
@click.argument("full_name")
def parse_name(full_name: str) -> None:
    """把 <name>-<version> 拆分为名称与版本"""
    parsed = Package.parse_full_name(full_name)
    click.echo(f"name: {parsed.name}")
    click.echo(f"version: {parsed.version or '-'}")


@click.command()
@click.argument("directory")
@click.option("--pattern", default="", help="描述文件名匹配模式（默认取配置 descriptor_name）")
def consumers(directory: str, pattern: str) -> None:
    """加载目录下所有包并列出每个包的依赖方"""
    registry = PackageRegistry()
    try:
        registry.load_dir(directory, pattern)
    except (PkgForgeError, OSError, yaml.YAMLError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    registry.link_by_name()
    for pkg in registry:
        users = registry.consumers_of(pkg.full_name)
        click.echo(f"{pkg.full_name}: {', '.join(users) if users else '-'}")
