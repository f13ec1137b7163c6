"""包元数据

Package 由一份包描述构造而成，构造完成后只读，唯一可变的是
consumers（谁依赖了本包），由依赖方通过 used_by 写入。

描述格式:
    package:
      name: zlib
      version: 1.3.1
      description: compression library
      dependencies:
        - libc
        - {cmake: ">=3.20.0"}
    sources:
      - file: zlib-1.3.1.tar.gz
        digest: sha256:9a93b2b7...
        origins: https://zlib.net/zlib-1.3.1.tar.gz
      - dir: patches
        packaged: true
      - scm: {repo: https://github.com/madler/zlib.git, ref: v1.3.1}
    build:
      - ./configure --prefix=/usr
      - make: install
"""

from __future__ import annotations

import logging
import os
import re
import weakref
from pathlib import Path
from typing import Any

from pkgforge.core.exceptions import (
    InvalidArgumentError,
    InvalidVersionError,
    MissingFieldError,
    MissingSectionError,
    UnknownOriginError,
)
from pkgforge.core.pkg.decode import (
    as_list,
    decode_dependencies,
    decode_source,
    is_valid_version,
)
from pkgforge.core.pkg.models import (
    BuildStep,
    Dependency,
    FullName,
    SourceDirectory,
    SourceEntry,
    SourceSpec,
    SourceVersionControlled,
)
from pkgforge.providers import build_engine, digests, origins, scm
from pkgforge.utils.logger import package_context
from pkgforge.utils.yaml_io import read_document

logger = logging.getLogger(__name__)

# <name>-<major>.<minor>.<patch>[suffix]，name 取最长匹配
_FULL_NAME_RE = re.compile(r"^(.+)-((?:\d+\.){2}\d+.*)$")


class Package:
    """单个软件包：身份、版本、依赖、源与构建步骤"""

    def __init__(self, meta: Any, filename: str | Path | None = None) -> None:
        self.filename = os.path.abspath(filename) if filename else None

        if not isinstance(meta, dict):
            raise InvalidArgumentError(meta)
        section = meta.get("package")
        if not section or not isinstance(section, dict):
            raise MissingSectionError("package")
        name = section.get("name")
        if not name or not isinstance(name, str) or not name.strip():
            raise MissingFieldError("package.name")
        version = section.get("version")
        if not is_valid_version(version):
            raise InvalidVersionError(version)

        self._meta = meta
        self._name = name.strip()
        self._version: str = version
        self._deps = tuple(decode_dependencies(section.get("dependencies")))
        self._consumers: weakref.WeakValueDictionary[str, Package] = (
            weakref.WeakValueDictionary()
        )
        self._srcs = tuple(
            self._resolve_source(decode_source(src))
            for src in as_list(meta.get("sources"))
        )
        self._build_steps = tuple(
            self._resolve_build_step(step) for step in as_list(meta.get("build"))
        )
        logger.debug(
            "包已构造: %s (%d 依赖, %d 源, %d 构建步骤)",
            self.full_name, len(self._deps), len(self._srcs), len(self._build_steps),
            extra=package_context(self.full_name),
        )

    def _resolve_source(self, spec: SourceSpec) -> SourceEntry:
        """按 scm > file/dir 的优先级构造源条目，再处理摘要与来源"""
        raw = spec.raw
        entry = SourceEntry(file=spec.file, packaged=spec.packaged)
        entry._attach(self)

        if isinstance(spec, SourceVersionControlled):
            entry.scm = scm.create(raw, entry)
        elif isinstance(spec, SourceDirectory):
            entry.is_dir = True

        if raw.get("digest"):
            entry.digest = digests.parse(raw["digest"])

        if entry.scm is None and not entry.packaged:
            declared = raw.get("origins")
            if not declared:
                raise UnknownOriginError(entry.file)
            if not isinstance(declared, list):
                declared = [declared]
            entry.origins = tuple(origins.create(o) for o in declared)
        return entry

    def _resolve_build_step(self, step: Any) -> BuildStep:
        build_step = BuildStep(engine=build_engine.create(step), raw=step)
        build_step._attach(self)
        return build_step

    # ---- 只读属性 ----

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    @property
    def full_name(self) -> str:
        return f"{self._name}-{self._version}"

    @property
    def description(self) -> str | None:
        return self._meta["package"].get("description")

    @property
    def dependencies(self) -> tuple[Dependency, ...]:
        return self._deps

    @property
    def consumers(self) -> weakref.WeakValueDictionary[str, Package]:
        """依赖本包的包，full_name -> Package（弱引用）"""
        return self._consumers

    @property
    def sources(self) -> tuple[SourceEntry, ...]:
        return self._srcs

    @property
    def build_steps(self) -> tuple[BuildStep, ...]:
        return self._build_steps

    def used_by(self, package: Package) -> None:
        """记录 package 依赖本包；同一 full_name 后写覆盖先写"""
        self._consumers[package.full_name] = package

    def __repr__(self) -> str:
        return f"Package({self.full_name!r})"

    # ---- 静态工具 ----

    @staticmethod
    def parse_full_name(full_name: str) -> FullName:
        """把 <name>-<version> 拆分为名称与版本

        启发式匹配: 取最后一个形如 -X.Y.Z 的后缀作为版本，
        名称本身包含此类片段（如 tool-2.0.0-x）时会被误拆。
        """
        m = _FULL_NAME_RE.match(full_name)
        if m is None:
            return FullName(name=full_name)
        return FullName(name=m.group(1), version=m.group(2))

    @staticmethod
    def load(filename: str | Path) -> Package:
        """读取 YAML 包描述文件并构造 Package

        Raises:
            FileNotFoundError / OSError: 读取失败
            yaml.YAMLError: YAML 格式错误
            PackageError: 描述校验失败
        """
        meta = read_document(filename)
        pkg = Package(meta, filename)
        logger.info(
            "已加载包描述: %s <- %s", pkg.full_name, filename,
            extra=package_context(pkg.full_name),
        )
        return pkg
