"""包元数据模型

数据类:
- DependencyByName / DependencyWithConstraint: 依赖声明
- SourceFile / SourceDirectory / SourceVersionControlled: 解码后的源声明
- SourceEntry: 构造完成的源条目（含来源句柄）
- BuildStep: 构建步骤
- FullName: <name>-<version> 的拆分结果

SourceEntry / BuildStep 对所属 Package 只持有弱引用，
所有权只沿 Package -> 条目 方向，避免循环引用。
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pkgforge.core.pkg.package import Package
    from pkgforge.providers.digests import Digest


# =========================================================================
# 依赖
# =========================================================================


@dataclass(frozen=True)
class DependencyByName:
    """仅按包名声明的依赖"""

    name: str

    @property
    def version_constraint(self) -> str | None:
        return None


@dataclass(frozen=True)
class DependencyWithConstraint:
    """带版本约束的依赖，如 {zlib: ">=1.2.0"}"""

    name: str
    version_constraint: str


Dependency = DependencyByName | DependencyWithConstraint


# =========================================================================
# 源声明（解码结果）
# =========================================================================


@dataclass(frozen=True)
class SourceFile:
    """单文件源"""

    raw: dict[str, Any]
    file: str
    packaged: bool = False


@dataclass(frozen=True)
class SourceDirectory:
    """目录源"""

    raw: dict[str, Any]
    dir: str
    packaged: bool = False

    @property
    def file(self) -> str:
        return self.dir


@dataclass(frozen=True)
class SourceVersionControlled:
    """版本控制源，file 可缺省，由代码仓解析器回填"""

    raw: dict[str, Any]
    file: str | None = None
    packaged: bool = False


SourceSpec = SourceFile | SourceDirectory | SourceVersionControlled


# =========================================================================
# 构造结果
# =========================================================================


class _OwnedByPackage:
    """持有所属 Package 弱引用的条目"""

    _package_ref: weakref.ref | None

    @property
    def package(self) -> Package | None:
        """所属 Package；已被回收时为 None"""
        return self._package_ref() if self._package_ref is not None else None

    def _attach(self, package: Package) -> None:
        self._package_ref = weakref.ref(package)


@dataclass(eq=False)
class SourceEntry(_OwnedByPackage):
    """构建包所需的一份源材料

    来源三选一:
      - scm 不为 None: 版本控制，file/dir/repo 由解析器回填
      - packaged 为 True: 随包发布，无需下载
      - 否则 origins 非空: 按顺序尝试下载
    """

    file: str | None = None
    packaged: bool = False
    is_dir: bool = False
    digest: Digest | None = None
    scm: Any = None
    dir: str | None = None
    repo: str | None = None
    origins: tuple[Any, ...] = ()
    _package_ref: weakref.ref | None = field(default=None, repr=False)

    @property
    def kind(self) -> str:
        if self.scm is not None:
            return "scm"
        if self.packaged:
            return "packaged"
        return "download"


@dataclass(eq=False)
class BuildStep(_OwnedByPackage):
    """构建步骤：引擎句柄 + 原始声明"""

    engine: Any
    raw: Any
    _package_ref: weakref.ref | None = field(default=None, repr=False)


@dataclass(frozen=True)
class FullName:
    """full_name 拆分结果，无法识别版本时 version 为 None"""

    name: str
    version: str | None = None
