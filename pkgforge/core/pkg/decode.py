"""包描述解码

把通用的 YAML 结构映射为明确的变体类型，无法识别的形状直接报错:
- 版本号: 语义化版本 2.0.0
- 依赖:   "name" | {name: constraint}
- 源:     scm 优先，其次 file，再次 dir
"""

from __future__ import annotations

import re
from typing import Any

from pkgforge.core.exceptions import (
    InvalidDependencyError,
    InvalidSourceError,
    MissingSourceFileError,
)
from pkgforge.core.pkg.models import (
    Dependency,
    DependencyByName,
    DependencyWithConstraint,
    SourceDirectory,
    SourceFile,
    SourceSpec,
    SourceVersionControlled,
)

# https://semver.org 官方正则
SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


def is_valid_version(version: Any) -> bool:
    """版本号是否为合法的语义化版本字符串"""
    return isinstance(version, str) and SEMVER_RE.match(version) is not None


def as_list(value: Any) -> list[Any]:
    """非列表的段落按空列表处理"""
    return value if isinstance(value, list) else []


def decode_dependency(value: Any) -> Dependency:
    """解码单条依赖声明

    Raises:
        InvalidDependencyError: 非字符串/单键映射、包名为空
    """
    if isinstance(value, str):
        if not value.strip():
            raise InvalidDependencyError(value)
        return DependencyByName(name=value.strip())

    if isinstance(value, dict) and len(value) == 1:
        name, constraint = next(iter(value.items()))
        if not isinstance(name, str) or not name.strip():
            raise InvalidDependencyError(value)
        if constraint is None:
            return DependencyByName(name=name.strip())
        if isinstance(constraint, (dict, list)):
            raise InvalidDependencyError(value)
        return DependencyWithConstraint(
            name=name.strip(), version_constraint=str(constraint),
        )

    raise InvalidDependencyError(value)


def decode_dependencies(value: Any) -> list[Dependency]:
    """按声明顺序解码依赖列表"""
    return [decode_dependency(dep) for dep in as_list(value)]


def decode_source(value: Any) -> SourceSpec:
    """解码单条源声明

    Raises:
        InvalidSourceError: 声明不是映射
        MissingSourceFileError: 没有 scm，且 file / dir 都缺失
    """
    if not isinstance(value, dict):
        raise InvalidSourceError(value)

    packaged = bool(value.get("packaged"))
    file = value.get("file")
    if value.get("scm"):
        return SourceVersionControlled(
            raw=value, file=str(file) if file else None, packaged=packaged,
        )
    if file:
        return SourceFile(raw=value, file=str(file), packaged=packaged)
    if value.get("dir"):
        return SourceDirectory(raw=value, dir=str(value["dir"]), packaged=packaged)
    raise MissingSourceFileError(value)
