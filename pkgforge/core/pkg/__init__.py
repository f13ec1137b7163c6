"""包元数据模块

拆分说明:
- models.py: 数据模型（依赖/源变体、SourceEntry、BuildStep）
- decode.py: 描述解码与版本号校验
- package.py: Package 构造与访问
- registry.py: 规范实例注册与依赖方连接
"""

from pkgforge.core.pkg.models import (
    BuildStep,
    DependencyByName,
    DependencyWithConstraint,
    FullName,
    SourceEntry,
)
from pkgforge.core.pkg.package import Package
from pkgforge.core.pkg.registry import PackageRegistry

__all__ = [
    "BuildStep",
    "DependencyByName",
    "DependencyWithConstraint",
    "FullName",
    "Package",
    "PackageRegistry",
    "SourceEntry",
]
