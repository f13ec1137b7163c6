"""包注册表

职责:
- 按 full_name 维护唯一的 Package 实例
- 从描述文件/目录批量加载
- 记录依赖方（used_by 的统一入口）

注册表只记录依赖边，不做版本求解与构建排序。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from pkgforge.core.config import get_config
from pkgforge.core.exceptions import DuplicatePackageError
from pkgforge.core.pkg.package import Package
from pkgforge.utils.logger import package_context

logger = logging.getLogger(__name__)


class PackageRegistry:
    """Package 注册表 - 每个 full_name 只保留一个规范实例"""

    def __init__(self) -> None:
        self._packages: dict[str, Package] = {}

    def add(self, pkg: Package) -> Package:
        """注册包；同一实例重复注册无副作用"""
        existing = self._packages.get(pkg.full_name)
        if existing is pkg:
            return pkg
        if existing is not None:
            raise DuplicatePackageError(pkg.full_name)
        self._packages[pkg.full_name] = pkg
        logger.debug("包已注册: %s", pkg.full_name, extra=package_context(pkg.full_name))
        return pkg

    def get(self, full_name: str) -> Package | None:
        return self._packages.get(full_name)

    def find(self, name: str) -> list[Package]:
        """按包名查找所有已注册版本（注册顺序）"""
        return [p for p in self._packages.values() if p.name == name]

    def load(self, filename: str | Path) -> Package:
        """加载单个描述文件并注册"""
        return self.add(Package.load(filename))

    def load_dir(self, directory: str | Path, pattern: str = "") -> list[Package]:
        """递归加载目录下所有描述文件（默认文件名取自配置）

        任一文件加载失败即中止，异常原样上抛。
        """
        root = Path(directory)
        pattern = pattern or get_config().descriptor_name
        loaded = [self.load(path) for path in sorted(root.rglob(pattern))]
        if not loaded:
            logger.warning("目录下没有包描述文件: %s (%s)", root, pattern)
        else:
            logger.info("已从 %s 加载 %d 个包", root, len(loaded))
        return loaded

    @staticmethod
    def link(consumer: Package, dependency: Package) -> None:
        """记录 consumer 依赖 dependency"""
        dependency.used_by(consumer)
        logger.debug("依赖关系: %s -> %s", consumer.full_name, dependency.full_name)

    def link_by_name(self) -> int:
        """按依赖包名连接所有已注册包，返回建立的边数

        只按名称匹配，不校验版本约束；同名多个版本时全部连接。
        未注册的依赖记录 WARNING 后跳过。
        """
        edges = 0
        for consumer in list(self._packages.values()):
            for dep in consumer.dependencies:
                targets = self.find(dep.name)
                if not targets:
                    logger.warning(
                        "依赖未注册: %s -> %s", consumer.full_name, dep.name,
                        extra=package_context(consumer.full_name),
                    )
                    continue
                for target in targets:
                    self.link(consumer, target)
                    edges += 1
        return edges

    def consumers_of(self, full_name: str) -> list[str]:
        """返回依赖指定包的 full_name 列表（排序）"""
        pkg = self._packages.get(full_name)
        if pkg is None:
            return []
        return sorted(pkg.consumers.keys())

    def __contains__(self, full_name: object) -> bool:
        return full_name in self._packages

    def __len__(self) -> int:
        return len(self._packages)

    def __iter__(self) -> Iterator[Package]:
        return iter(list(self._packages.values()))
