"""集中配置管理

提供统一的配置入口：缓存目录、默认描述文件名、默认代码仓类型。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

from pkgforge.core.exceptions import ConfigError
from pkgforge.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """全局配置"""

    # 目录
    cache_dir: str = ".pkgforge/cache"
    descriptor_name: str = "package.yml"

    # 代码仓
    default_scm: str = "git"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "configs/pkgforge.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        for k, v in matched.items():
            if not isinstance(v, str) or not v:
                raise ConfigError(f"配置项 {k} 必须是非空字符串: {v!r}")
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/pkgforge.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current


def set_config(cfg: Config | None) -> None:
    """直接替换全局配置，传 None 恢复默认"""
    global _current  # noqa: PLW0603
    _current = cfg
