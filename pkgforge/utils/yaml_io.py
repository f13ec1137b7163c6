"""YAML 文件统一读取工具

集中管理 YAML 反序列化，统一 encoding="utf-8" 与大小限制。
- load_yaml: 宽松读取（配置文件），不存在或非字典时返回空字典
- read_document: 严格读取（包描述），不存在即报错，原样返回文档
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# YAML 文件最大大小限制 (10MB)，防止恶意大文件导致内存耗尽
MAX_YAML_SIZE = 10 * 1024 * 1024


def _check_size(p: Path) -> None:
    file_size = p.stat().st_size
    if file_size > MAX_YAML_SIZE:
        raise ValueError(
            f"YAML 文件过大: {p} ({file_size} 字节), "
            f"超过限制 {MAX_YAML_SIZE} 字节"
        )


def read_document(path: str | Path) -> Any:
    """读取并反序列化一个 YAML 文档

    参数:
        path: YAML 文件路径

    返回:
        反序列化后的任意值（映射、序列、标量或 None），不做类型校验

    异常:
        FileNotFoundError: 文件不存在
        yaml.YAMLError: YAML 格式错误
        ValueError: 文件过大（超过 MAX_YAML_SIZE）
    """
    p = Path(path)
    _check_size(p)
    try:
        with open(p, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s, 错误: %s", path, e)
        raise


def load_yaml(path: str | Path) -> dict[str, Any]:
    """安全读取 YAML 字典文件

    返回:
        dict: 解析后的字典。如果文件不存在、为空、或内容不是字典类型，返回空字典

    示例:
        >>> config = load_yaml("configs/pkgforge.yml")
        >>> cache_dir = config.get("cache_dir", ".pkgforge/cache")
    """
    p = Path(path)
    if not p.exists():
        return {}

    result = read_document(p)
    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning(
            "%s 内容不是字典类型 (实际类型: %s)，返回空字典",
            path, type(result).__name__,
        )
        return {}
    return result
