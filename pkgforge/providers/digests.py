"""文件摘要解析与校验

支持两种声明形式:
    digest: "sha256:9f86d08..."
    digest: {sha256: "9f86d08..."}
"""

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pkgforge.core.exceptions import DigestError

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("md5", "sha1", "sha224", "sha256", "sha384", "sha512")

_HEX_RE = re.compile(r"^[0-9a-f]+$")
_CHUNK_SIZE = 8192


@dataclass(frozen=True)
class Digest:
    """解析后的摘要：算法 + 期望值（小写十六进制）"""

    algorithm: str
    value: str

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.value}"

    def compute(self, path: str | Path) -> str:
        """按本摘要的算法计算文件摘要"""
        h = hashlib.new(self.algorithm)
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                h.update(chunk)
        return h.hexdigest()

    def verify(self, path: str | Path) -> None:
        """校验文件摘要，不一致时抛出 DigestError"""
        actual = self.compute(path)
        if actual != self.value:
            raise DigestError(
                f"摘要不匹配 {path}: 期望 {self}, 实际 {self.algorithm}:{actual}",
            )
        logger.info("摘要校验通过: %s", Path(path).name)


def parse(value: Any) -> Digest:
    """解析摘要声明

    Raises:
        DigestError: 格式不支持、算法未知或长度不符
    """
    if isinstance(value, dict):
        if len(value) != 1:
            raise DigestError(f"摘要映射必须恰好包含一个算法: {value!r}")
        algorithm, hexval = next(iter(value.items()))
    elif isinstance(value, str) and ":" in value:
        algorithm, hexval = value.split(":", 1)
    else:
        raise DigestError(f"无法识别的摘要格式: {value!r}")

    algorithm = str(algorithm).strip().lower()
    hexval = str(hexval).strip().lower()
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise DigestError(
            f"不支持的摘要算法 '{algorithm}'，可用: {', '.join(SUPPORTED_ALGORITHMS)}"
        )
    if not _HEX_RE.match(hexval):
        raise DigestError(f"摘要值不是十六进制: {hexval!r}")
    expected_len = hashlib.new(algorithm).digest_size * 2
    if len(hexval) != expected_len:
        raise DigestError(
            f"{algorithm} 摘要长度应为 {expected_len}，实际 {len(hexval)}",
        )
    return Digest(algorithm=algorithm, value=hexval)
