"""网络工具: URL 协议识别与校验"""

from __future__ import annotations

from urllib.parse import urlparse

from pkgforge.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def url_scheme(url: str) -> str:
    """返回小写 URL 协议；Windows 盘符路径（C:\\...）视为无协议"""
    scheme = urlparse(url).scheme.lower()
    return "" if len(scheme) == 1 else scheme


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    scheme = url_scheme(url)
    if scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )
