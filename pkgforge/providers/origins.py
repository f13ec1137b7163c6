"""源文件下载来源

来源句柄只描述"从哪里取"，不执行下载；按声明顺序排列，
由下载器依次尝试（先成功者胜出）。

声明形式:
    origins: https://example.com/foo-1.0.tar.gz
    origins:
      - https://mirror-a/foo-1.0.tar.gz
      - {url: "file:///srv/mirror/foo-1.0.tar.gz", name: local-mirror}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlparse
from urllib.request import url2pathname

from pkgforge.core.exceptions import UnknownOriginError
from pkgforge.utils.net import url_scheme, validate_url_scheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UrlOrigin:
    """http/https 远程来源"""

    url: str
    name: str = ""

    kind = "url"

    @property
    def filename(self) -> str:
        """URL 最后一段，作为下载后的默认文件名"""
        return urlparse(self.url).path.rstrip("/").split("/")[-1]


@dataclass(frozen=True)
class LocalOrigin:
    """本地文件系统来源（普通路径或 file:// URL）"""

    path: str
    name: str = ""

    kind = "local"

    @property
    def filename(self) -> str:
        return Path(self.path).name


Origin = UrlOrigin | LocalOrigin


def create(origin: Any) -> Origin:
    """根据来源声明创建来源句柄

    Raises:
        UnknownOriginError: 声明格式无效或协议不受支持
    """
    name = ""
    if isinstance(origin, dict):
        url = origin.get("url")
        name = str(origin.get("name") or "")
    else:
        url = origin
    if not isinstance(url, str) or not url.strip():
        raise UnknownOriginError(origin, "来源必须是非空 URL 或路径")
    url = url.strip()

    try:
        scheme = url_scheme(url)
        if scheme in ("http", "https"):
            validate_url_scheme(url, context="origin")
            return UrlOrigin(url=url, name=name)
        if scheme == "file":
            return LocalOrigin(path=url2pathname(urlparse(url).path), name=name)
    except ValueError as e:
        raise UnknownOriginError(url, f"URL 格式错误: {e}") from e
    if not scheme:
        return LocalOrigin(path=url, name=name)
    raise UnknownOriginError(url, f"不支持的协议 '{scheme}'")
