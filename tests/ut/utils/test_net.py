"""URL 协议校验测试"""

from __future__ import annotations

import pytest

from pkgforge.core.exceptions import ValidationError
from pkgforge.utils.net import url_scheme, validate_url_scheme


@pytest.mark.parametrize("url,scheme", [
    ("https://host/x", "https"),
    ("HTTP://host/x", "http"),
    ("file:///srv/x", "file"),
    ("dist/x.tgz", ""),
    ("C:\\dist\\x.tgz", ""),
])
def test_url_scheme(url: str, scheme: str) -> None:
    assert url_scheme(url) == scheme


def test_validate_allows_http() -> None:
    validate_url_scheme("https://zlib.net/zlib.tar.gz")


@pytest.mark.parametrize("url", ["file:///etc/passwd", "ftp://host/x", "dist/x"])
def test_validate_rejects(url: str) -> None:
    with pytest.raises(ValidationError, match="不允许的 URL 协议"):
        validate_url_scheme(url, context="test")
