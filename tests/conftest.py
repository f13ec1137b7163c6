"""公共测试夹具"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from pkgforge.core.config import Config, set_config


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path) -> Any:
    """每个用例使用独立配置，缓存目录落在 tmp_path 下"""
    cfg = Config(cache_dir=str(tmp_path / "cache"))
    set_config(cfg)
    yield cfg
    set_config(None)
