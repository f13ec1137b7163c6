"""pkgforge 日志配置

支持普通文本和结构化 JSON 两种输出格式。与某个包相关的日志通过
extra={"package": full_name} 附带包上下文，JSON 输出中单列为 package 字段，
便于 CI 按包过滤校验结果。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pkgforge.core.exceptions import ConfigError

TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def package_context(full_name: str) -> dict[str, Any]:
    """构造日志 extra 参数: logger.info(..., extra=package_context(pkg.full_name))"""
    return {"package": full_name}


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器，每条记录一行

    输出字段: timestamp, level, logger, message, location；
    带包上下文时追加 package，有异常时追加 exception。
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        package = getattr(record, "package", None)
        if package:
            entry["package"] = package
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器，输出到 stderr；重复调用不会叠加 handler

    Raises:
        ConfigError: 日志级别不在 LEVELS 中
    """
    name = level.strip().upper()
    if name not in LEVELS:
        raise ConfigError(f"无效的日志级别 '{level}'，可用: {', '.join(LEVELS)}")

    reset_logging()
    root = logging.getLogger()
    root.setLevel(name)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)


def reset_logging() -> None:
    """清理根日志器上已注册的 handlers"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
