"""pkgforge 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click
import yaml

from pkgforge import __version__
from pkgforge.core.config import init_config
from pkgforge.core.exceptions import ConfigError
from pkgforge.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="configs/pkgforge.yml", help="配置文件路径")
def main(config_path: str) -> None:
    """pkgforge - 软件包描述校验与查看工具"""
    try:
        setup_logging(
            level=os.getenv("PKGFORGE_LOG_LEVEL", "WARNING"),
            json_output=os.getenv("PKGFORGE_LOG_JSON", "") == "1",
        )
        init_config(config_path)
    except (ConfigError, yaml.YAMLError, ValueError) as e:
        raise click.ClickException(str(e)) from e


# 注册各领域子命令
from pkgforge.cli.cmd_pkg import register as _reg_pkg  # noqa: E402

_reg_pkg(main)
