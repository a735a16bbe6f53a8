"""pkgfetch 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
全局选项（配置文件、根目录、模拟运行、日志级别）在 main 中处理一次，
子命令通过 ctx.obj 读取。
"""

import os

import click

from pkgfetch import __version__
from pkgfetch.core.config import DEFAULT_CONFIG_FILE, init_config
from pkgfetch.core.exceptions import PkgFetchError
from pkgfetch.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE, help="配置文件路径")
@click.option("--root", default=None, help="包数据库根目录（覆盖配置文件）")
@click.option("--simulate", is_flag=True, help="模拟运行，不做任何下载或文件写入")
@click.option("--verbose", "-v", is_flag=True, help="输出调试日志")
@click.option("--quiet", "-q", is_flag=True, help="只输出警告和错误")
@click.pass_context
def main(
    ctx: click.Context, config_path: str, root: str | None,
    simulate: bool, verbose: bool, quiet: bool,
) -> None:
    """pkgfetch - 软件包制品拉取工具"""
    try:
        cfg = init_config(config_path)
    except PkgFetchError as e:
        raise click.ClickException(str(e)) from e
    if root:
        cfg.root = root

    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = os.getenv("PKGFETCH_LOG_LEVEL", cfg.log_level)
    setup_logging(
        level=level,
        json_output=os.getenv("PKGFETCH_LOG_JSON", "") == "1",
    )

    ctx.obj = {"config": cfg, "simulate": simulate}


# 注册各领域子命令
from pkgfetch.cli.cmd_fetch import register as _reg_fetch  # noqa: E402

_reg_fetch(main)
