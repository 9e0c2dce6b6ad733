"""repo-inspector 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os
from typing import Any

import click

from inspector import __version__
from inspector.core.exceptions import InspectorError
from inspector.services.container import get_container
from inspector.utils.logger import setup_logging


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


def _fail(exc: InspectorError) -> None:
    """把业务异常转成 click 的友好错误输出"""
    raise click.ClickException(f"[{exc.code}] {exc}")


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default="", help="配置文件路径（默认 configs/default.yml）")
def main(config_path: str) -> None:
    """repo-inspector - 制品仓库检查初始化工具"""
    setup_logging(
        level=os.getenv("INSPECTOR_LOG_LEVEL", "INFO"),
        json_output=os.getenv("INSPECTOR_LOG_JSON", "") == "1",
    )
    if config_path:
        from inspector.core.config import init_config
        from inspector.services.container import reset_container
        try:
            init_config(config_path)
        except InspectorError as e:
            _fail(e)
        reset_container()


# 注册各领域子命令
from inspector.cli.cmd_repo import register as _reg_repo  # noqa: E402
from inspector.cli.cmd_inspect import register as _reg_inspect  # noqa: E402

_reg_repo(main)
_reg_inspect(main)
