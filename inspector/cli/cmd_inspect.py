"""CLI — 检查跟踪、初始化、属性查询、看板"""

from __future__ import annotations

import json

import click

from inspector.cli import _fail, _svc
from inspector.core.exceptions import InspectorError
from inspector.core.models import PackageType


def register(group: click.Group) -> None:
    group.add_command(track)
    group.add_command(untrack)
    group.add_command(tracked)
    group.add_command(init)
    group.add_command(props)
    group.add_command(package_types)
    group.add_command(serve)


# ---- 跟踪 ----

@click.command()
@click.argument("key")
def track(key: str) -> None:
    """将仓库加入检查"""
    try:
        _svc().driver.track(key)
    except InspectorError as e:
        _fail(e)
    click.echo(f"已加入检查: {key}")


@click.command()
@click.argument("key")
def untrack(key: str) -> None:
    """将仓库移出检查"""
    if _svc().driver.untrack(key):
        click.echo(f"已移出检查: {key}")
    else:
        click.echo(f"仓库未在检查中: {key}")


@click.command()
def tracked() -> None:
    """列出检查中的仓库及其状态"""
    report = _svc().driver.status_report()
    if not report["repositories"]:
        click.echo("没有检查中的仓库。")
        return
    for r in report["repositories"]:
        status = ",".join(r["status"]) or "-"
        click.echo(f"  {r['key']:30s} {status}")


# ---- 初始化 ----

@click.command()
@click.option("--json", "as_json", is_flag=True, help="以 JSON 输出汇总")
def init(as_json: bool) -> None:
    """对检查中的仓库执行一轮初始化"""
    summary = _svc().driver.run_initialization()
    if as_json:
        click.echo(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
        return
    for o in summary.outcomes:
        status = o.status.name if o.status else "-"
        detail = f"  ({o.message})" if o.message else ""
        click.echo(f"  {o.key:30s} {status}{detail}")
    click.echo(
        f"共 {summary.total} 个: SUCCESS={summary.succeeded} "
        f"FAILURE={summary.failed} 错误={summary.errors}"
    )


# ---- 查询 ----

@click.command()
@click.argument("key")
def props(key: str) -> None:
    """显示仓库属性"""
    try:
        properties = _svc().properties.get_properties(key)
    except InspectorError as e:
        _fail(e)
    if not properties:
        click.echo("(无属性)")
        return
    for name, values in sorted(properties.items()):
        click.echo(f"  {name} = {','.join(values)}")


@click.command(name="package-types")
def package_types() -> None:
    """列出包类型及是否受支持"""
    registry = _svc().package_types
    for pt in PackageType:
        flag = "supported" if registry.is_supported(pt.value) else "-"
        click.echo(f"  {pt.value:12s} {flag}")


@click.command()
@click.option("--port", default=8888, help="监听端口")
@click.option("--host", default="127.0.0.1", help="监听地址")
def serve(port: int, host: str) -> None:
    """启动 HTTP 接口"""
    from inspector.web.app import run_server
    run_server(port=port, host=host)
