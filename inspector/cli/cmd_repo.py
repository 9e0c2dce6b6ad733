"""CLI — 仓库登记命令"""

from __future__ import annotations

import click

from inspector.cli import _fail, _svc
from inspector.core.exceptions import InspectorError
from inspector.core.models import Repository, RepositoryType


def register(group: click.Group) -> None:
    group.add_command(repo_group)


@click.group(name="repo")
def repo_group() -> None:
    """仓库登记管理"""


@repo_group.command(name="list")
def repo_list() -> None:
    """列出已登记的仓库"""
    repos = _svc().repositories.list_all()
    if not repos:
        click.echo("没有已登记的仓库。")
        return
    for r in repos:
        click.echo(f"  {r['name']:30s} [{r.get('repo_type', '-'):7s}] {r.get('package_type', '-')}")


@repo_group.command(name="add")
@click.argument("key")
@click.option("--package-type", "-t", required=True, help="包类型（maven、npm ...）")
@click.option(
    "--type", "repo_type", default="local",
    type=click.Choice([t.value for t in RepositoryType]), help="仓库类型",
)
def repo_add(key: str, package_type: str, repo_type: str) -> None:
    """登记仓库"""
    try:
        _svc().repositories.create(
            Repository(key=key, package_type=package_type, repo_type=RepositoryType(repo_type)),
        )
    except InspectorError as e:
        _fail(e)
    click.echo(f"仓库已登记: {key} (package_type={package_type}, type={repo_type})")


@repo_group.command(name="remove")
@click.argument("key")
def repo_remove(key: str) -> None:
    """删除仓库，并清理其属性与检查跟踪"""
    svc = _svc()
    if not svc.repositories.delete(key):
        click.echo(f"仓库不存在: {key}")
        return
    svc.driver.untrack(key)
    svc.properties.clear(key)
    click.echo(f"仓库已删除: {key}")
