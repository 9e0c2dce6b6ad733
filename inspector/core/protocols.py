"""领域协议定义

初始化器、准备步骤依赖的外部协作方接口。
使用 typing.Protocol，测试替身与宿主适配器无需继承即可满足。
"""

from __future__ import annotations

from typing import Any, Protocol

from inspector.core.models import Repository, SupportedPackageType


# =========================================================================
# 扫描项目协议
# =========================================================================

class ProjectProvider(Protocol):
    """扫描服务端项目的提供者

    初始化受支持仓库时，为其确保存在对应的 项目/版本。
    失败时抛出任意异常，由初始化器降级为 FAILURE。
    """

    def ensure_project(
        self, name: str, version: str, *,
        repository_key: str = "", forge: str = "",
    ) -> dict[str, Any]:
        """确保项目版本存在，返回项目记录"""
        ...


# =========================================================================
# 仓库准备协议
# =========================================================================

class RepositorySetup(Protocol):
    """受支持仓库的类型相关准备工作

    返回成功时需要随 SUCCESS 一起记录的属性（键 -> 单值）。
    """

    def setup(
        self, repository: Repository, supported_type: SupportedPackageType,
    ) -> dict[str, str]:
        ...
