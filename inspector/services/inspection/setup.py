"""仓库初始化准备 — 受支持包类型的类型相关工作

步骤:
  1. 解析该包类型的制品匹配模式（配置覆盖 > 默认），为空视为准备失败
  2. 解析项目名 / 版本名（仓库上已有属性优先）
  3. 通过 ProjectProvider 确保扫描项目版本存在

通过构造参数注入 ProjectProvider（策略模式），测试时可替换为会失败的替身。
"""

from __future__ import annotations

import logging
import socket
import time
from typing import Any

from inspector.core.exceptions import SetupError
from inspector.core.models import InspectionProperty, Repository, SupportedPackageType
from inspector.core.properties import PropertyStore
from inspector.core.protocols import ProjectProvider
from inspector.core.registry import YamlRegistry

logger = logging.getLogger(__name__)


class PatternManager:
    """包类型 -> 制品匹配模式"""

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self._overrides = {k.lower(): v for k, v in (overrides or {}).items()}

    def get_patterns(self, supported_type: SupportedPackageType) -> list[str]:
        raw = self._overrides.get(supported_type.package_type, supported_type.default_patterns)
        return [p.strip() for p in str(raw or "").split(",") if p.strip()]


class LocalProjectProvider(YamlRegistry):
    """将扫描项目记录在本地 YAML 中的 ProjectProvider 实现"""

    section_key = "projects"

    def __init__(self, registry_file: str = "") -> None:
        super().__init__(self._resolve_registry_file(registry_file, "projects_file"))

    def ensure_project(
        self, name: str, version: str, *,
        repository_key: str = "", forge: str = "",
    ) -> dict[str, Any]:
        if not name or not version:
            raise SetupError("项目名与版本名均不能为空")
        project_id = f"{name}/{version}"
        with self._lock:
            existing = self._get_raw(project_id)
            if existing is not None:
                return existing
            entry = {
                "name": name,
                "version": version,
                "repository_key": repository_key,
                "forge": forge,
                "created_at": time.time(),
            }
            self._put(project_id, entry)
        logger.info("扫描项目已创建: %s", project_id)
        return entry

    def list_all(self) -> list[dict[str, Any]]:
        return self._list_raw()


class InspectionSetup:
    """默认的 RepositorySetup 实现"""

    def __init__(
        self,
        properties: PropertyStore,
        project_provider: ProjectProvider,
        pattern_manager: PatternManager | None = None,
        project_version_name: str = "",
    ) -> None:
        self._properties = properties
        self._projects = project_provider
        self._patterns = pattern_manager or PatternManager()
        self._version_name = project_version_name

    def _default_version_name(self) -> str:
        return self._version_name or socket.gethostname()

    def _first(self, repository_key: str, prop: InspectionProperty) -> str:
        values = self._properties.get_property(repository_key, prop.value)
        return values[0] if values else ""

    def setup(self, repository: Repository, supported_type: SupportedPackageType) -> dict[str, str]:
        patterns = self._patterns.get_patterns(supported_type)
        if not patterns:
            raise SetupError(f"包类型 {supported_type.package_type} 未配置制品匹配模式")

        project_name = self._first(repository.key, InspectionProperty.PROJECT_NAME) or repository.key
        version_name = (
            self._first(repository.key, InspectionProperty.PROJECT_VERSION_NAME)
            or self._default_version_name()
        )
        self._projects.ensure_project(
            project_name, version_name,
            repository_key=repository.key, forge=supported_type.forge,
        )
        logger.debug(
            "仓库准备完成: %s -> %s/%s patterns=%s",
            repository.key, project_name, version_name, patterns,
        )
        return {
            InspectionProperty.PROJECT_NAME.value: project_name,
            InspectionProperty.PROJECT_VERSION_NAME.value: version_name,
        }

