"""服务容器 — 统一依赖注入

CLI 和 Web 层均通过 get_container() 获取服务，同一容器内的实例共享状态
（仓库注册表、属性存储、各自的锁）。

依赖关系图（→ 表示依赖）:
  properties  → repositories
  setup       → properties, projects
  initializer → package_types, properties, repositories, setup
  driver      → initializer, tracking, repositories, properties

用法:
    container = ServiceContainer()
    container.driver.track("maven-remote")
    summary = container.driver.run_initialization()
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from inspector.core.config import Config
    from inspector.core.package_types import PackageTypeRegistry
    from inspector.core.properties import PropertyStore
    from inspector.core.repositories import RepositoryRegistry
    from inspector.services.inspection import (
        InspectionInitializer,
        InspectionSetup,
        LocalProjectProvider,
        ReconciliationDriver,
        TrackingRegistry,
    )

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(self, config: Config | None = None) -> None:
        self._instances: dict[str, object] = {}
        self._lock = threading.RLock()
        if config is None:
            from inspector.core.config import get_config
            config = get_config()
        self._config = config

    @property
    def config(self) -> Config:
        return self._config

    def _get(self, name: str, factory):  # type: ignore[no-untyped-def]
        with self._lock:
            if name not in self._instances:
                self._instances[name] = factory()
            return self._instances[name]

    # ---- 核心 ----

    @property
    def package_types(self) -> PackageTypeRegistry:
        from inspector.core.package_types import PackageTypeRegistry
        return self._get(
            "package_types",
            lambda: PackageTypeRegistry(self._config.supported_package_types),
        )

    @property
    def repositories(self) -> RepositoryRegistry:
        from inspector.core.repositories import RepositoryRegistry
        return self._get(
            "repositories",
            lambda: RepositoryRegistry(registry_file=self._config.repositories_file),
        )

    @property
    def properties(self) -> PropertyStore:
        from inspector.core.properties import PropertyStore
        return self._get(
            "properties",
            lambda: PropertyStore(
                registry_file=self._config.properties_file,
                repositories=self.repositories,
            ),
        )

    # ---- 检查服务 ----

    @property
    def projects(self) -> LocalProjectProvider:
        from inspector.services.inspection import LocalProjectProvider
        return self._get(
            "projects",
            lambda: LocalProjectProvider(registry_file=self._config.projects_file),
        )

    @property
    def setup(self) -> InspectionSetup:
        from inspector.services.inspection import InspectionSetup, PatternManager
        return self._get(
            "setup",
            lambda: InspectionSetup(
                properties=self.properties,
                project_provider=self.projects,
                pattern_manager=PatternManager(self._config.patterns),
                project_version_name=self._config.project_version_name,
            ),
        )

    @property
    def initializer(self) -> InspectionInitializer:
        from inspector.services.inspection import InspectionInitializer
        return self._get(
            "initializer",
            lambda: InspectionInitializer(
                package_types=self.package_types,
                properties=self.properties,
                repositories=self.repositories,
                repository_setup=self.setup,
                max_workers=self._config.max_workers,
            ),
        )

    @property
    def tracking(self) -> TrackingRegistry:
        from inspector.services.inspection import TrackingRegistry
        return self._get(
            "tracking",
            lambda: TrackingRegistry(registry_file=self._config.tracking_file),
        )

    @property
    def driver(self) -> ReconciliationDriver:
        from inspector.services.inspection import ReconciliationDriver
        return self._get(
            "driver",
            lambda: ReconciliationDriver(
                initializer=self.initializer,
                tracking=self.tracking,
                repositories=self.repositories,
                properties=self.properties,
                enabled=self._config.inspection_enabled,
            ),
        )


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
