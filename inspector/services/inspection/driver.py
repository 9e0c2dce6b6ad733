"""协调驱动 — 测试与宿主触发使用的入口

track(repository) 把仓库加入检查跟踪集合，
run_initialization() 对跟踪集合做一轮完整初始化。

每轮基于跟踪集合的快照执行，轮内跟踪集合单调；
多个触发并发到达时逐轮串行，每轮都归约为每个仓库一个确定的状态值。
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Mapping, Sequence
from typing import Any

from inspector.core.exceptions import RepositoryNotFoundError
from inspector.core.models import InitializationSummary, InspectionProperty, Repository
from inspector.core.properties import PropertyStore
from inspector.core.registry import YamlRegistry
from inspector.core.repositories import RepositoryRegistry
from inspector.services.inspection.initializer import InspectionInitializer

logger = logging.getLogger(__name__)

# 模块名，按名设置启停时不区分大小写
INSPECTION_MODULE = "InspectionModule"
_MODULE_ALIASES = {INSPECTION_MODULE.lower(), "inspection"}

_TRUE_VALUES = {"true", "on", "yes", "y", "t"}


def parse_bool(raw: str) -> bool:
    """宽松布尔解析，其余取值一律为 False"""
    return raw.strip().lower() in _TRUE_VALUES


class TrackingRegistry(YamlRegistry):
    """检查跟踪集合（仓库 key -> 加入时间）"""

    section_key = "tracked"

    def __init__(self, registry_file: str = "") -> None:
        super().__init__(self._resolve_registry_file(registry_file, "tracking_file"))

    def add(self, key: str) -> bool:
        """加入跟踪，已在集合中时返回 False"""
        with self._lock:
            if self._get_raw(key) is not None:
                return False
            self._put(key, {"tracked_at": time.time()})
            return True

    def discard(self, key: str) -> bool:
        return self._remove(key)

    def keys(self) -> list[str]:
        return [e["name"] for e in self._list_raw()]


class ReconciliationDriver:
    """检查状态协调入口"""

    def __init__(
        self,
        initializer: InspectionInitializer,
        tracking: TrackingRegistry,
        repositories: RepositoryRegistry,
        properties: PropertyStore,
        enabled: bool = True,
    ) -> None:
        self._initializer = initializer
        self._tracking = tracking
        self._repositories = repositories
        self._properties = properties
        self._enabled = enabled
        self._pass_lock = threading.Lock()

    # ---- 模块开关 ----

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        logger.warning("检查模块启用状态设为 %s", enabled)
        self._enabled = enabled

    def set_modules_state(self, params: Mapping[str, Sequence[str]]) -> dict[str, bool]:
        """按模块名设置启停，每个模块取第一个值；返回已生效的设置"""
        applied: dict[str, bool] = {}
        for name, values in params.items():
            if not values:
                continue
            if name.lower() not in _MODULE_ALIASES:
                logger.warning("未找到名为 '%s' 的模块", name)
                continue
            self.set_enabled(parse_bool(values[0]))
            applied[INSPECTION_MODULE] = self._enabled
        return applied

    # ---- 跟踪集合 ----

    def track(self, repository: Repository | str) -> str:
        """将已存在的仓库加入检查跟踪，重复加入无副作用"""
        key = repository.key if isinstance(repository, Repository) else repository
        if not self._repositories.exists(key):
            raise RepositoryNotFoundError(key)
        if self._tracking.add(key):
            logger.info("仓库已加入检查: %s", key)
        return key

    def untrack(self, key: str) -> bool:
        """移出跟踪；进行中的一轮不受影响"""
        removed = self._tracking.discard(key)
        if removed:
            logger.info("仓库已移出检查: %s", key)
        return removed

    def tracked(self) -> list[str]:
        return self._tracking.keys()

    # ---- 初始化 ----

    def run_initialization(self, cancel_event: threading.Event | None = None) -> InitializationSummary:
        """对跟踪集合执行一轮初始化"""
        if not self._enabled:
            logger.warning("检查模块未启用，跳过仓库初始化")
            return InitializationSummary()

        with self._pass_lock:
            keys = self.tracked()
            logger.info("开始仓库初始化: %d 个仓库", len(keys))
            return self._initializer.initialize(keys, cancel_event=cancel_event)

    def inspection_status(self, key: str) -> list[str]:
        return self._properties.get_property(key, InspectionProperty.INSPECTION_STATUS.value)

    def status_report(self) -> dict[str, Any]:
        """跟踪仓库的当前状态一览"""
        report: dict[str, Any] = {"enabled": self._enabled, "repositories": []}
        for key in self.tracked():
            try:
                statuses = self.inspection_status(key)
            except RepositoryNotFoundError:
                statuses = []
            report["repositories"].append({"key": key, "status": statuses})
        return report
