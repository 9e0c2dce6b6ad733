"""仓库检查初始化器 — 一轮初始化的执行单元

对每个仓库:
  1. 查包类型注册表判断是否受支持
  2. 不支持 → 直接写 FAILURE，不做准备
  3. 支持 → 执行准备工作，成功写 SUCCESS，任何异常写 FAILURE
  4. 每个仓库每轮恰好一次写入，写入是替换而非追加

仓库之间无顺序依赖，按 max_workers 并行；同一仓库的写入由属性存储的仓库级锁串行化。
单个仓库的任何失败都不会以异常形式抛给调用方。
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from inspector.core.exceptions import PropertyWriteError, RepositoryNotFoundError, ValidationError
from inspector.core.models import (
    FailureReason,
    InitializationSummary,
    InspectionProperty,
    InspectionStatus,
    Repository,
    RepositoryOutcome,
)
from inspector.core.package_types import PackageTypeRegistry
from inspector.core.properties import PropertyStore
from inspector.core.protocols import RepositorySetup
from inspector.core.repositories import RepositoryRegistry

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class InspectionInitializer:
    """可配置并行度的仓库初始化器"""

    def __init__(
        self,
        package_types: PackageTypeRegistry,
        properties: PropertyStore,
        repositories: RepositoryRegistry,
        repository_setup: RepositorySetup,
        max_workers: int = 1,
    ) -> None:
        self.package_types = package_types
        self.properties = properties
        self.repositories = repositories
        self._setup = repository_setup
        self.max_workers = max(1, max_workers)

    # ---- 单个仓库 ----

    def _classify_and_setup(self, repository: Repository) -> tuple[InspectionStatus, FailureReason | None, str, dict[str, str]]:
        """返回 (状态, 失败原因, 说明, 随状态写入的附加属性)"""
        supported = self.package_types.get(repository.package_type)
        if supported is None:
            message = f"Repository package type not supported: {repository.package_type}"
            logger.warning(
                "仓库 %s 的包类型 %s 不受支持，标记为 FAILURE",
                repository.key, repository.package_type,
                extra={"repo_key": repository.key, "package_type": repository.package_type,
                       "reason": FailureReason.UNSUPPORTED_PACKAGE_TYPE.value},
            )
            return InspectionStatus.FAILURE, FailureReason.UNSUPPORTED_PACKAGE_TYPE, message, {}

        try:
            extra_props = dict(self._setup.setup(repository, supported) or {})
        except Exception as e:  # noqa: BLE001
            message = f"Setup failed: {e}"
            logger.warning(
                "仓库 %s 初始化准备失败，标记为 FAILURE: %s",
                repository.key, e, exc_info=True,
                extra={"repo_key": repository.key, "package_type": repository.package_type,
                       "reason": FailureReason.SETUP_FAILED.value},
            )
            return InspectionStatus.FAILURE, FailureReason.SETUP_FAILED, message, {}

        return InspectionStatus.SUCCESS, None, "", extra_props

    def _write_status(
        self, key: str, status: InspectionStatus, message: str, extra_props: dict[str, str],
    ) -> None:
        updates: dict[str, list[str]] = {k: [v] for k, v in extra_props.items()}
        updates[InspectionProperty.INSPECTION_STATUS.value] = [status.name]
        updates[InspectionProperty.INSPECTION_STATUS_MESSAGE.value] = [message] if message else []
        updates[InspectionProperty.LAST_INSPECTION.value] = [_timestamp()]
        self.properties.set_properties(key, updates)

    def initialize_one(self, key: str) -> RepositoryOutcome:
        """初始化单个仓库，永不抛出"""
        try:
            repository = self.repositories.get(key)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "读取仓库记录失败，跳过初始化: %s - %s", key, e, exc_info=True,
                extra={"repo_key": key, "reason": FailureReason.REPOSITORY_UNREADABLE.value},
            )
            return RepositoryOutcome(
                key=key, reason=FailureReason.REPOSITORY_UNREADABLE, message=f"Repository unreadable: {e}",
            )
        if repository is None:
            logger.warning("仓库不存在，跳过初始化: %s", key,
                           extra={"repo_key": key, "reason": FailureReason.REPOSITORY_NOT_FOUND.value})
            return RepositoryOutcome(
                key=key, reason=FailureReason.REPOSITORY_NOT_FOUND, message="Repository not found",
            )

        status, reason, message, extra_props = self._classify_and_setup(repository)
        try:
            self._write_status(key, status, message, extra_props)
        except (PropertyWriteError, RepositoryNotFoundError, ValidationError) as e:
            logger.error("写入检查状态失败，保留原值: %s - %s", key, e,
                         extra={"repo_key": key, "reason": FailureReason.WRITE_FAILED.value})
            return RepositoryOutcome(
                key=key, reason=FailureReason.WRITE_FAILED, message=str(e),
            )
        return RepositoryOutcome(key=key, status=status, reason=reason, message=message, written=True)

    # ---- 一轮 ----

    def _run_guarded(self, key: str, cancel_event: threading.Event | None) -> RepositoryOutcome | None:
        if cancel_event is not None and cancel_event.is_set():
            return None
        return self.initialize_one(key)

    def initialize(
        self, keys: list[str], cancel_event: threading.Event | None = None,
    ) -> InitializationSummary:
        """对给定仓库执行一轮初始化，结果顺序与输入一致

        cancel_event 置位后尚未开始的仓库被跳过（不写入），已写入的状态不受影响。
        """
        start = time.monotonic()
        summary = InitializationSummary()
        unique_keys = list(dict.fromkeys(keys))

        if self.max_workers == 1 or len(unique_keys) <= 1:
            results = [self._run_guarded(k, cancel_event) for k in unique_keys]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self._run_guarded, k, cancel_event) for k in unique_keys]
                results = [f.result() for f in futures]

        for key, outcome in zip(unique_keys, results):
            if outcome is None:
                summary.skipped.append(key)
            else:
                summary.outcomes.append(outcome)
        summary.cancelled = bool(summary.skipped)

        logger.info(
            "初始化完成: total=%d success=%d failure=%d errors=%d skipped=%d (%.2f秒)",
            summary.total, summary.succeeded, summary.failed, summary.errors,
            len(summary.skipped), time.monotonic() - start,
        )
        return summary
