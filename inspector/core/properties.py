"""仓库属性存储

每个仓库一组 属性键 -> 字符串列表，持久化在单个 YAML 文件中。

一致性约定:
  - 写入是整表替换：读者要么看到旧列表，要么看到完整的新列表
  - 同一仓库 key 同时最多一个写入（lock_for）
  - 只接受仓库注册表中存在的 key，绝不隐式创建条目
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager

import yaml

from inspector.core.exceptions import PropertyWriteError, RepositoryNotFoundError, ValidationError
from inspector.core.registry import YamlRegistry
from inspector.core.repositories import RepositoryRegistry

logger = logging.getLogger(__name__)


def _normalize_values(property_key: str, values: Sequence[str]) -> list[str]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise ValidationError(f"属性 {property_key} 的值必须是字符串列表")
    result = []
    for value in values:
        if not isinstance(value, str):
            raise ValidationError(f"属性 {property_key} 含非字符串值: {value!r}")
        result.append(value)
    return result


class PropertyStore(YamlRegistry):
    """按仓库划分的列表值属性存储"""

    section_key = "properties"

    def __init__(
        self,
        registry_file: str = "",
        repositories: RepositoryRegistry | None = None,
    ) -> None:
        super().__init__(self._resolve_registry_file(registry_file, "properties_file"))
        self._repositories = repositories or RepositoryRegistry()
        self._key_locks: dict[str, threading.Lock] = {}
        self._key_locks_guard = threading.Lock()

    def lock_for(self, repository_key: str) -> threading.Lock:
        """仓库级写锁"""
        with self._key_locks_guard:
            lock = self._key_locks.get(repository_key)
            if lock is None:
                lock = self._key_locks[repository_key] = threading.Lock()
            return lock

    @contextmanager
    def _locked(self, repository_key: str) -> Iterator[None]:
        """持有仓库级写锁；等待期间锁被 clear() 回收时改用新锁"""
        while True:
            lock = self.lock_for(repository_key)
            with lock:
                with self._key_locks_guard:
                    current = self._key_locks.get(repository_key) is lock
                if current:
                    yield
                    return

    def _ensure_repository(self, repository_key: str) -> None:
        if not self._repositories.exists(repository_key):
            raise RepositoryNotFoundError(repository_key)

    # ---- 读 ----

    def get_property(self, repository_key: str, property_key: str) -> list[str]:
        """返回当前值列表的副本，未设置时为空列表"""
        self._ensure_repository(repository_key)
        entry = self._get_raw(repository_key) or {}
        return list(entry.get(property_key, []))

    def get_properties(self, repository_key: str) -> dict[str, list[str]]:
        self._ensure_repository(repository_key)
        entry = self._get_raw(repository_key) or {}
        return {k: list(v) for k, v in entry.items()}

    # ---- 写 ----

    def set_property(self, repository_key: str, property_key: str, values: Sequence[str]) -> None:
        """替换（而非追加）该属性的全部值"""
        self.set_properties(repository_key, {property_key: values})

    def set_properties(self, repository_key: str, updates: Mapping[str, Sequence[str]]) -> None:
        """一次原子地替换多个属性"""
        normalized = {k: _normalize_values(k, v) for k, v in updates.items()}
        # 存在性检查与写入同在仓库锁内，避免与仓库删除后的 clear() 交错
        with self._locked(repository_key):
            self._ensure_repository(repository_key)
            entry = self._get_raw(repository_key) or {}
            entry.update(normalized)
            self._write(repository_key, entry)
        logger.debug("属性已写入: %s %s", repository_key, sorted(normalized))

    def delete_property(self, repository_key: str, property_key: str) -> bool:
        with self._locked(repository_key):
            self._ensure_repository(repository_key)
            entry = self._get_raw(repository_key) or {}
            if property_key not in entry:
                return False
            del entry[property_key]
            self._write(repository_key, entry)
        return True

    def clear(self, repository_key: str) -> bool:
        """删除仓库的全部属性（仓库删除后的清理，不校验仓库是否存在）

        仓库已不存在时一并回收其写锁。
        """
        with self._locked(repository_key):
            try:
                removed = self._remove(repository_key)
            except (OSError, yaml.YAMLError) as e:
                raise PropertyWriteError(f"清理属性失败: {repository_key}: {e}") from e
            if not self._repositories.exists(repository_key):
                with self._key_locks_guard:
                    self._key_locks.pop(repository_key, None)
            return removed

    def _write(self, repository_key: str, entry: dict[str, list[str]]) -> None:
        try:
            self._commit(repository_key, entry)
        except (OSError, yaml.YAMLError) as e:
            raise PropertyWriteError(f"写入属性失败: {repository_key}: {e}") from e
