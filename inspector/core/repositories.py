"""仓库注册表 — 外部仓库供给方的最小实现

负责仓库记录的登记、查询、列表、删除。
检查引擎只按 key 读取记录，从不创建或删除仓库。
"""

from __future__ import annotations

import logging
import re
from typing import Any

from inspector.core.exceptions import RepositoryNotFoundError, ValidationError
from inspector.core.models import Repository, RepositoryType
from inspector.core.registry import YamlRegistry

logger = logging.getLogger(__name__)

_SAFE_KEY_RE = re.compile(r"^[a-zA-Z0-9_.\-]+$")


class RepositoryRegistry(YamlRegistry):
    """仓库注册表"""

    section_key = "repositories"

    def __init__(self, registry_file: str = "") -> None:
        super().__init__(self._resolve_registry_file(registry_file, "repositories_file"))

    def create(self, repository: Repository) -> dict[str, Any]:
        """登记仓库；key 已存在时覆盖其记录"""
        if not repository.key:
            raise ValidationError("仓库 key 为必填")
        if not _SAFE_KEY_RE.match(repository.key):
            raise ValidationError(f"仓库 key 包含非法字符: {repository.key}")
        if not repository.package_type:
            raise ValidationError("package_type 为必填")
        if not isinstance(repository.repo_type, RepositoryType):
            raise ValidationError(f"不支持的仓库类型: {repository.repo_type}")

        entry = repository.to_dict()
        entry.pop("key")
        self._put(repository.key, entry)
        logger.info(
            "仓库已登记: %s (package_type=%s, type=%s)",
            repository.key, repository.package_type, repository.repo_type.value,
        )
        return entry

    def get(self, key: str) -> Repository | None:
        entry = self._get_raw(key)
        if entry is None:
            return None
        return Repository.from_dict(key, entry)

    def require(self, key: str) -> Repository:
        """获取仓库，不存在时抛 RepositoryNotFoundError"""
        repository = self.get(key)
        if repository is None:
            raise RepositoryNotFoundError(key)
        return repository

    def exists(self, key: str) -> bool:
        return self._get_raw(key) is not None

    def list_all(self) -> list[dict[str, Any]]:
        return self._list_raw()

    def delete(self, key: str) -> bool:
        if not self._remove(key):
            return False
        logger.info("仓库已删除: %s", key)
        return True
