"""YAML 注册表基类

仓库注册表、属性存储、检查跟踪列表、项目记录共用的
加载 / 保存 / 增删改查逻辑。子类只需指定 section_key。

写操作在 self._lock 下完成并原子落盘；
落盘失败时内存中的 section 回滚到写入前的状态。
"""

from __future__ import annotations

import copy
import logging
import threading
from pathlib import Path
from typing import Any

from inspector.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


class YamlRegistry:
    """YAML 文件注册表基类

    子类用法:
        class MyRegistry(YamlRegistry):
            section_key = "items"
    """

    section_key: str = "entries"

    def __init__(self, registry_file: str) -> None:
        self.registry_file = Path(registry_file)
        self._data: dict[str, Any] = load_yaml(self.registry_file)
        self._lock = threading.RLock()

    @staticmethod
    def _resolve_registry_file(registry_file: str, config_key: str) -> str:
        """未显式给出路径时从 Config 取"""
        if registry_file:
            return registry_file
        from inspector.core.config import get_config
        return str(getattr(get_config(), config_key))

    def _section(self) -> dict[str, Any]:
        """获取当前 section 字典（自动创建）"""
        result: dict[str, Any] = self._data.setdefault(self.section_key, {})
        return result

    def _save(self) -> None:
        self.registry_file.parent.mkdir(parents=True, exist_ok=True)
        save_yaml(self.registry_file, self._data)

    def _commit(self, name: str, entry: Any) -> None:
        """写入条目并落盘，失败则回滚"""
        with self._lock:
            section = self._section()
            previous = copy.deepcopy(section.get(name)) if name in section else None
            existed = name in section
            section[name] = entry
            try:
                self._save()
            except Exception:
                if existed:
                    section[name] = previous
                else:
                    section.pop(name, None)
                raise

    def _put(self, name: str, entry: Any) -> Any:
        self._commit(name, entry)
        return entry

    def _get_raw(self, name: str) -> Any | None:
        with self._lock:
            return copy.deepcopy(self._section().get(name))

    def _list_raw(self) -> list[dict[str, Any]]:
        """列出所有条目（带 name 字段）"""
        with self._lock:
            return [{"name": k, **copy.deepcopy(v)} for k, v in self._section().items()]

    def _remove(self, name: str) -> bool:
        with self._lock:
            section = self._section()
            if name not in section:
                return False
            previous = section.pop(name)
            try:
                self._save()
            except Exception:
                section[name] = previous
                raise
            return True
