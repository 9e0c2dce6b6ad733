"""集中配置管理

支持从 YAML 文件加载 + 编程式覆盖，未知键收进 extra。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

from inspector.core.exceptions import ConfigError
from inspector.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """全局配置"""

    # 数据文件
    repositories_file: str = "data/repositories.yml"
    properties_file: str = "data/properties.yml"
    tracking_file: str = "data/inspection.yml"
    projects_file: str = "data/projects.yml"

    # 初始化
    max_workers: int = 4
    inspection_enabled: bool = True
    supported_package_types: list[str] = field(default_factory=list)  # 空 = 全部
    patterns: dict[str, str] = field(default_factory=dict)  # 包类型 -> 逗号分隔的 glob
    project_version_name: str = ""  # 空 = 主机名

    # 自定义扩展
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "configs/default.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise ConfigError(f"max_workers 必须为正整数: {self.max_workers!r}")
        if not isinstance(self.patterns, dict):
            raise ConfigError("patterns 必须是 包类型 -> 模式 的映射")
        if not isinstance(self.supported_package_types, list):
            raise ConfigError("supported_package_types 必须是列表")

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/default.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
