"""统一异常体系

所有业务异常继承 InspectorError，code 供 Web 层映射 HTTP 状态码、
CLI 层输出友好提示。

单个仓库初始化过程中的 SetupError / PropertyWriteError 由初始化器就地处理，
不会抛给 run_initialization() 的调用方。
"""

from __future__ import annotations


class InspectorError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(InspectorError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(InspectorError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class RepositoryNotFoundError(InspectorError):
    """仓库 key 未在仓库注册表中登记"""

    code = "NOT_FOUND"

    def __init__(self, repository_key: str) -> None:
        super().__init__(f"仓库不存在: {repository_key}")
        self.repository_key = repository_key


class SetupError(InspectorError):
    """受支持包类型的初始化准备工作失败"""

    code = "SETUP_FAILURE"


class PropertyWriteError(InspectorError):
    """属性写入持久化失败，该仓库本轮状态保持原值"""

    code = "PROPERTY_WRITE_ERROR"
