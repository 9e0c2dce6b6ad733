"""包类型注册表 — 判断包类型是否受支持

启动时加载固定集合，之后只读，无需加锁。
未知标识一律视为不支持（fail-closed），不抛异常。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from inspector.core.models import SupportedPackageType

logger = logging.getLogger(__name__)


class PackageTypeRegistry:
    """受支持包类型的只读查询表"""

    def __init__(self, supported: Iterable[str] | None = None) -> None:
        """
        参数:
            supported: 限定启用的包类型标识；None 或空表示全部 SupportedPackageType
        """
        members: dict[str, SupportedPackageType] = {}
        wanted = list(supported or [])
        if not wanted:
            members = {m.package_type: m for m in SupportedPackageType}
        else:
            for package_type in wanted:
                member = SupportedPackageType.get_as_supported(package_type)
                if member is None:
                    logger.warning("配置中的包类型不在支持范围内，已忽略: %s", package_type)
                    continue
                members[member.package_type] = member
        self._members = members

    def get(self, package_type: object) -> SupportedPackageType | None:
        member = SupportedPackageType.get_as_supported(package_type)
        if member is None or member.package_type not in self._members:
            return None
        return member

    def is_supported(self, package_type: object) -> bool:
        return self.get(package_type) is not None

    def supported_ids(self) -> list[str]:
        return sorted(self._members)
