"""检查初始化服务

- setup.py: 受支持包类型的准备工作（模式解析、扫描项目）
- initializer.py: 一轮初始化，每仓库恰好一次状态写入
- driver.py: track / run_initialization 入口与跟踪集合
"""

from inspector.services.inspection.driver import ReconciliationDriver, TrackingRegistry
from inspector.services.inspection.initializer import InspectionInitializer
from inspector.services.inspection.setup import InspectionSetup, LocalProjectProvider, PatternManager

__all__ = [
    "ReconciliationDriver",
    "TrackingRegistry",
    "InspectionInitializer",
    "InspectionSetup",
    "LocalProjectProvider",
    "PatternManager",
]
