"""Web 路由模块 - Blueprint 集合

- plugins_bp.py: 插件执行（仓库初始化、状态一览）
- storage_bp.py: 仓库属性读写
- repositories_bp.py: 仓库登记与检查跟踪
"""

from inspector.web.blueprints.plugins_bp import plugins_bp
from inspector.web.blueprints.repositories_bp import repositories_bp
from inspector.web.blueprints.storage_bp import storage_bp

__all__ = [
    "plugins_bp",
    "storage_bp",
    "repositories_bp",
]
