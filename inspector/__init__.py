"""repo-inspector — 制品仓库扫描初始化与检查状态协调引擎"""

__version__ = "0.3.0"
