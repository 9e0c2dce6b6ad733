"""repo-inspector 日志配置

文本格式给人看，JSON 格式给宿主/流水线采集。
初始化失败的原因（不支持的包类型 / 准备失败）会以 extra 字段带入 JSON。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

# 通过 logger.xxx(..., extra={...}) 传入、需要进入 JSON 输出的字段
_EXTRA_FIELDS = ("repo_key", "package_type", "reason")


class JSONFormatter(logging.Formatter):
    """单行 JSON 日志格式器

    输出示例:
        {"timestamp": "...", "level": "WARNING", "logger": "inspector.services...",
         "message": "...", "repo_key": "npm-remote", "reason": "SETUP_FAILED"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            # 事件发生时间，而非格式化时间
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器，输出到 stderr

    参数:
        level: DEBUG / INFO / WARNING / ERROR / CRITICAL
        json_output: True 时使用 JSONFormatter

    重复调用会先清理已有 handler，不会重复输出。
    """
    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def reset_logging() -> None:
    """移除根日志器上的全部 handler"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
