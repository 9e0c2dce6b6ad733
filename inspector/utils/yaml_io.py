"""YAML 文件读写工具

注册表、属性存储、跟踪列表共用的持久化入口：
统一 UTF-8、空文件保护、原子替换写入。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# 单个 YAML 文件上限 (10MB)
MAX_YAML_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """先写同目录临时文件再 os.replace，读者只会看到旧文件或完整的新文件"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 字典

    文件不存在、为空或顶层不是字典时返回 {}。
    解析失败、IO 失败照常抛出，文件过大抛 ValueError。
    """
    p = Path(path)
    if not p.exists():
        return {}

    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ValueError(f"YAML 文件过大: {p} ({size} 字节), 上限 {MAX_YAML_SIZE} 字节")

    try:
        with open(p, encoding="utf-8") as f:
            result = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("解析 YAML 失败: %s, 错误: %s", p, e)
        raise
    except OSError as e:
        logger.error("读取文件失败: %s, 错误: %s", p, e)
        raise

    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning("%s 顶层不是字典 (%s)，按空处理", p, type(result).__name__)
        return {}
    return result


def save_yaml(path: str | Path, data: Any) -> None:
    """原子写入 YAML，保持键顺序"""
    p = Path(path)
    try:
        content = yaml.safe_dump(
            data, default_flow_style=False,
            allow_unicode=True, sort_keys=False,
        )
        atomic_write(p, content)
    except yaml.YAMLError as e:
        logger.error("序列化 YAML 失败: %s, 错误: %s", p, e)
        raise
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", p, e)
        raise
