"""持久化存储模块。

职责：
- 定义存储端口（按固定 key 读写一个 JSON 数组）
- JsonFileStorage: 每个 key 一个 JSON 文件
- InMemoryStorage: 进程内字典（测试 / 不需要落盘时使用）

读失败（文件损坏、格式不对）一律返回空列表；写失败只记日志返回 False。
"""

from __future__ import annotations

import asyncio
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Protocol

logger = logging.getLogger(__name__)

# 文件 IO 放到线程池里跑，避免阻塞事件循环
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="memory_io")

VAULT_KEY = "serenity_memory_vault"
BUFFER_KEY = "serenity_buffer"


class Storage(Protocol):
    """存储端口：load/save 一个有序列表。"""

    def load(self, key: str) -> List[Dict[str, Any]]: ...

    def save(self, key: str, items: List[Dict[str, Any]]) -> bool: ...


def _sync_read_json(path: Path) -> List[Dict[str, Any]]:
    """读取 JSON 数组；文件不存在或内容不合法时返回空列表。"""
    try:
        if not path.exists():
            return []
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception as e:
        logger.warning("读取 %s 失败: %s", path, e)
        return []

    if not isinstance(data, list):
        logger.warning("%s 不是 JSON 数组，已忽略", path)
        return []
    return [item for item in data if isinstance(item, dict)]


def _sync_write_json(path: Path, items: List[Dict[str, Any]]) -> bool:
    """写入 JSON 数组（先写临时文件再替换，避免读到半截文件）。"""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(path)
        return True
    except Exception as e:
        logger.warning("写入 %s 失败: %s", path, e)
        return False


async def run_io(func: Callable[..., Any], *args: Any) -> Any:
    """在 IO 线程池里执行任意存储调用（Storage 端口本身是同步的）。"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, func, *args)


class JsonFileStorage:
    """文件存储（每个 key 一个 <key>.json）。"""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def _file(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def load(self, key: str) -> List[Dict[str, Any]]:
        return _sync_read_json(self._file(key))

    def save(self, key: str, items: List[Dict[str, Any]]) -> bool:
        return _sync_write_json(self._file(key), items)


class InMemoryStorage:
    """内存存储（同样返回副本，行为与文件存储一致）。"""

    def __init__(self, initial: Dict[str, Any] | None = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def load(self, key: str) -> List[Dict[str, Any]]:
        data = self._data.get(key)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("存储 key %s 不是列表，已忽略", key)
            return []
        return [dict(item) for item in data if isinstance(item, dict)]

    def save(self, key: str, items: List[Dict[str, Any]]) -> bool:
        self._data[key] = [dict(item) for item in items]
        return True
