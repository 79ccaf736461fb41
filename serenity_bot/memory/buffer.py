"""短期记忆缓冲。

固定容量、按插入顺序（即时间顺序）保存最近的发言，超出容量丢弃最旧的。
清空会话只清这里，不动长期记忆。
"""

from __future__ import annotations

import threading
import time
from typing import Any, Dict, Iterable, List

from .models import BufferEntry


class MemoryBuffer:
    """短期记忆缓冲（线程安全：追加 + 截断在同一把锁内完成）。"""

    def __init__(self, capacity: int = 10):
        self.capacity = max(1, int(capacity))
        self._entries: List[BufferEntry] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, entry: BufferEntry) -> BufferEntry:
        """追加一条（时间戳以追加时刻为准），并保持最大容量。"""
        entry.ts = time.time()
        with self._lock:
            self._entries.append(entry)
            if len(self._entries) > self.capacity:
                self._entries = self._entries[-self.capacity:]
        return entry

    def tail(self, n: int) -> List[BufferEntry]:
        """最近 n 条（时间顺序）。"""
        if n <= 0:
            return []
        with self._lock:
            return self._entries[-n:]

    def entries(self) -> List[BufferEntry]:
        with self._lock:
            return list(self._entries)

    def last_content(self, role: str) -> str:
        """指定角色最近一条发言内容；没有则返回空串。"""
        with self._lock:
            for entry in reversed(self._entries):
                if entry.role == role and entry.content:
                    return entry.content
        return ""

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    def replace(self, entries: Iterable[BufferEntry]) -> None:
        """整体替换（导入 / 启动加载），同样受容量约束。"""
        entries = list(entries)
        with self._lock:
            self._entries = entries[-self.capacity:]

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries()]
