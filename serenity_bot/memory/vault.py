"""长期记忆库。

只保存"重要"的发言：按情绪、敏感话题、自我披露给发言打分，
分数达到阈值才入库；超出上限时按重要性淘汰到软上限。
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Iterable, List, Optional

from ..emotion.extractor import contains_any
from ..emotion.lexicon import (
    BETRAYAL_TERMS,
    DEFAULT_EMOTION,
    DISCLOSURE_TERMS,
    FAMILY_TERMS,
    HIGH_INTENSITY_EMOTIONS,
    LEGAL_TERMS,
    THEFT_TERMS,
    TOPIC_RULES,
    TRAUMA_TERMS,
)
from .models import MemoryRecord

logger = logging.getLogger(__name__)

# 记忆库里每条记录的重要性下限
MIN_SIGNIFICANCE = 2


def score_significance(content: str, emotion: str) -> int:
    """计算重要性分数（基础分 1，逐项累加）。"""
    significance = 1
    lower = (content or "").lower()

    # 情绪
    if emotion != DEFAULT_EMOTION:
        significance += 1
    if emotion in HIGH_INTENSITY_EMOTIONS:
        significance += 2
    if emotion == "empathetic":
        significance += 1

    # 敏感话题
    if contains_any(lower, TRAUMA_TERMS):
        significance += 3
    if contains_any(lower, FAMILY_TERMS) and contains_any(lower, BETRAYAL_TERMS):
        significance += 2
    if contains_any(lower, LEGAL_TERMS):
        significance += 2
    if contains_any(lower, THEFT_TERMS):
        significance += 2

    # 自我披露
    if contains_any(lower, DISCLOSURE_TERMS):
        significance += 1

    return significance


def derive_tags(content: str) -> List[str]:
    """按关键词打话题标签（去重，保持首次出现顺序）。"""
    lower = (content or "").lower()
    tags: List[str] = []
    for keywords, labels in TOPIC_RULES:
        if contains_any(lower, keywords):
            for label in labels:
                if label not in tags:
                    tags.append(label)
    return tags


class MemoryVault:
    """长期记忆库（插入 + 淘汰在同一把锁内完成）。"""

    def __init__(
        self,
        hard_cap: int = 100,
        soft_cap: int = 80,
        threshold: int = 2,
        prefer_recent: bool = False,
        clock=time.time,
    ):
        self.hard_cap = max(1, int(hard_cap))
        self.soft_cap = max(1, min(int(soft_cap), self.hard_cap))
        self.threshold = max(MIN_SIGNIFICANCE, int(threshold))
        self.prefer_recent = prefer_recent
        self.clock = clock
        self._records: List[MemoryRecord] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def records(self) -> List[MemoryRecord]:
        with self._lock:
            return list(self._records)

    def last(self, n: int) -> List[MemoryRecord]:
        if n <= 0:
            return []
        with self._lock:
            return self._records[-n:]

    def insert(
        self,
        content: str,
        emotion: str,
        *,
        role: str = "user",
        persona: str = "",
    ) -> Optional[MemoryRecord]:
        """打分并尝试入库。

        返回:
            新建的 MemoryRecord；分数低于阈值时返回 None（库不变）
        """
        significance = score_significance(content, emotion)
        if significance < self.threshold:
            return None

        record = MemoryRecord(
            content=content,
            emotion=emotion,
            significance=significance,
            tags=derive_tags(content),
            role=role,
            persona=persona,
            ts=self.clock(),
        )
        with self._lock:
            self._records.append(record)
            self._evict_locked()

        logger.info(
            "added to long-term memory: emotion=%s significance=%s content=%.50s",
            record.emotion,
            record.significance,
            content,
        )
        return record

    def extend(self, records: Iterable[MemoryRecord]) -> int:
        """追加已有记录（导入 / 启动加载）；低于阈值的丢弃。返回实际追加数。"""
        accepted = [r for r in records if r.significance >= self.threshold]
        with self._lock:
            self._records.extend(accepted)
            self._evict_locked()
        return len(accepted)

    def _evict_locked(self) -> None:
        if len(self._records) <= self.hard_cap:
            return

        before = len(self._records)
        if self.prefer_recent:
            # 同分时保留较新的，幸存者保持时间顺序
            indexed = sorted(
                enumerate(self._records),
                key=lambda pair: (pair[1].significance, pair[0]),
                reverse=True,
            )[: self.soft_cap]
            indexed.sort(key=lambda pair: pair[0])
            self._records = [record for _, record in indexed]
        else:
            # 稳定排序：同分按插入顺序，结果按重要性降序排列（不再是时间顺序）
            self._records.sort(key=lambda r: r.significance, reverse=True)
            self._records = self._records[: self.soft_cap]
        logger.debug("vault evicted %s records", before - len(self._records))

    def to_list(self) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in self.records()]
