"""长期记忆检索（简单相关度打分）。"""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Sequence

from .models import MemoryRecord

DAY_SECONDS = 24 * 60 * 60


def relevance_score(
    record: MemoryRecord,
    query: str,
    *,
    emotion_filter: Optional[str] = None,
    now: Optional[float] = None,
) -> int:
    """单条记录的相关度。

    - 查询整体出现在内容中 +5
    - 每个长度 > 3 的查询词出现在内容中 +2
    - 每个查询词等于记录标签 +3
    - 情绪等于 emotion_filter +2
    - 一周内 +1，一天内再 +2
    - 加上记录自身的重要性
    """
    lower_query = (query or "").lower()
    lower_content = record.content.lower()
    query_words = lower_query.split()
    score = 0

    if lower_query in lower_content:
        score += 5

    for word in query_words:
        if len(word) > 3 and word in lower_content:
            score += 2

    for word in query_words:
        if word in record.tags:
            score += 3

    if emotion_filter and record.emotion == emotion_filter:
        score += 2

    now = time.time() if now is None else now
    age_days = (now - record.ts) / DAY_SECONDS
    if age_days < 7:
        score += 1
    if age_days < 1:
        score += 2

    return score + record.significance


class MemoryRetriever:
    """在记忆库上做相关度检索。"""

    def __init__(self, source: Callable[[], Sequence[MemoryRecord]], clock: Callable[[], float] = time.time):
        """参数:
            source: 返回当前全部记录的函数（通常是 vault.records）
            clock: 时间来源（测试可注入固定时间）
        """
        self._source = source
        self._clock = clock

    def search(
        self,
        query: str,
        *,
        limit: int = 5,
        min_significance: int = 1,
        emotion_filter: Optional[str] = None,
    ) -> List[MemoryRecord]:
        """按相关度降序返回最多 limit 条（同分保持库内顺序）。"""
        records = list(self._source())
        if not records or limit <= 0:
            return []

        now = self._clock()
        candidates = [r for r in records if r.significance >= min_significance]
        scored = [
            (relevance_score(r, query, emotion_filter=emotion_filter, now=now), r)
            for r in candidates
        ]
        # list.sort 是稳定排序，reverse=True 也不改变同分顺序
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [record for _, record in scored[:limit]]
