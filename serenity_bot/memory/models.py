"""记忆数据模型。

定义核心数据结构：一轮发言、短期缓冲条目、长期记忆记录。
所有模型都是 dataclass，支持序列化到 JSON。
"""

from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from ..emotion.lexicon import DEFAULT_EMOTION, EMOTION_TAGS


def _valid_emotion(value: Any) -> str:
    return value if value in EMOTION_TAGS else DEFAULT_EMOTION


def _valid_role(value: Any) -> str:
    return value if value in ("user", "assistant") else "user"


def _to_float(value: Any, default: float) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


@dataclass(frozen=True)
class Utterance:
    """单轮发言（创建后不可变）。"""
    text: str
    role: str  # "user" 或 "assistant"
    persona: str
    emotion: str = DEFAULT_EMOTION
    ts: float = field(default_factory=time.time)


@dataclass
class BufferEntry:
    """短期缓冲中的一条（发言的轻量投影）。"""
    role: str
    content: str
    emotion: str = DEFAULT_EMOTION
    persona: str = ""
    ts: float = field(default_factory=time.time)

    @classmethod
    def from_utterance(cls, utterance: Utterance) -> "BufferEntry":
        return cls(
            role=utterance.role,
            content=utterance.text,
            emotion=utterance.emotion,
            persona=utterance.persona,
            ts=utterance.ts,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BufferEntry":
        return cls(
            role=_valid_role(data.get("role")),
            content=str(data.get("content") or ""),
            emotion=_valid_emotion(data.get("emotion")),
            persona=str(data.get("persona") or ""),
            ts=_to_float(data.get("ts"), time.time()),
        )


@dataclass
class MemoryRecord:
    """长期记忆记录（只有重要性达到阈值的发言才会生成）。"""
    content: str
    emotion: str
    significance: int
    tags: List[str] = field(default_factory=list)
    role: str = "user"
    persona: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    ts: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "emotion": self.emotion,
            "significance": self.significance,
            "tags": self.tags.copy(),
            "role": self.role,
            "persona": self.persona,
            "ts": self.ts,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["MemoryRecord"]:
        """反序列化；内容缺失或重要性不是有限整数时返回 None。"""
        content = data.get("content")
        if not isinstance(content, str) or not content:
            return None
        try:
            significance = max(0, int(data.get("significance", 0)))
        except (TypeError, ValueError, OverflowError):
            # Infinity / -Infinity 是 json.loads 的合法输出
            return None

        tags = data.get("tags") or []
        if not isinstance(tags, list):
            tags = []

        return cls(
            content=content,
            emotion=_valid_emotion(data.get("emotion")),
            significance=significance,
            tags=[str(t) for t in tags],
            role=_valid_role(data.get("role")),
            persona=str(data.get("persona") or ""),
            id=str(data.get("id") or uuid.uuid4().hex),
            ts=_to_float(data.get("ts"), time.time()),
        )
