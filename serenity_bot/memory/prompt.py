"""上下文拼装模块。

职责：
- 把短期缓冲、相关长期记忆、当前话题、情绪模式拼成一段上下文
- 生成发给推理服务的完整 prompt
"""

from __future__ import annotations

from collections import Counter
from typing import List, Optional, Sequence, Tuple

from ..emotion.lexicon import DEFAULT_EMOTION
from .buffer import MemoryBuffer
from .models import BufferEntry, MemoryRecord
from .retriever import MemoryRetriever
from .vault import MemoryVault, derive_tags

NO_CONTEXT = "No previous context available."

# (情绪集合, 对应观察)；前三高频情绪命中哪组就输出哪句
PATTERN_OBSERVATIONS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("sad", "concerned", "empathetic"), "User has been discussing emotional/personal topics"),
    (("angry", "shocked"), "User has expressed strong reactions to difficult situations"),
    (("thoughtful", "explain"), "Conversation has involved analytical or explanatory content"),
)


def _excerpt(text: str, limit: int) -> str:
    text = " ".join((text or "").split())
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def _speaker(entry: BufferEntry) -> str:
    if entry.role == "user":
        return "User"
    return entry.persona or "Assistant"


def top_emotions(records: Sequence[MemoryRecord], n: int = 5) -> List[Tuple[str, int]]:
    """非 neutral 情绪按出现次数降序（同数按首次出现顺序）。"""
    counts = Counter(r.emotion for r in records if r.emotion and r.emotion != DEFAULT_EMOTION)
    return counts.most_common(n)


def detect_emotional_patterns(records: Sequence[MemoryRecord]) -> Optional[str]:
    """根据记录中最常见的 3 种情绪给出整体观察；没有可说的返回 None。"""
    leading = [emotion for emotion, _ in top_emotions(records, 3)]
    if not leading:
        return None

    patterns = [
        observation
        for emotions, observation in PATTERN_OBSERVATIONS
        if any(e in emotions for e in leading)
    ]
    if not patterns:
        return None
    return ". ".join(patterns)


def current_topics(entries: Sequence[BufferEntry]) -> List[str]:
    """最近几条发言涉及的话题标签（去重，保持出现顺序）。"""
    topics: List[str] = []
    for entry in entries:
        for tag in derive_tags(entry.content):
            if tag not in topics:
                topics.append(tag)
    return topics


class ContextAssembler:
    """为推理服务拼装本轮上下文（只读，不修改缓冲和记忆库）。"""

    def __init__(
        self,
        buffer: MemoryBuffer,
        vault: MemoryVault,
        retriever: MemoryRetriever,
        *,
        buffer_entries: int = 8,
        memory_limit: int = 2,
        min_significance: int = 3,
        topic_window: int = 5,
        pattern_window: int = 20,
    ):
        self.buffer = buffer
        self.vault = vault
        self.retriever = retriever
        self.buffer_entries = buffer_entries
        self.memory_limit = memory_limit
        self.min_significance = min_significance
        self.topic_window = topic_window
        self.pattern_window = pattern_window

    def assemble(self) -> str:
        """拼装上下文。

        顺序：
        1. 最近的对话
        2. 与最近一条用户发言相关的长期记忆
        3. 当前话题
        4. 情绪模式
        """
        if not len(self.buffer) and not len(self.vault):
            return NO_CONTEXT

        parts: List[str] = []

        # 1. 最近对话
        recent = self.buffer.tail(self.buffer_entries)
        if recent:
            lines = ["RECENT CONVERSATION:"]
            for entry in recent:
                lines.append(f"{_speaker(entry)}: {_excerpt(entry.content, 200)} (feeling {entry.emotion})")
            parts.append("\n".join(lines))

        # 2. 相关长期记忆
        memories = self._relevant_memories()
        if memories:
            lines = ["PREVIOUS IMPORTANT CONVERSATIONS:"]
            for index, record in enumerate(memories, start=1):
                who = "User" if record.role == "user" else (record.persona or "Assistant")
                lines.append(f'{index}. {who}: "{_excerpt(record.content, 100)}" ({record.emotion})')
            parts.append("\n".join(lines))

        # 3. 当前话题
        topics = current_topics(self.buffer.tail(self.topic_window))
        if topics:
            parts.append("CURRENT TOPICS: " + ", ".join(topics))

        # 4. 情绪模式
        pattern = detect_emotional_patterns(self.vault.last(self.pattern_window))
        if pattern:
            parts.append(f"EMOTIONAL CONTEXT: {pattern}.")

        if not parts:
            return NO_CONTEXT
        return "\n\n".join(parts)

    def _relevant_memories(self) -> List[MemoryRecord]:
        query = self.buffer.last_content("user")
        if not query:
            return []
        return self.retriever.search(
            query,
            limit=self.memory_limit,
            min_significance=self.min_significance,
        )


def build_chat_prompt(persona: str, context: str, message: str) -> str:
    """构建发给推理服务的完整 prompt（人设 + 格式要求 + 上下文 + 当前消息）。"""
    parts = [
        f"You are {persona}, a compassionate healthcare professional.",
        "FORMATTING INSTRUCTIONS:\n"
        "- Use *emotion* to show expressions.\n"
        '- Place text inside "quotes" if specifically demonstrating.\n'
        "- Example: *smile* I am happy. *sad* I am sad.\n"
        "- Remember the conversation history and maintain continuity.",
    ]

    if context and context != NO_CONTEXT:
        parts.append(f"CONVERSATION CONTEXT:\n{context}")

    parts.append(f"Current user message: {message}")
    parts.append(f"{persona}:")
    return "\n\n".join(parts)
