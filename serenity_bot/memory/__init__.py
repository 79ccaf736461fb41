"""记忆模块。

本模块提供：
- MemoryBuffer: 短期缓冲（固定容量，先进先出）
- MemoryVault: 长期记忆库（重要性打分、话题标签、按重要性淘汰）
- MemoryRetriever: 长期记忆相关度检索
- ContextAssembler: 拼装发给推理服务的上下文
- MemoryManager: 统一管理接口
- storage: 存储端口（文件 / 内存）
"""

from .models import Utterance, BufferEntry, MemoryRecord
from .buffer import MemoryBuffer
from .vault import MemoryVault, score_significance, derive_tags
from .retriever import MemoryRetriever, relevance_score
from .prompt import (
    NO_CONTEXT,
    ContextAssembler,
    build_chat_prompt,
    current_topics,
    detect_emotional_patterns,
    top_emotions,
)
from .storage import Storage, JsonFileStorage, InMemoryStorage, VAULT_KEY, BUFFER_KEY
from .manager import MemoryManager

__all__ = [
    "Utterance",
    "BufferEntry",
    "MemoryRecord",
    "MemoryBuffer",
    "MemoryVault",
    "score_significance",
    "derive_tags",
    "MemoryRetriever",
    "relevance_score",
    "NO_CONTEXT",
    "ContextAssembler",
    "build_chat_prompt",
    "current_topics",
    "detect_emotional_patterns",
    "top_emotions",
    "Storage",
    "JsonFileStorage",
    "InMemoryStorage",
    "VAULT_KEY",
    "BUFFER_KEY",
    "MemoryManager",
]
