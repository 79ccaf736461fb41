"""记忆管理器。

统一管理短期缓冲与长期记忆库的读写、持久化、导入导出。
提供简洁的接口给外部调用。
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, List, Optional

from ..emotion.lexicon import DEFAULT_EMOTION, EMOTION_TAGS
from ..settings import MemorySettings
from .buffer import MemoryBuffer
from .models import BufferEntry, MemoryRecord, Utterance
from .prompt import ContextAssembler, current_topics, top_emotions
from .retriever import MemoryRetriever
from .storage import BUFFER_KEY, VAULT_KEY, InMemoryStorage, Storage, run_io
from .vault import MemoryVault

logger = logging.getLogger(__name__)


class MemoryManager:
    """记忆管理器。

    职责：
    - 管理短期缓冲（MemoryBuffer）和长期记忆库（MemoryVault）
    - 每轮发言：写缓冲，按重要性决定是否写记忆库，然后落盘
    - 拼装上下文、统计摘要、导入导出

    存储通过 Storage 端口注入（文件 / 内存 / 其他实现均可）。
    """

    def __init__(
        self,
        storage: Optional[Storage] = None,
        config: Optional[MemorySettings] = None,
        clock=time.time,
    ):
        """初始化记忆管理器。

        参数:
            storage: 存储端口实现（默认内存存储）
            config: MemorySettings 配置（来自 BotSettings.memory）
            clock: 时间来源（记录时间戳和检索的新近度加分共用）
        """
        self.storage: Storage = storage if storage is not None else InMemoryStorage()
        self.config = config or MemorySettings()
        self.clock = clock
        self.buffer = MemoryBuffer(self.config.buffer_capacity)
        self.vault = MemoryVault(
            hard_cap=self.config.vault_hard_cap,
            soft_cap=self.config.vault_soft_cap,
            threshold=self.config.significance_threshold,
            prefer_recent=self.config.evict_prefer_recent,
            clock=clock,
        )
        self.retriever = MemoryRetriever(self.vault.records, clock=clock)
        self.assembler = ContextAssembler(
            self.buffer,
            self.vault,
            self.retriever,
            buffer_entries=self.config.context_buffer_entries,
            memory_limit=self.config.context_memory_limit,
            min_significance=self.config.context_min_significance,
            topic_window=self.config.topic_window,
            pattern_window=self.config.pattern_window,
        )
        self.initialized = False
        self._init_lock = threading.Lock()

    # ================= 启动加载 =================

    def initialize(self) -> bool:
        """从存储加载缓冲和记忆库（可重复调用，只加载一次）。

        返回:
            是否成功加载；失败时保持空状态继续运行
        """
        with self._init_lock:
            if self.initialized:
                return True
            try:
                records = self._parse_records(self.storage.load(VAULT_KEY))
                entries = [BufferEntry.from_dict(item) for item in self.storage.load(BUFFER_KEY)]
            except Exception as e:
                logger.warning("记忆加载失败，使用空状态: %s", e)
                self.initialized = True
                return False

            self.vault.extend(records)
            self.buffer.replace(entries)
            self.initialized = True

        logger.info("loaded %s memories, %s buffer entries", len(self.vault), len(self.buffer))
        return True

    @staticmethod
    def _parse_records(items: List[Dict[str, Any]]) -> List[MemoryRecord]:
        records = []
        for item in items:
            record = MemoryRecord.from_dict(item)
            if record is not None:
                records.append(record)
        return records

    # ================= 持久化 =================

    def _save(self, key: str, items: List[Dict[str, Any]]) -> bool:
        try:
            return bool(self.storage.save(key, items))
        except Exception as e:
            logger.warning("保存 %s 失败: %s", key, e)
            return False

    def save(self) -> bool:
        """把当前缓冲和记忆库写入存储（写失败不影响内存状态）。"""
        vault_ok = self._save(VAULT_KEY, self.vault.to_list())
        buffer_ok = self._save(BUFFER_KEY, self.buffer.to_list())
        return vault_ok and buffer_ok

    async def async_save(self) -> bool:
        """save 的异步版本：在事件循环里取快照，写入放到 IO 线程池。"""
        vault_items = self.vault.to_list()
        buffer_items = self.buffer.to_list()
        vault_ok = await run_io(self._save, VAULT_KEY, vault_items)
        buffer_ok = await run_io(self._save, BUFFER_KEY, buffer_items)
        return vault_ok and buffer_ok

    # ================= 每轮写入 =================

    def _apply_turn(self, role: Any, content: Any, emotion: Any, persona: Any) -> Optional[MemoryRecord]:
        utterance = Utterance(
            text=content if isinstance(content, str) else "",
            role=role if role in ("user", "assistant") else "user",
            persona=persona or "",
            emotion=emotion if emotion in EMOTION_TAGS else DEFAULT_EMOTION,
            ts=self.clock(),
        )

        self.buffer.append(BufferEntry.from_utterance(utterance))
        if not utterance.text:
            return None
        return self.vault.insert(
            utterance.text,
            utterance.emotion,
            role=utterance.role,
            persona=utterance.persona,
        )

    def record_turn(
        self,
        role: str,
        content: str,
        emotion: str = DEFAULT_EMOTION,
        persona: str = "",
    ) -> Optional[MemoryRecord]:
        """记录一轮发言：总是写缓冲，重要时再写记忆库。

        返回:
            写入记忆库的 MemoryRecord；不够重要时返回 None
        """
        record = self._apply_turn(role, content, emotion, persona)
        self.save()
        return record

    async def async_record_turn(
        self,
        role: str,
        content: str,
        emotion: str = DEFAULT_EMOTION,
        persona: str = "",
    ) -> Optional[MemoryRecord]:
        """record_turn 的异步版本（先改内存，再在线程池里落盘）。"""
        record = self._apply_turn(role, content, emotion, persona)
        await self.async_save()
        return record

    def clear_session(self) -> None:
        """清空短期缓冲（长期记忆保留）。"""
        self.buffer.clear()
        self.save()
        logger.info("memory buffer cleared")

    async def async_clear_session(self) -> None:
        self.buffer.clear()
        await self.async_save()
        logger.info("memory buffer cleared")

    # ================= 读取 =================

    def build_context(self) -> str:
        return self.assembler.assemble()

    def search(
        self,
        query: str,
        *,
        limit: int = 5,
        min_significance: int = 1,
        emotion_filter: Optional[str] = None,
    ) -> List[MemoryRecord]:
        return self.retriever.search(
            query,
            limit=limit,
            min_significance=min_significance,
            emotion_filter=emotion_filter,
        )

    def summarize(self) -> Dict[str, Any]:
        """记忆摘要（用于界面展示 / 调试）。"""
        records = self.vault.records()
        newest = max((r.ts for r in records), default=None)
        return {
            "total_memories": len(records),
            "recent_count": len(self.buffer),
            "current_topics": current_topics(self.buffer.tail(self.config.topic_window)),
            "top_emotions": [
                {"emotion": emotion, "count": count} for emotion, count in top_emotions(records, 5)
            ],
            "last_updated": newest,
        }

    # ================= 导入导出 =================

    def export_state(self) -> Dict[str, Any]:
        return {
            "memories": self.vault.to_list(),
            "buffer": self.buffer.to_list(),
            "exported_at": self.clock(),
        }

    def import_state(self, bundle: Any) -> int:
        """导入备份：记忆追加到现有记忆后面，缓冲整体替换。

        返回:
            实际导入的记忆条数
        """
        if not isinstance(bundle, dict):
            logger.warning("导入数据不是对象，已忽略")
            return 0
        imported = self._apply_import(bundle)
        self.save()
        logger.info("imported %s memories", imported)
        return imported

    async def async_import_state(self, bundle: Any) -> int:
        if not isinstance(bundle, dict):
            logger.warning("导入数据不是对象，已忽略")
            return 0
        imported = self._apply_import(bundle)
        await self.async_save()
        logger.info("imported %s memories", imported)
        return imported

    def _apply_import(self, bundle: Dict[str, Any]) -> int:
        imported = 0
        memories = bundle.get("memories")
        if isinstance(memories, list):
            items = [item for item in memories if isinstance(item, dict)]
            imported = self.vault.extend(self._parse_records(items))

        buffer = bundle.get("buffer")
        if isinstance(buffer, list):
            self.buffer.replace(BufferEntry.from_dict(item) for item in buffer if isinstance(item, dict))
        return imported
