"""陪伴核心（对外边界）。

把情绪识别、形象呈现、记忆管理组合成一个对象，
websocket 处理层和测试都只通过它调用核心功能。
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .emotion import AvatarStatePresenter, EmotionExtractor, PresentationDescriptor, Segment
from .emotion.lexicon import DEFAULT_EMOTION
from .memory import MemoryManager, MemoryRecord, build_chat_prompt
from .memory.storage import JsonFileStorage, Storage
from .settings import BotSettings

logger = logging.getLogger(__name__)


class Companion:
    """对话陪伴核心。

    - classify_emotion: 文本 -> 情绪标签
    - present_avatar: persona + 情绪 -> 呈现描述
    - record_turn / build_context / summarize / clear_session
    - export_state / import_state
    """

    def __init__(
        self,
        memory: Optional[MemoryManager] = None,
        extractor: Optional[EmotionExtractor] = None,
        presenter: Optional[AvatarStatePresenter] = None,
        default_persona: Optional[str] = None,
    ):
        self.extractor = extractor or EmotionExtractor()
        if presenter is None:
            presenter = AvatarStatePresenter(extractor=self.extractor)
            if default_persona:
                presenter.default_persona = default_persona
        self.presenter = presenter
        self.memory = memory or MemoryManager()
        self.memory.initialize()

    @classmethod
    def from_settings(cls, settings: BotSettings, storage: Optional[Storage] = None) -> "Companion":
        """按配置创建（默认把记忆写到 settings.data_dir）。"""
        extractor = EmotionExtractor(whole_words=settings.emotion_word_boundaries)
        presenter = AvatarStatePresenter(default_persona=settings.default_persona, extractor=extractor)
        memory = MemoryManager(
            storage=storage if storage is not None else JsonFileStorage(settings.data_dir),
            config=settings.memory,
        )
        return cls(memory=memory, extractor=extractor, presenter=presenter)

    @property
    def default_persona(self) -> str:
        return self.presenter.default_persona

    # ================= 情绪 / 呈现 =================

    def classify_emotion(self, text: Any, context: Any = "") -> str:
        return self.extractor.classify(text, context)

    def present_avatar(self, persona: Any, emotion: Any) -> PresentationDescriptor:
        return self.presenter.present(persona, emotion)

    def reply_emotion(self, text: Any) -> str:
        return self.extractor.reply_emotion(text)

    def split_segments(self, text: Any) -> List[Segment]:
        return self.extractor.split_segments(text)

    def resolve_persona(self, persona: Any) -> str:
        """未知 persona 统一落到默认 persona。"""
        if isinstance(persona, str) and persona in self.presenter.personas:
            return persona
        return self.default_persona

    # ================= 记忆 =================

    def record_turn(
        self,
        role: str,
        content: str,
        emotion: str = DEFAULT_EMOTION,
        persona: str = "",
    ) -> Optional[MemoryRecord]:
        return self.memory.record_turn(role, content, self.extractor.resolve_tag(emotion), persona)

    async def async_record_turn(
        self,
        role: str,
        content: str,
        emotion: str = DEFAULT_EMOTION,
        persona: str = "",
    ) -> Optional[MemoryRecord]:
        """record_turn 的异步版本（落盘不阻塞事件循环）。"""
        return await self.memory.async_record_turn(role, content, self.extractor.resolve_tag(emotion), persona)

    def build_context(self) -> str:
        return self.memory.build_context()

    def build_prompt(self, persona: str, message: str) -> str:
        """当前上下文 + 人设 + 用户消息 -> 推理 prompt。"""
        return build_chat_prompt(persona, self.build_context(), message)

    def summarize(self) -> Dict[str, Any]:
        return self.memory.summarize()

    def clear_session(self) -> None:
        self.memory.clear_session()

    async def async_clear_session(self) -> None:
        await self.memory.async_clear_session()

    def export_state(self) -> Dict[str, Any]:
        return self.memory.export_state()

    def import_state(self, bundle: Any) -> int:
        return self.memory.import_state(bundle)

    async def async_import_state(self, bundle: Any) -> int:
        return await self.memory.async_import_state(bundle)
