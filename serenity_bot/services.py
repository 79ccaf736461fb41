"""服务容器。

统一管理推理服务和陪伴核心的初始化与注入。
从 BotSettings 读取配置，创建并管理所有服务实例。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .ai import OllamaChat
from .companion import Companion
from .memory.storage import Storage
from .settings import BotSettings

logger = logging.getLogger(__name__)


@dataclass
class BotServices:
    """服务容器。

    职责：
    - 统一管理推理服务实例
    - 统一管理陪伴核心（情绪 + 形象 + 记忆）
    - 提供服务初始化入口

    外部通过 services 调用，示例：
    - services.chat.generate(prompt)
    - services.companion.record_turn(...)
    """

    chat: OllamaChat
    companion: Companion

    @classmethod
    def from_settings(cls, settings: BotSettings, storage: Optional[Storage] = None) -> "BotServices":
        """从配置创建所有服务。

        参数:
            settings: BotSettings 实例
            storage: 记忆存储（可选，默认写到 settings.data_dir）

        返回:
            BotServices 实例
        """
        logger.info("正在初始化服务...")

        chat = OllamaChat(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            temperature=settings.temperature,
            top_p=settings.top_p,
            max_tokens=settings.max_tokens,
            retry_attempts=settings.api_retry_attempts,
            retry_base_delay=settings.api_retry_base_delay,
            fail_threshold=settings.circuit_breaker_fail_threshold,
            cooldown_seconds=settings.circuit_breaker_cooldown_seconds,
        )
        companion = Companion.from_settings(settings, storage=storage)

        logger.info("服务初始化完成 model=%s persona=%s", settings.ollama_model, companion.default_persona)
        return cls(chat=chat, companion=companion)
