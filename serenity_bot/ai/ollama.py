"""Ollama 本地模型封装。

生成走 Ollama 的 OpenAI 兼容接口（/v1），模型列表走原生接口 /api/tags。
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List

import httpx
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "*concerned* I'm sorry, I'm having trouble responding right now. Could you try again in a moment?"
BUSY_REPLY = "*thoughtful* I need a short moment to collect my thoughts. Please try again shortly."


@dataclass
class OllamaChat:
    """Ollama 文本生成客户端。"""

    base_url: str = "http://localhost:11434"
    model: str = "llama3"
    temperature: float = 0.82
    top_p: float = 0.92
    max_tokens: int = 400
    retry_attempts: int = 2
    retry_base_delay: float = 0.4
    fail_threshold: int = 3
    cooldown_seconds: int = 30
    timeout: float = 60.0

    _fail_count: int = field(default=0, init=False)
    _circuit_open_until: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        # Ollama 不校验 key，但 SDK 要求非空
        self._client = AsyncOpenAI(api_key="ollama", base_url=f"{self.base_url}/v1", timeout=self.timeout)

    def _is_circuit_open(self) -> bool:
        return time.time() < self._circuit_open_until

    def _on_success(self) -> None:
        self._fail_count = 0

    def _on_failure(self) -> None:
        self._fail_count += 1
        if self._fail_count >= self.fail_threshold:
            self._circuit_open_until = time.time() + self.cooldown_seconds
            logger.warning("ollama circuit open for %ss", self.cooldown_seconds)

    async def generate(self, prompt: str) -> str:
        """单轮生成。

        参数:
            prompt: 完整 prompt（人设 + 上下文 + 当前消息）

        返回:
            模型回复文本；失败时返回固定的道歉回复
        """
        if self._is_circuit_open():
            return BUSY_REPLY

        attempts = max(1, self.retry_attempts + 1)
        logger.info("[ollama] req model=%s chars=%s", self.model, len(prompt))
        for i in range(attempts):
            try:
                response = await self._client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    stream=False,
                    temperature=self.temperature,
                    top_p=self.top_p,
                    max_tokens=self.max_tokens,
                )
                self._on_success()
                reply = (response.choices[0].message.content or "").strip()
                logger.info("[ollama] resp chars=%s", len(reply))
                return reply or FALLBACK_REPLY
            except Exception as e:
                self._on_failure()
                if i == attempts - 1:
                    logger.error("ollama error after retries: %s", e)
                    return FALLBACK_REPLY
                await asyncio.sleep(self.retry_base_delay * (2**i))

        return FALLBACK_REPLY

    async def list_models(self) -> List[str]:
        """列出本地已安装的模型名；服务不可用时返回空列表。"""
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                resp = await client.get(f"{self.base_url}/api/tags")
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("获取 ollama 模型列表失败: %s", e)
            return []

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            return []
        return [m["name"] for m in models if isinstance(m, dict) and isinstance(m.get("name"), str)]
