"""业务处理器。

按请求类型拆分业务逻辑：
- chat.py: 对话（情绪识别 -> 记忆 -> 推理 -> 形象）
- memory.py: 记忆管理（清空 / 摘要 / 导出 / 导入）
- avatar.py: 形象与模型查询

每个处理器实现 handle(ctx) 方法，返回是否已处理。
"""

from typing import Protocol

from ..router import BotContext


class Handler(Protocol):
    """处理器协议。"""

    async def handle(self, ctx: BotContext) -> bool:
        """处理请求，返回是否已处理。"""
        ...


__all__ = ["Handler"]
