"""命令路由与上下文（扩展功能的核心）。

这套机制的目标：
- 把"很多 if/elif"变成"按优先级排列的命令列表"
- 以后新增功能：只需要添加一个 Command（见 commands.py）

关键概念：
- BotContext：一帧请求的"上下文"，包含解析后的字段、服务、回包方法
- Command：匹配(match) + 执行(run) 的可插拔单元
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Protocol

from .settings import BotSettings

logger = logging.getLogger(__name__)


@dataclass
class BotContext:
    """单帧请求的统一上下文。

用途：
- 命令匹配时，不需要反复从 event 字典里取字段
- 命令执行时，统一用 send_json/send_error 回包
    """
    websocket: Any
    event: dict[str, Any]
    settings: BotSettings
    services: Any  # BotServices

    msg_type: str = ""
    text: str = ""
    persona: str = ""

    @classmethod
    def from_event(
        cls,
        *,
        websocket: Any,
        event: dict[str, Any],
        settings: BotSettings,
        services: Any,
    ) -> "BotContext":
        """把原始 event 转成 BotContext，并预计算常用字段。"""
        ctx = cls(websocket=websocket, event=event, settings=settings, services=services)
        msg_type = event.get("type")
        ctx.msg_type = msg_type.strip().lower() if isinstance(msg_type, str) else ""
        text = event.get("text")
        ctx.text = text.strip() if isinstance(text, str) else ""
        persona = event.get("persona")
        ctx.persona = persona if isinstance(persona, str) else ""
        return ctx

    async def send_json(self, payload: dict[str, Any]) -> None:
        """发送一帧 JSON。"""
        await self.websocket.send(json.dumps(payload, ensure_ascii=False))

    async def send_error(self, message: str) -> None:
        await self.send_json({"type": "error", "message": message})


class Command(Protocol):
    """可插拔命令协议：match 命中后 run 执行。"""
    name: str

    def match(self, ctx: BotContext) -> bool: ...

    async def run(self, ctx: BotContext) -> bool:
        """返回 True 表示已处理，停止后续匹配。"""


RunFunc = Callable[[BotContext], Awaitable[None]]
MatchFunc = Callable[[BotContext], bool]


@dataclass
class FunctionCommand:
    """把两个函数(match/run) 包装成 Command，方便快速定义命令。"""
    name: str
    _match: MatchFunc
    _run: RunFunc

    def match(self, ctx: BotContext) -> bool:
        return self._match(ctx)

    async def run(self, ctx: BotContext) -> bool:
        await self._run(ctx)
        return True


def message_type(name: str, msg_type: str, run: RunFunc) -> Command:
    """构造：请求 type 等于 msg_type 时触发的命令。"""
    def _match(ctx: BotContext) -> bool:
        return ctx.msg_type == msg_type

    return FunctionCommand(name=name, _match=_match, _run=run)


async def dispatch(commands: Iterable[Command], ctx: BotContext) -> bool:
    """按顺序匹配命令并执行；有命令返回 True 即停止。

    没有命令命中时回一帧 error。
    """
    for cmd in commands:
        if cmd.match(ctx):
            handled = await cmd.run(ctx)
            if handled:
                return True

    logger.info("unknown request type=%r", ctx.msg_type)
    await ctx.send_error(f"unknown message type: {ctx.msg_type or '<missing>'}")
    return False
