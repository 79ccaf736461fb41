from __future__ import annotations

"""消息处理主循环。

职责：
- 接收前端推送的请求帧（JSON）
- 构建 BotContext（把常用字段挂上去）
- 调用 commands + router 进行"按优先级匹配并执行"

注意：
- 以后加新请求类型，优先改 commands.py，而不是在这里堆 if。
"""

import json
import logging
from typing import Optional

import websockets

from .settings import BotSettings
from .router import BotContext, dispatch
from .commands import build_commands
from .services import BotServices

logger = logging.getLogger(__name__)


async def handle_message(websocket, settings: BotSettings, services: Optional[BotServices] = None) -> None:
    """处理单条 WebSocket 连接上的所有请求。

    services 由 server 统一创建并在连接间共享；单独调用时按配置现建。
    """
    logger.info("连接成功")

    if services is None:
        services = BotServices.from_settings(settings)

    # commands：按顺序匹配，先命中先执行
    commands = build_commands()

    try:
        async for message in websocket:
            try:
                event = json.loads(message)
            except ValueError:
                logger.warning("收到非法 JSON len=%s", len(message or ""))
                await websocket.send(json.dumps({"type": "error", "message": "invalid JSON"}))
                continue

            if not isinstance(event, dict):
                await websocket.send(json.dumps({"type": "error", "message": "request must be an object"}))
                continue

            ctx = BotContext.from_event(
                websocket=websocket,
                event=event,
                settings=settings,
                services=services,
            )
            logger.info("收到请求 type=%s len=%s", ctx.msg_type, len(ctx.text))

            # 交给路由系统：根据命令优先级做匹配与执行
            await dispatch(commands, ctx)

    except websockets.exceptions.ConnectionClosed:
        logger.warning("连接断开")
