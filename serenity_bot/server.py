"""WebSocket Server 启动封装。

这里仅负责：创建共享服务，开 websockets server，并把连接交给 handler.handle_message。
"""

from __future__ import annotations

import asyncio
import logging

import websockets

from .handler import handle_message
from .services import BotServices
from .settings import BotSettings

logger = logging.getLogger(__name__)


async def run_server(settings: BotSettings) -> None:
    """启动 WebSocket Server，并永久阻塞运行。"""
    logger.info("Serenity 启动中 ws://%s:%s", settings.host, settings.port)

    # 所有连接共用一套服务（一个记忆库）
    services = BotServices.from_settings(settings)

    async def _handler(ws):
        await handle_message(ws, settings, services)

    async with websockets.serve(_handler, settings.host, settings.port):
        await asyncio.Future()
