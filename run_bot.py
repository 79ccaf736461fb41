"""启动入口。

本项目作为陪伴前端的 WebSocket Server：
- 前端连接到 ws://127.0.0.1:8765/（见 config/bot_settings.json）
- 本脚本启动 server 并把请求交给 serenity_bot 处理
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from serenity_bot.logging import setup_logger
from serenity_bot.server import run_server
from serenity_bot.settings import load_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """读取配置并启动 WebSocket Server。"""
    default_config = Path(__file__).resolve().parent / "config" / "bot_settings.json"
    settings = load_settings(str(default_config))
    setup_logger(settings.log_level)
    if not default_config.exists():
        logger.warning("缺少配置文件 %s，使用默认配置（可复制 config/bot_settings.example.json）", default_config)

    asyncio.run(run_server(settings))


if __name__ == "__main__":
    main()
