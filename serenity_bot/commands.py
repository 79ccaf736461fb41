from __future__ import annotations

"""命令装配（决定优先级）。

build_commands() 返回一个按优先级排列的命令列表：
- 从上到下匹配，先命中先执行
- 都没命中时 dispatch 回一帧 error
"""

from typing import List

from .router import (
    Command,
    dispatch,
    message_type,
)

from .handlers.chat import ChatHandler
from .handlers.memory import MemoryHandler
from .handlers.avatar import AvatarHandler

# 实例化处理器
_chat_handler = ChatHandler()
_memory_handler = MemoryHandler()
_avatar_handler = AvatarHandler()


def build_commands() -> List[Command]:
    """命令匹配顺序：从上到下，先匹配先执行。"""

    commands: List[Command] = []

    # 1) 对话
    commands.append(message_type("chat", "chat", _chat_handler.handle))

    # 2) 记忆管理
    commands.append(message_type("clear", "clear", _memory_handler.clear))
    commands.append(message_type("summary", "summary", _memory_handler.summary))
    commands.append(message_type("export", "export", _memory_handler.export))
    commands.append(message_type("import", "import", _memory_handler.import_bundle))

    # 3) 形象 / 模型
    commands.append(message_type("avatar", "avatar", _avatar_handler.avatar))
    commands.append(message_type("models", "models", _avatar_handler.models))

    return commands


__all__ = ["build_commands", "dispatch"]
