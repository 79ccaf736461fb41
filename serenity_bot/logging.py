"""日志配置模块。

统一配置项目日志，使用 logger 而非 print。
"""

import logging
import sys
from typing import Union

# 日志格式
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """初始化日志配置。

    参数:
        level: 日志级别（int 或 "DEBUG"/"INFO" 等名称），未知名称按 INFO

    返回:
        已配置的根 logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # 避免重复添加处理器
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    # 第三方库的请求日志太吵
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    return root
