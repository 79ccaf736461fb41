"""配置模块。

所有配置集中在 BotSettings 中，从 config/bot_settings.json 加载。
提供嵌套的 MemorySettings 用于记忆模块配置。
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemorySettings:
    """记忆模块配置（嵌套在 BotSettings 中）。"""
    buffer_capacity: int = 10  # 短期缓冲最大条数
    vault_hard_cap: int = 100  # 长期记忆上限，超过即淘汰
    vault_soft_cap: int = 80  # 淘汰后保留条数
    significance_threshold: int = 2  # 入库最低重要性
    context_buffer_entries: int = 8  # 上下文中的最近对话条数
    context_memory_limit: int = 2  # 上下文中的相关记忆条数
    context_min_significance: int = 3  # 相关记忆最低重要性
    topic_window: int = 5  # 识别当前话题看最近几条
    pattern_window: int = 20  # 情绪模式看最近几条记忆
    evict_prefer_recent: bool = False  # 同分淘汰时保留较新的（默认按插入顺序保留较旧的）


@dataclass(frozen=True)
class BotSettings:
    """运行时配置（从 JSON 加载）。"""
    host: str = "127.0.0.1"
    port: int = 8765

    # 推理服务（Ollama）
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3"
    temperature: float = 0.82
    top_p: float = 0.92
    max_tokens: int = 400

    # Persona
    default_persona: str = "Dr. Elara"

    # 情绪识别：同义词是否按词边界匹配
    emotion_word_boundaries: bool = False

    # Memory（记忆模块配置）
    data_dir: str = "serenity_bot/memory_data"
    memory: MemorySettings = field(default_factory=MemorySettings)

    # Logging
    log_level: str = "INFO"

    # API reliability
    api_retry_attempts: int = 2
    api_retry_base_delay: float = 0.4
    circuit_breaker_fail_threshold: int = 3
    circuit_breaker_cooldown_seconds: int = 30


def _read_json_file(path: Path) -> dict[str, Any]:
    """读取 JSON 文件为 dict；文件不存在或内容不合法则返回空 dict。"""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except ValueError as e:
        logger.warning("配置文件 %s 解析失败，使用默认配置: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _to_bool(value: Any, default: bool) -> bool:
    """把常见输入转换为布尔值。"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "y", "on"}:
            return True
        if lowered in {"false", "0", "no", "n", "off"}:
            return False
    return default


def load_settings(config_path: Optional[str] = None) -> BotSettings:
    """加载配置：仅从 JSON 配置文件读取，缺失项用默认值。"""
    config: dict[str, Any] = {}
    if config_path:
        config = _read_json_file(Path(config_path))

    memory_config = config.get("memory")
    if not isinstance(memory_config, dict):
        memory_config = {}

    def pick(key: str, default: Any) -> Any:
        return config.get(key, default)

    def pick_int(key: str, default: int, source: Optional[dict] = None) -> int:
        try:
            val = (config if source is None else source).get(key)
            return int(val) if val is not None else default
        except Exception:
            return default

    def pick_float(key: str, default: float) -> float:
        try:
            val = config.get(key)
            return float(val) if val is not None else default
        except Exception:
            return default

    def pick_bool(key: str, default: bool, source: Optional[dict] = None) -> bool:
        return _to_bool((config if source is None else source).get(key, default), default)

    # 记忆模块配置
    defaults = MemorySettings()
    vault_hard_cap = max(1, pick_int("vault_hard_cap", defaults.vault_hard_cap, memory_config))
    vault_soft_cap = pick_int("vault_soft_cap", defaults.vault_soft_cap, memory_config)
    if not 1 <= vault_soft_cap <= vault_hard_cap:
        logger.warning("vault_soft_cap=%s 不合法，改为 %s", vault_soft_cap, min(defaults.vault_soft_cap, vault_hard_cap))
        vault_soft_cap = min(defaults.vault_soft_cap, vault_hard_cap)

    memory = MemorySettings(
        buffer_capacity=max(1, pick_int("buffer_capacity", defaults.buffer_capacity, memory_config)),
        vault_hard_cap=vault_hard_cap,
        vault_soft_cap=vault_soft_cap,
        significance_threshold=max(2, pick_int("significance_threshold", defaults.significance_threshold, memory_config)),
        context_buffer_entries=max(0, pick_int("context_buffer_entries", defaults.context_buffer_entries, memory_config)),
        context_memory_limit=max(0, pick_int("context_memory_limit", defaults.context_memory_limit, memory_config)),
        context_min_significance=pick_int("context_min_significance", defaults.context_min_significance, memory_config),
        topic_window=max(0, pick_int("topic_window", defaults.topic_window, memory_config)),
        pattern_window=max(0, pick_int("pattern_window", defaults.pattern_window, memory_config)),
        evict_prefer_recent=pick_bool("evict_prefer_recent", defaults.evict_prefer_recent, memory_config),
    )

    log_level = str(pick("log_level", "INFO")).upper().strip() or "INFO"

    return BotSettings(
        host=str(pick("host", BotSettings.host)),
        port=pick_int("port", BotSettings.port),
        ollama_base_url=str(pick("ollama_base_url", BotSettings.ollama_base_url)).rstrip("/"),
        ollama_model=str(pick("ollama_model", BotSettings.ollama_model)),
        temperature=pick_float("temperature", BotSettings.temperature),
        top_p=pick_float("top_p", BotSettings.top_p),
        max_tokens=pick_int("max_tokens", BotSettings.max_tokens),
        default_persona=str(pick("default_persona", BotSettings.default_persona)),
        emotion_word_boundaries=pick_bool("emotion_word_boundaries", False),
        data_dir=str(pick("data_dir", BotSettings.data_dir)),
        memory=memory,
        log_level=log_level,
        api_retry_attempts=pick_int("api_retry_attempts", BotSettings.api_retry_attempts),
        api_retry_base_delay=pick_float("api_retry_base_delay", BotSettings.api_retry_base_delay),
        circuit_breaker_fail_threshold=pick_int("circuit_breaker_fail_threshold", BotSettings.circuit_breaker_fail_threshold),
        circuit_breaker_cooldown_seconds=pick_int("circuit_breaker_cooldown_seconds", BotSettings.circuit_breaker_cooldown_seconds),
    )
