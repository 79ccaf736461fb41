"""情绪模块。

本模块提供：
- lexicon: 情绪词表（敏感话题规则 / 星号动作 / 同义词）
- EmotionExtractor: 规则情绪识别（优先级级联）
- AvatarStatePresenter: persona + 情绪 -> 呈现描述
"""

from .lexicon import EMOTION_TAGS, DEFAULT_EMOTION
from .extractor import EmotionExtractor, Segment, classify_emotion, contains_any, extract_actions
from .presenter import (
    AvatarStatePresenter,
    PersonaProfile,
    PresentationDescriptor,
    emotion_duration_ms,
    media_path,
)

__all__ = [
    "EMOTION_TAGS",
    "DEFAULT_EMOTION",
    "EmotionExtractor",
    "Segment",
    "classify_emotion",
    "contains_any",
    "extract_actions",
    "AvatarStatePresenter",
    "PersonaProfile",
    "PresentationDescriptor",
    "emotion_duration_ms",
    "media_path",
]
