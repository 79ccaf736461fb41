"""情绪提取。

职责：
- EmotionExtractor.classify: 把一句话（可带上下文）归到封闭情绪词汇表中的一个标签
- 助手回复的补充识别：动作片段、分段、回复兜底短语
- resolve_tag: 任意输入 -> 合法标签（统一的别名解析入口）

级联顺序（先命中先返回）：
1. 敏感话题规则（上下文 + 文本）
2. 星号动作
3. 同义词子串扫描
4. 感叹词 -> excited
5. 惊讶词 -> surprised
6. 问句 -> thoughtful
7. neutral
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .lexicon import (
    ACTION_EMOTIONS,
    CRISIS_RULES,
    DEFAULT_EMOTION,
    EMOTION_ALIASES,
    EMOTION_TAGS,
    EXCLAMATION_PHRASES,
    PRESENTATION_ALIASES,
    QUESTION_PHRASES,
    REPLY_PATTERNS,
    SURPRISE_PHRASES,
    CrisisRule,
)

logger = logging.getLogger(__name__)

_ASTERISK_RE = re.compile(r"\*([^*]+)\*")
# 富提取：*动作* / "台词" / (动作)
_RICH_ACTION_RE = re.compile(r"\*([^*]+)\*|\"([^\"]+)\"|\(([^)]+)\)")
# 分段：动作用 *...* 或 (...)，台词用 "..."
_SEGMENT_SPLIT_RE = re.compile(r"(\*.*?\*|\(.*?\)|\"[^\"]+\")")
_REPLY_RES = tuple((re.compile(pattern), tag) for pattern, tag in REPLY_PATTERNS)


def contains_any(text: str, keys: Iterable[str], *, whole_words: bool = False) -> bool:
    """文本是否包含 keys 中任意一个。

    默认是纯子串匹配（"mad" 也会命中 "made"）；whole_words=True 时要求词边界。
    所有关键词判断都走这里。
    """
    for key in keys:
        if whole_words:
            if re.search(r"(?<!\w)" + re.escape(key) + r"(?!\w)", text):
                return True
        elif key in text:
            return True
    return False


@dataclass
class Segment:
    """回复中的一段：动作或台词。"""
    kind: str  # "action" 或 "text"
    content: str
    emotion: Optional[str] = None  # 仅动作段有值

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "content": self.content, "emotion": self.emotion}


class EmotionExtractor:
    """规则情绪分类器（纯词表，无统计模型）。"""

    def __init__(self, *, whole_words: bool = False):
        """参数:
            whole_words: 同义词/启发式短语是否按词边界匹配（默认子串匹配）
        """
        self.whole_words = whole_words

    def _contains(self, text: str, keys: Iterable[str]) -> bool:
        return contains_any(text, keys, whole_words=self.whole_words)

    def _match_crisis(self, full_context: str) -> Optional[str]:
        for rule in CRISIS_RULES:
            if self._rule_matches(rule, full_context):
                return rule.tag
        return None

    def _rule_matches(self, rule: CrisisRule, text: str) -> bool:
        # 危机词都是词根（betray / charge），始终按子串判断
        return all(contains_any(text, group) for group in rule.all_of)

    def _match_actions(self, actions: List[str]) -> Optional[str]:
        for action in actions:
            action = action.strip()
            if action in ACTION_EMOTIONS:
                return ACTION_EMOTIONS[action]
            for word in action.split():
                if word in ACTION_EMOTIONS:
                    return ACTION_EMOTIONS[word]
        return None

    def _match_alias(self, text: str) -> Optional[str]:
        for keyword, tag in EMOTION_ALIASES.items():
            if self._contains(text, (keyword,)):
                return tag
        return None

    def classify(self, text: Any, context: Any = "") -> str:
        """识别文本情绪，总是返回词汇表中的标签。

        参数:
            text: 待识别文本（非字符串一律视为 neutral）
            context: 附加上下文，只参与敏感话题规则

        返回:
            情绪标签
        """
        if not text or not isinstance(text, str):
            return DEFAULT_EMOTION
        if not isinstance(context, str):
            context = ""

        lower_text = text.lower()
        full_context = f"{context} {lower_text}".lower()

        # 1) 敏感话题
        tag = self._match_crisis(full_context)
        if tag:
            logger.debug("emotion crisis -> %s", tag)
            return tag

        # 2) 星号动作
        tag = self._match_actions(extract_actions(lower_text))
        if tag:
            logger.debug("emotion action -> %s", tag)
            return tag

        # 3) 同义词
        tag = self._match_alias(lower_text)
        if tag:
            return tag

        # 4) ~ 6) 启发式
        if self._contains(lower_text, EXCLAMATION_PHRASES):
            return "excited"
        if self._contains(lower_text, SURPRISE_PHRASES):
            return "surprised"
        # "?" 不是单词，始终按子串判断
        if "?" in lower_text or self._contains(lower_text, QUESTION_PHRASES):
            return "thoughtful"

        return DEFAULT_EMOTION

    def classify_reply(self, text: Any, context: Any = "") -> str:
        """识别助手回复的情绪：级联结果为 neutral 时再看回复专用短语。"""
        tag = self.classify(text, context)
        if tag != DEFAULT_EMOTION or not isinstance(text, str):
            return tag

        content = text.lower().strip()
        for pattern, reply_tag in _REPLY_RES:
            if pattern.search(content):
                return reply_tag
        return tag

    def classify_action(self, action: str) -> str:
        """把单个动作（不带星号）当作 *动作* 识别。"""
        return self.classify(f"*{action}*")

    def extract_emotions(self, text: Any) -> List[str]:
        """回复中每个动作/台词片段各自的情绪（按出现顺序）。"""
        if not text or not isinstance(text, str):
            return []
        return [self.classify_action(action) for action in extract_actions(text, rich=True)]

    def reply_emotion(self, text: Any) -> str:
        """回复的主情绪：第一个动作片段的情绪；没有动作片段时按整句识别。"""
        emotions = self.extract_emotions(text)
        if emotions:
            return emotions[0]
        return self.classify_reply(text)

    def split_segments(self, text: Any) -> List[Segment]:
        """把回复拆成有序的动作段 / 台词段。

        动作段：*...* 或 (...)，附带识别出的情绪
        台词段：其余文本，去掉包裹的引号
        """
        if not text or not isinstance(text, str):
            return []

        segments: List[Segment] = []
        for part in _SEGMENT_SPLIT_RE.split(text):
            clean = part.strip()
            if not clean:
                continue

            is_action = (clean.startswith("*") and clean.endswith("*")) or (
                clean.startswith("(") and clean.endswith(")")
            )
            if is_action and len(clean) > 1:
                content = clean[1:-1].strip()
                if content:
                    segments.append(Segment("action", content, self.classify_action(content)))
                continue

            if len(clean) > 1 and clean.startswith('"') and clean.endswith('"'):
                clean = clean[1:-1].strip()
            if clean:
                segments.append(Segment("text", clean))
        return segments

    def resolve_tag(self, value: Any) -> str:
        """任意输入 -> 合法标签。

        - 词汇表成员：原样返回
        - 已知别名：映射到规范标签
        - 其他字符串：走 classify
        - 非字符串 / 空：neutral
        """
        if not value or not isinstance(value, str):
            return DEFAULT_EMOTION

        lowered = value.strip().lower()
        if lowered in EMOTION_TAGS:
            return lowered
        if lowered in PRESENTATION_ALIASES:
            return PRESENTATION_ALIASES[lowered]
        return self.classify(lowered)


def extract_actions(text: str, *, rich: bool = False) -> List[str]:
    """提取动作片段（不含定界符）。

    rich=False 只认 *...*；rich=True 同时认 "..." 和 (...)。
    """
    if not rich:
        return _ASTERISK_RE.findall(text)

    actions = []
    for match in _RICH_ACTION_RE.finditer(text):
        action = (match.group(1) or match.group(2) or match.group(3)).strip()
        if action:
            actions.append(action)
    return actions


_default_extractor = EmotionExtractor()


def classify_emotion(text: Any, context: Any = "") -> str:
    """模块级便捷函数（默认子串匹配）。"""
    return _default_extractor.classify(text, context)
