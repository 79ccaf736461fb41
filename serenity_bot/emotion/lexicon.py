"""情绪词表（纯数据）。

三张有序表，顺序即优先级：
- CRISIS_RULES: 敏感话题规则（创伤、虐待、法律等），优先于所有词汇匹配
- ACTION_EMOTIONS: 星号动作（*squeals*）-> 情绪
- EMOTION_ALIASES: 普通同义词 -> 情绪，按声明顺序做子串匹配，先命中先返回

另外还有感叹词 / 惊讶词 / 提问词三组启发式短语，以及话题关键词。
所有表的键都是小写。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

# 封闭情绪词汇表：任何代码路径都只能返回这里的值
EMOTION_TAGS: Tuple[str, ...] = (
    "neutral",
    "joyful",
    "sad",
    "angry",
    "scared",
    "surprised",
    "thoughtful",
    "concerned",
    "excited",
    "smile",
    "curious",
    "empathetic",
    "explain",
    "revulsed",
    "shocked",
    "fearful",
    "thinking",
    "laugh",
)

DEFAULT_EMOTION = "neutral"


@dataclass(frozen=True)
class CrisisRule:
    """敏感话题规则。

    all_of 中每一组至少命中一个词，规则才成立。
    例：(("family",), ("betray", "uncle")) 表示 family 且 (betray 或 uncle)。
    """
    tag: str
    all_of: Tuple[Tuple[str, ...], ...]


# 按顺序判断，只有第一条命中的规则生效
CRISIS_RULES: Tuple[CrisisRule, ...] = (
    CrisisRule("empathetic", (("ptsd", "trauma", "traumatic"),)),
    CrisisRule("concerned", (("abuse", "abusive", "assault"),)),
    CrisisRule("sad", (("family",), ("betray", "uncle"))),
    CrisisRule("shocked", (("police", "charge", "legal"),)),
    CrisisRule("angry", (("thief", "steal", "theft"),)),
    CrisisRule("empathetic", (("victim", "hurt", "pain"),)),
    CrisisRule("concerned", (("manipulate", "manipulation"),)),
)

# 星号动作 -> 情绪（键不带星号）
ACTION_EMOTIONS: Dict[str, str] = {
    # excitement
    "squeal": "excited",
    "squeal of excitement": "excited",
    "squeals": "excited",
    "bounces": "excited",
    "bounce": "excited",
    "bouncing": "excited",
    "bounces up and down": "excited",
    "bouncing up and down": "excited",
    "bouncing up and down with excitement": "excited",
    "jumps": "excited",
    "jump": "excited",
    "jumping": "excited",
    "claps": "excited",
    "clap": "excited",
    "clapping": "excited",

    # surprise / shock
    "gasp": "surprised",
    "gasps": "surprised",
    "gasping": "surprised",
    "shocked": "surprised",
    "shocking": "surprised",
    "dropping jaw in shock": "surprised",
    "jaw drop": "surprised",
    "jaw drops": "surprised",

    # sad
    "cries": "sad",
    "cry": "sad",
    "crying": "sad",
    "sob": "sad",
    "sobs": "sad",
    "sobbing": "sad",
    "frown": "sad",
    "frowning": "sad",
    "pout": "sad",
    "pouting": "sad",

    # thoughtful
    "thinks": "thoughtful",
    "think": "thoughtful",
    "thinking": "thoughtful",
    "ponders": "thoughtful",
    "ponder": "thoughtful",
    "pondering": "thoughtful",
    "sigh": "thoughtful",
    "sighs": "thoughtful",
    "sighing": "thoughtful",

    # smile / laugh
    "smiles": "smile",
    "smile": "smile",
    "smiling": "smile",
    "grins": "smile",
    "grin": "smile",
    "grinning": "smile",
    "laughs": "joyful",
    "laugh": "joyful",
    "laughing": "joyful",
    "chuckles": "joyful",
    "chuckle": "joyful",
    "chuckling": "joyful",
    "giggles": "joyful",
    "giggle": "joyful",
    "giggling": "joyful",
    "nervous smile": "smile",

    # affection
    "hug": "smile",
    "hugs": "smile",
    "hugging": "smile",
    "hugged": "smile",
    "embrace": "smile",
    "embraces": "smile",
    "embracing": "smile",
    "embraced": "smile",

    # concerned
    "worries": "concerned",
    "worry": "concerned",
    "worrying": "concerned",
    "worried": "concerned",

    # angry
    "angry": "angry",
    "angers": "angry",
    "angered": "angry",
    "angering": "angry",
    "furious": "angry",
    "fumes": "angry",
    "fuming": "angry",

    # scared
    "scared": "scared",
    "scares": "scared",
    "scaring": "scared",
    "afraid": "scared",
    "fear": "scared",
    "fears": "scared",
    "fearing": "fearful",

    # explain
    "explains": "explain",
    "explain": "explain",
    "explaining": "explain",
    "explained": "explain",

    # curious
    "curious": "curious",
    "curiously": "curious",
    "intrigued": "curious",
    "fascinated": "curious",

    # 严肃话题时的陪伴动作
    "listening carefully": "thoughtful",
    "taking notes": "thoughtful",
    "leaning forward": "concerned",
    "nodding empathetically": "empathetic",
    "making eye contact": "empathetic",
    "speaking softly": "empathetic",
    "taking a deep breath": "thoughtful",
    "checking notes": "thoughtful",
}

# 同义词 -> 情绪。顺序有语义：子串匹配时先声明的先命中。
# 与 CRISIS_RULES 重叠的词（legal/assault/hurt/pain）取危机规则的情绪，保证单词本身的分类结果一致。
EMOTION_ALIASES: Dict[str, str] = {
    # basic
    "smile": "smile", "smiles": "smile", "smiling": "smile", "grin": "smile", "grinning": "smile",
    "laugh": "joyful", "laughs": "joyful", "laughing": "joyful", "chuckle": "joyful", "chuckles": "joyful",
    "giggle": "joyful",
    "concerned": "concerned", "concern": "concerned", "worried": "concerned", "worry": "concerned",
    "anxious": "concerned", "nervous": "concerned",
    "empathetic": "empathetic", "empathy": "empathetic", "compassionate": "empathetic",
    "understanding": "empathetic",
    "sad": "sad", "sadly": "sad", "unhappy": "sad", "heartbroken": "sad", "cry": "sad", "frown": "sad",
    "frowning": "sad", "down": "sad", "depressed": "sad",
    "thoughtful": "thoughtful", "thinking": "thoughtful", "ponder": "thoughtful", "consider": "thoughtful",
    "curious": "curious", "intrigued": "curious", "fascinated": "curious", "interested": "curious",
    "surprised": "surprised", "surprise": "surprised", "shocked": "surprised", "shock": "surprised",
    "gasp": "surprised", "gasped": "surprised", "astonished": "surprised",
    "angry": "angry", "mad": "angry", "furious": "angry", "rage": "angry",
    "scared": "scared", "afraid": "scared", "fear": "scared", "fearful": "scared", "terrified": "scared",
    "disgust": "revulsed", "revulsed": "revulsed",
    "explain": "explain", "explaining": "explain", "explains": "explain",
    "excited": "excited", "thrilled": "excited", "excitement": "excited", "squeal": "excited",
    "bounces": "excited", "bounce": "excited", "bouncing": "excited", "bounced": "excited",
    "woohoo": "excited", "yay": "excited", "yippee": "excited", "wow": "excited",
    "happy": "joyful", "delighted": "joyful", "pleased": "joyful", "overjoyed": "joyful",

    # serious context
    "ptsd": "empathetic", "trauma": "empathetic", "traumatic": "empathetic",
    "abuse": "concerned", "abusive": "concerned", "abused": "concerned",
    "betray": "sad", "betrayal": "sad", "betrayed": "sad",
    "family": "concerned", "families": "concerned",
    "uncle": "concerned", "relative": "concerned", "relatives": "concerned",
    "police": "shocked", "cops": "shocked", "law": "concerned",
    "charge": "shocked", "charges": "shocked", "legal": "shocked",
    "assault": "concerned", "assaulted": "concerned", "violence": "angry",
    "thief": "angry", "steal": "angry", "stolen": "angry", "theft": "angry",
    "manipulate": "concerned", "manipulation": "concerned", "manipulative": "concerned",
    "victim": "empathetic", "victims": "empathetic", "victimized": "empathetic",
    "hurt": "empathetic", "hurting": "empathetic", "hurtful": "empathetic",
    "pain": "empathetic", "painful": "empathetic",
    "safe": "empathetic", "safety": "empathetic",
    "trust": "thoughtful", "trusted": "thoughtful", "trusting": "thoughtful",

    # affection
    "hug": "smile", "hugs": "smile", "hugging": "smile", "hugged": "smile",
    "embrace": "smile", "embraces": "smile", "embracing": "smile", "embraced": "smile",
    "pat": "smile", "pats": "smile", "patting": "smile", "patted": "smile",
    "comfort": "empathetic", "comforting": "empathetic", "comforted": "empathetic",
    "reassure": "empathetic", "reassuring": "empathetic", "reassured": "empathetic",

    # calm
    "calm": "neutral", "calmly": "neutral", "peaceful": "neutral", "relaxed": "neutral",
    "neutral": "neutral", "normal": "neutral",

    # misc
    "pout": "sad", "pouting": "sad",
    "sigh": "thoughtful", "sighed": "thoughtful", "sighing": "thoughtful",
    "whisper": "thoughtful", "whispered": "thoughtful", "whispering": "thoughtful",
}

# 感叹 -> excited
EXCLAMATION_PHRASES: Tuple[str, ...] = (
    "oh my stars", "woohoo", "yay", "yippee", "wow", "oh my goodness", "oh my gosh",
)

# 惊讶 -> surprised
SURPRISE_PHRASES: Tuple[str, ...] = ("what the", "no way", "whoa", "oh my")

# 提问 -> thoughtful（另外任何 "?" 都算）
QUESTION_PHRASES: Tuple[str, ...] = ("can you", "what is")

# 仅用于助手回复的兜底短语（级联结果为 neutral 时才看）
REPLY_PATTERNS: Tuple[Tuple[str, str], ...] = (
    (r"(i understand|i hear you|that must be|i know how you feel)", "empathetic"),
    (r"(i'm sorry|condolence|sympathy|apologize)", "concerned"),
    (r"(thank you|thanks|appreciate|grateful)", "smile"),
)

# 呈现层额外别名（不在词汇表中的常见说法）
PRESENTATION_ALIASES: Dict[str, str] = {
    "frown": "sad", "frowning": "sad", "cry": "sad", "crying": "sad", "down": "sad",
    "depressed": "sad", "unhappy": "sad", "heartbroken": "sad",
    "happy": "joyful", "giggle": "joyful", "laughing": "joyful", "chuckle": "joyful",
    "delighted": "joyful", "pleased": "joyful", "overjoyed": "joyful",
    "excitement": "excited", "bounce": "excited", "bouncing": "excited", "thrilled": "excited",
    "woohoo": "excited", "yay": "excited", "yippee": "excited",
    "surprise": "surprised", "shock": "surprised", "gasp": "surprised", "wow": "surprised",
    "astonished": "surprised", "amazed": "surprised",
    "ponder": "thoughtful", "consider": "thoughtful", "contemplative": "thoughtful",
    "smiling": "smile", "grin": "smile", "grinning": "smile", "warmly": "smile",
    "worried": "concerned", "anxious": "concerned", "trouble": "concerned", "nervous": "concerned",
    "mad": "angry", "furious": "angry", "rage": "angry",
    "afraid": "scared", "fear": "scared", "terrified": "scared",
    "explaining": "explain", "explains": "explain",
    "intrigued": "curious", "fascinated": "curious", "interested": "curious",
    "empathy": "empathetic", "compassionate": "empathetic", "understanding": "empathetic",
    "sympathetic": "empathetic",
    "calm": "neutral", "normal": "neutral", "peaceful": "neutral", "relaxed": "neutral",
    "disgust": "revulsed",
}

# 话题关键词：(任一关键词, 打上的标签)，各规则互不排斥
TOPIC_RULES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("uncle",), ("family", "uncle")),
    (("family",), ("family",)),
    (("abuse",), ("abuse", "trauma")),
    (("ptsd",), ("ptsd", "trauma")),
    (("trauma",), ("trauma",)),
    (("police",), ("legal", "police")),
    (("charge",), ("legal", "charges")),
    (("legal", "lawyer", "court"), ("legal",)),
    (("betray",), ("betrayal", "trust")),
    (("thief", "steal", "stolen", "theft"), ("theft", "property")),
    (("friend",), ("friendship",)),
    (("house", "apartment", "belongings", "money"), ("property",)),
    (("sad", "depress", "anxious", "lonely", "hurt", "pain", "crying"), ("emotional-distress",)),
)

# 记忆重要性加分词
TRAUMA_TERMS: Tuple[str, ...] = ("ptsd", "trauma", "abuse")
FAMILY_TERMS: Tuple[str, ...] = ("family",)
BETRAYAL_TERMS: Tuple[str, ...] = ("betray", "uncle")
LEGAL_TERMS: Tuple[str, ...] = ("police", "charge", "legal")
THEFT_TERMS: Tuple[str, ...] = ("thief", "steal", "theft")
DISCLOSURE_TERMS: Tuple[str, ...] = ("i feel", "my ", "i am")
HIGH_INTENSITY_EMOTIONS: Tuple[str, ...] = ("sad", "angry", "scared", "shocked")

# 表情持续时间（毫秒）
EMOTION_DURATIONS_MS: Dict[str, int] = {
    "smile": 10000,
    "joyful": 10000,
    "laugh": 8000,
    "surprised": 7000,
    "thoughtful": 10000,
    "concerned": 12000,
    "sad": 12000,
    "angry": 8000,
    "scared": 8000,
    "excited": 10000,
    "empathetic": 10000,
    "explain": 10000,
    "neutral": 8000,
    "curious": 10000,
    "fearful": 8000,
    "revulsed": 8000,
    "shocked": 7000,
    "thinking": 10000,
}
DEFAULT_DURATION_MS = 8000
