"""头像呈现（persona + 情绪 -> 呈现描述）。

只负责"选哪个素材、用哪个动画、缩放多少"，不负责渲染。

回退顺序：
a) persona + 情绪 精确命中
b) persona 未知 -> 默认 persona
c) persona 已知但无此情绪 -> persona 的默认情绪
d) 素材按性别查找：男性素材缺失 -> 通用素材 -> 全局兜底素材
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from .extractor import EmotionExtractor
from .lexicon import DEFAULT_DURATION_MS, DEFAULT_EMOTION, EMOTION_DURATIONS_MS

logger = logging.getLogger(__name__)

DEFAULT_PERSONA = "Dr. Elara"
ALTERNATE_GENDER = "male"
DEFAULT_ANIMATION = "breathing"
DEFAULT_TRANSFORM_ORIGIN = "50% 50%"

VIDEO_BASE_PATH = "/videos/avatar/"
FALLBACK_VIDEO = VIDEO_BASE_PATH + "Content_Healthcare_Pro_Teal_Scrubs - TRIM - Videobolt.net.mp4"
FALLBACK_IMAGE = "/images/avatar/fallback.png"

# 素材文件名：通用（女性）键为情绪名，男性键为 male_<情绪>
MEDIA_FILES: Dict[str, str] = {
    "scared": "Fearful_Medic_Emergency_Room - TRIM - Videobolt.net.mp4",
    "neutral": "Content_Healthcare_Pro_Teal_Scrubs - TRIM - Videobolt.net.mp4",
    "joyful": "Joyful_Nurse_Talking_Radiant - TRIM - Videobolt.net.mp4",
    "concerned": "Anxious_Healthcare_Worker_Hallway - TRIM - Videobolt.net.mp4",
    "thoughtful": "Empathetic_Clinician_Explains_Medical_Info - TRIM - Videobolt.net.mp4",
    "explain": "Animated_Navy_Medic_Explains - TRIM - Videobolt.net.mp4",
    "smile": "Smiling_Nurse_Confident_Professional - TRIM - Videobolt.net.mp4",
    "excited": "Excited_Pediatrician_Good_News - TRIM - Videobolt.net.mp4",
    "sad": "Sad_Healthcare_Worker_Hospital_Setting - TRIM - Videobolt.net.mp4",
    "angry": "Angry_Scrub_Professional - TRIM - Videobolt.net.mp4",
    "surprised": "elara_surprised.mp4",
    "fearful": "Fearful_Medic_Emergency_Room - TRIM - Videobolt.net.mp4",
    "empathetic": "Empathetic_Clinician_Explains_Medical_Info - TRIM - Videobolt.net.mp4",
    "thinking": "Animated_Navy_Medic_Explains - TRIM - Videobolt.net.mp4",
    "curious": "Animated_Navy_Medic_Explains - TRIM - Videobolt.net.mp4",
    "revulsed": "Anxious_Healthcare_Worker_Hallway - TRIM - Videobolt.net.mp4",
    "shocked": "Surprised_Healthcare_Professional - TRIM - Videobolt.net.mp4",
    "laugh": "Joyful_Nurse_Talking_Radiant - TRIM - Videobolt.net.mp4",

    "male_neutral": "male_theo_neutral.mp4",
    "male_joyful": "male_theo_happy.mp4",
    "male_concerned": "male_theo_concerned.mp4",
    "male_thoughtful": "male_theo_thinking.mp4",
    "male_curious": "male_theo_thinking.mp4",
    "male_explain": "male_theo_explaining.mp4",
    "male_smile": "male_theo_happy.mp4",
    "male_angry": "male_theo_angry.mp4",
    "male_surprised": "male_theo_surprised.mp4",
    "male_scared": "male_theo_scared.mp4",
    "male_excited": "male_theo_excited.mp4",
    "male_sad": "male_theo_sad.mp4",
    "male_laugh": "male_theo_happy.mp4",
}

ANIMATIONS = ("breathing", "gentle-bounce", "slow-pulse", "thoughtful-nod", "quick-bounce", "still")

VOICE_GENDERS: Dict[str, str] = {
    "sarah": "female",
    "megan": "female",
    "theo": "male",
    "jack": "male",
}


def media_path(gender: str, emotion: str) -> str:
    """按性别查素材；男性缺失时退回通用素材，再退回全局兜底。"""
    file_name = None
    if gender == ALTERNATE_GENDER:
        file_name = MEDIA_FILES.get(f"male_{emotion}")
    if not file_name:
        file_name = MEDIA_FILES.get(emotion)
    if not file_name:
        return FALLBACK_VIDEO
    return VIDEO_BASE_PATH + file_name


def emotion_duration_ms(emotion: str) -> int:
    """表情保持时长（毫秒）。"""
    return EMOTION_DURATIONS_MS.get(emotion, DEFAULT_DURATION_MS)


@dataclass(frozen=True)
class EmotionStyle:
    """某个 persona 在某个情绪下的静态配置。"""
    animation: Optional[str] = None
    scale: float = 1.0
    image: Optional[str] = None
    transform_origin: str = DEFAULT_TRANSFORM_ORIGIN


@dataclass(frozen=True)
class PersonaProfile:
    """persona 静态配置。"""
    name: str
    gender: str
    display_name: str
    description: str = ""
    emotions: Dict[str, EmotionStyle] = field(default_factory=dict)
    default_emotion: str = DEFAULT_EMOTION


@dataclass
class PresentationDescriptor:
    """呈现描述：外部渲染层据此播放素材。"""
    persona: str
    emotion: str
    gender: str
    video: str
    image: Optional[str] = None
    animation: str = DEFAULT_ANIMATION
    scale: float = 1.0
    transform_origin: str = DEFAULT_TRANSFORM_ORIGIN
    duration_ms: int = DEFAULT_DURATION_MS

    @property
    def media(self) -> str:
        return self.video or self.image or FALLBACK_VIDEO

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["media"] = self.media
        return data


PERSONAS: Dict[str, PersonaProfile] = {
    "Dr. Elara": PersonaProfile(
        name="Dr. Elara",
        gender="female",
        display_name="Dr. Elara",
        description="A compassionate doctor with a warm demeanor",
        emotions=dict(
            scared=EmotionStyle("slow-pulse"),
            neutral=EmotionStyle("breathing", image="/images/avatar/elara_neutral.png"),
            joyful=EmotionStyle("gentle-bounce", 1.1, image="/images/avatar/elara_joyful.png"),
            concerned=EmotionStyle("slow-pulse", image="/images/avatar/elara_concerned.png"),
            thoughtful=EmotionStyle("thoughtful-nod", image="/images/avatar/elara_thoughtful.png"),
            explain=EmotionStyle("breathing"),
            smile=EmotionStyle("gentle-bounce", 1.05),
            excited=EmotionStyle("gentle-bounce", 1.1),
            sad=EmotionStyle("slow-pulse", 0.98),
            revulsed=EmotionStyle("slow-pulse"),
            angry=EmotionStyle("breathing"),
            surprised=EmotionStyle("quick-bounce", 1.05),
            shocked=EmotionStyle("quick-bounce", 1.05),
            fearful=EmotionStyle("slow-pulse"),
            empathetic=EmotionStyle("thoughtful-nod"),
            thinking=EmotionStyle("thoughtful-nod"),
            curious=EmotionStyle("thoughtful-nod", 1.05),
            laugh=EmotionStyle("gentle-bounce", 1.1),
        ),
    ),
    "Dr. Theo": PersonaProfile(
        name="Dr. Theo",
        gender="male",
        display_name="Dr. Theo",
        description="A confident medical professional",
        emotions=dict(
            neutral=EmotionStyle("breathing", image="/images/avatar/theo_neutral.png"),
            joyful=EmotionStyle("gentle-bounce", 1.1, image="/images/avatar/theo_joyful.png"),
            concerned=EmotionStyle("slow-pulse", image="/images/avatar/theo_concerned.png"),
            thoughtful=EmotionStyle("thoughtful-nod", image="/images/avatar/theo_thoughtful.png"),
            explain=EmotionStyle("breathing"),
            smile=EmotionStyle("gentle-bounce", 1.05),
            angry=EmotionStyle("breathing"),
            surprised=EmotionStyle("quick-bounce", 1.05),
            scared=EmotionStyle("slow-pulse"),
            excited=EmotionStyle("gentle-bounce", 1.1),
            sad=EmotionStyle("slow-pulse", 0.98),
            curious=EmotionStyle("thoughtful-nod"),
            laugh=EmotionStyle("gentle-bounce", 1.1),
            # 没有男性素材，走通用素材
            empathetic=EmotionStyle("thoughtful-nod"),
            thinking=EmotionStyle(),
        ),
    ),
}


def fallback_descriptor() -> PresentationDescriptor:
    """全局兜底描述（任何查找失败都不会比这更差）。"""
    return PresentationDescriptor(
        persona=DEFAULT_PERSONA,
        emotion=DEFAULT_EMOTION,
        gender="female",
        video=FALLBACK_VIDEO,
        image=FALLBACK_IMAGE,
        animation=DEFAULT_ANIMATION,
        duration_ms=emotion_duration_ms(DEFAULT_EMOTION),
    )


class AvatarStatePresenter:
    """persona + 情绪 -> 呈现描述（全函数，永不"找不到"）。"""

    def __init__(
        self,
        personas: Optional[Dict[str, PersonaProfile]] = None,
        default_persona: str = DEFAULT_PERSONA,
        extractor: Optional[EmotionExtractor] = None,
    ):
        self.personas = personas if personas is not None else PERSONAS
        self.default_persona = default_persona
        self.extractor = extractor or EmotionExtractor()

    def _profile(self, persona: Any) -> Optional[PersonaProfile]:
        if isinstance(persona, str) and persona in self.personas:
            return self.personas[persona]
        logger.debug("unknown persona %r, using %s", persona, self.default_persona)
        return self.personas.get(self.default_persona)

    def present(self, persona: Any, emotion: Any) -> PresentationDescriptor:
        """计算呈现描述。

        参数:
            persona: persona 名称（未知时用默认 persona）
            emotion: 情绪标签或别名（会先统一解析）

        返回:
            PresentationDescriptor，media 必定非空
        """
        profile = self._profile(persona)
        if profile is None:
            return fallback_descriptor()

        tag = self.extractor.resolve_tag(emotion)
        style = profile.emotions.get(tag)
        if style is None:
            tag = profile.default_emotion
            style = profile.emotions.get(tag)
        if style is None:
            return fallback_descriptor()

        return PresentationDescriptor(
            persona=profile.name,
            emotion=tag,
            gender=profile.gender,
            video=media_path(profile.gender, tag),
            image=style.image,
            animation=style.animation if style.animation in ANIMATIONS else DEFAULT_ANIMATION,
            scale=style.scale,
            transform_origin=style.transform_origin,
            duration_ms=emotion_duration_ms(tag),
        )

    def persona_for_voice(self, voice: Any) -> str:
        """按语音选 persona：男声 -> 男性 persona，其余 -> 默认 persona。"""
        if not voice or not isinstance(voice, str):
            return self.default_persona

        gender = VOICE_GENDERS.get(voice.lower())
        if gender == ALTERNATE_GENDER:
            for name, profile in self.personas.items():
                if profile.gender == ALTERNATE_GENDER:
                    return name
        return self.default_persona

    def available_personas(self) -> List[str]:
        return list(self.personas)

    def personas_by_gender(self, gender: Any) -> List[str]:
        if gender not in ("male", "female"):
            return list(self.personas)
        return [name for name, profile in self.personas.items() if profile.gender == gender]
