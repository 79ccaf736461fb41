import pytest

from serenity_bot.emotion import EMOTION_TAGS, EmotionExtractor, classify_emotion, contains_any, extract_actions
from serenity_bot.emotion.lexicon import ACTION_EMOTIONS, EMOTION_ALIASES


# ---------- 级联各层 ----------

def test_action_beats_heuristics():
    assert classify_emotion("*squeals* That's amazing!") == "excited"


def test_crisis_rule_beats_question():
    assert classify_emotion("Can you explain PTSD to me?") == "empathetic"


def test_crisis_rule_beats_alias():
    # 文本里有 "sad"，但 family + betray 命中更高优先级
    assert classify_emotion("I'm sad that my family would betray me") == "sad"
    assert classify_emotion("the police were smiling at me") == "shocked"


def test_crisis_rules_are_ordered():
    # trauma 规则排在 legal 前面
    assert classify_emotion("my trauma started with the police") == "empathetic"


def test_context_only_feeds_crisis_rules(extractor):
    assert extractor.classify("tell me more", context="after the assault") == "concerned"
    # 上下文里的普通情绪词不参与
    assert extractor.classify("tell me more", context="I am so happy") == "neutral"


def test_alias_scan():
    assert classify_emotion("I feel so sad, my friend betrayed me") == "sad"
    assert classify_emotion("I'm really happy today") == "joyful"


def test_action_phrase_and_word_lookup(extractor):
    assert extractor.classify("*bounces up and down* hi") == "excited"
    assert extractor.classify("*leaning forward* go on") == "concerned"
    # 整句不在表里时按单词查
    assert extractor.classify("*slowly sighs* okay") == "thoughtful"


def test_exclamation_surprise_question_fallbacks():
    assert classify_emotion("oh my goodness") == "excited"
    assert classify_emotion("no way") == "surprised"
    assert classify_emotion("where are you from?") == "thoughtful"
    assert classify_emotion("what is a tree") == "thoughtful"


def test_neutral_default():
    assert classify_emotion("The weather is nice today.") == "neutral"


@pytest.mark.parametrize("value", [None, "", 42, ["sad"], {"text": "sad"}])
def test_non_text_input_is_neutral(value):
    assert classify_emotion(value) == "neutral"


def test_non_text_context_is_ignored(extractor):
    assert extractor.classify("hello", context=None) == "neutral"
    assert extractor.classify("hello", context=123) == "neutral"


# ---------- 性质 ----------

@pytest.mark.parametrize("keyword,tag", list(EMOTION_ALIASES.items()))
def test_every_alias_classifies_to_its_tag(keyword, tag):
    assert classify_emotion(keyword) == tag


@pytest.mark.parametrize("text", [
    "*squeals*",
    "I feel so sad",
    "what?",
    "random words here",
    "*unknown action*",
    "THE POLICE ARE HERE",
])
def test_result_always_in_vocabulary(text):
    assert classify_emotion(text) in EMOTION_TAGS


def test_tables_only_map_into_vocabulary():
    assert set(ACTION_EMOTIONS.values()) <= set(EMOTION_TAGS)
    assert set(EMOTION_ALIASES.values()) <= set(EMOTION_TAGS)


# ---------- 匹配方式 ----------

def test_substring_matching_is_default():
    assert contains_any("i made it", ["mad"])
    assert classify_emotion("I made dinner") == "angry"


def test_whole_word_mode():
    assert not contains_any("i made it", ["mad"], whole_words=True)
    assert contains_any("so mad now", ["mad"], whole_words=True)
    assert EmotionExtractor(whole_words=True).classify("I made dinner") == "neutral"


def test_whole_word_mode_keeps_crisis_stems():
    assert EmotionExtractor(whole_words=True).classify("he was charged") == "shocked"


# ---------- 回复相关 ----------

def test_extract_actions():
    assert extract_actions("*smiles* hi *waves*") == ["smiles", "waves"]
    assert extract_actions('*smiles* "hello" (nods)', rich=True) == ["smiles", "hello", "nods"]
    assert extract_actions("no actions") == []


def test_classify_reply_uses_reply_patterns(extractor):
    assert extractor.classify_reply("I hear you, go on.") == "empathetic"
    assert extractor.classify_reply("Thanks for telling me") == "smile"
    assert extractor.classify_reply("I'm sorry for your loss") == "concerned"
    # 级联已有结果时不看回复短语
    assert extractor.classify_reply("I hear you, that's so sad") == "sad"


def test_extract_emotions_and_reply_emotion(extractor):
    reply = "*laughs* That is great. *worried* But be careful."
    assert extractor.extract_emotions(reply) == ["joyful", "concerned"]
    assert extractor.reply_emotion(reply) == "joyful"
    assert extractor.reply_emotion("Thank you for sharing.") == "smile"
    assert extractor.reply_emotion("") == "neutral"


def test_split_segments(extractor):
    segments = extractor.split_segments('*smiles* Hello there. "Take a breath." (sighs) Okay.')
    assert [(s.kind, s.content, s.emotion) for s in segments] == [
        ("action", "smiles", "smile"),
        ("text", "Hello there.", None),
        ("text", "Take a breath.", None),
        ("action", "sighs", "thoughtful"),
        ("text", "Okay.", None),
    ]
    assert extractor.split_segments(None) == []


def test_resolve_tag(extractor):
    assert extractor.resolve_tag("sad") == "sad"
    assert extractor.resolve_tag("Happy") == "joyful"
    assert extractor.resolve_tag("amazed") == "surprised"
    assert extractor.resolve_tag("I am so furious right now") == "angry"
    assert extractor.resolve_tag("gibberish") == "neutral"
    assert extractor.resolve_tag(None) == "neutral"
    assert extractor.resolve_tag(3) == "neutral"


@pytest.mark.parametrize("phrase,tag", [
    ("ptsd", "empathetic"), ("trauma", "empathetic"), ("traumatic", "empathetic"),
    ("abuse", "concerned"), ("abusive", "concerned"), ("assault", "concerned"),
    ("family betray", "sad"), ("family uncle", "sad"),
    ("police", "shocked"), ("charge", "shocked"), ("legal", "shocked"),
    ("thief", "angry"), ("steal", "angry"), ("theft", "angry"),
    ("victim", "empathetic"), ("hurt", "empathetic"), ("pain", "empathetic"),
    ("manipulate", "concerned"), ("manipulation", "concerned"),
])
def test_crisis_predicates_win_over_surrounding_text(phrase, tag):
    assert classify_emotion(f"*smiles* wow, {phrase} came up today?") == tag
