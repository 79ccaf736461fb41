from serenity_bot.memory import MemoryRecord, MemoryRetriever, relevance_score
from serenity_bot.memory.retriever import DAY_SECONDS

from tests.conftest import NOW


def _record(content, significance=2, emotion="sad", tags=None, age_days=30.0):
    return MemoryRecord(
        content=content,
        emotion=emotion,
        significance=significance,
        tags=tags or [],
        ts=NOW - age_days * DAY_SECONDS,
    )


def test_score_components():
    record = _record("My uncle took the money", significance=4, tags=["family", "uncle", "property"])
    # 整句 +5；uncle/took/money 各 +2（"the" 太短）；uncle 是标签 +3；重要性 4
    assert relevance_score(record, "uncle took the money", now=NOW) == 5 + 2 * 3 + 3 + 4


def test_short_words_do_not_score():
    record = _record("a cat sat", significance=2)
    assert relevance_score(record, "cat dog", now=NOW) == 2


def test_emotion_filter_bonus():
    record = _record("anything", significance=2, emotion="sad")
    assert relevance_score(record, "zzz", emotion_filter="sad", now=NOW) == 4
    assert relevance_score(record, "zzz", emotion_filter="angry", now=NOW) == 2


def test_recency_bonuses_stack():
    assert relevance_score(_record("x", age_days=0.5), "zzz", now=NOW) == 2 + 1 + 2
    assert relevance_score(_record("x", age_days=3), "zzz", now=NOW) == 2 + 1
    assert relevance_score(_record("x", age_days=10), "zzz", now=NOW) == 2


def test_search_orders_by_score_and_limits(fixed_clock):
    records = [
        _record("we talked about the weather", significance=2),
        _record("my family betrayed me badly", significance=5),
        _record("family dinner was fine", significance=3),
    ]
    retriever = MemoryRetriever(lambda: records, clock=fixed_clock)
    results = retriever.search("family betrayed", limit=2)
    assert [r.content for r in results] == ["my family betrayed me badly", "family dinner was fine"]


def test_search_ties_keep_vault_order(fixed_clock):
    records = [_record(f"note {i}") for i in range(4)]
    retriever = MemoryRetriever(lambda: records, clock=fixed_clock)
    assert retriever.search("zzz", limit=3) == records[:3]


def test_search_min_significance(fixed_clock):
    records = [_record("low", significance=2), _record("high", significance=3)]
    retriever = MemoryRetriever(lambda: records, clock=fixed_clock)
    assert [r.content for r in retriever.search("low", min_significance=3)] == ["high"]


def test_search_empty_or_zero_limit(fixed_clock):
    assert MemoryRetriever(lambda: [], clock=fixed_clock).search("anything") == []
    records = [_record("x")]
    assert MemoryRetriever(lambda: records, clock=fixed_clock).search("x", limit=0) == []
