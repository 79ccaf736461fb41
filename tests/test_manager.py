import json
import threading

import pytest

from serenity_bot.memory import BUFFER_KEY, VAULT_KEY, InMemoryStorage, MemoryManager, relevance_score
from serenity_bot.settings import MemorySettings

from tests.conftest import NOW, ThreadRecordingStorage


class BrokenStorage:
    """读写都抛异常的存储。"""

    def load(self, key):
        raise OSError("disk gone")

    def save(self, key, items):
        raise OSError("disk gone")


def test_record_turn_writes_buffer_and_vault(manager, storage):
    record = manager.record_turn("user", "I feel so sad, my friend betrayed me", "sad")
    assert record is not None
    assert len(manager.buffer) == 1
    assert len(manager.vault) == 1
    assert storage.load(VAULT_KEY)[0]["id"] == record.id
    assert storage.load(BUFFER_KEY)[0]["content"] == "I feel so sad, my friend betrayed me"


def test_low_significance_turn_only_hits_buffer(manager):
    assert manager.record_turn("user", "The weather is nice today.", "neutral") is None
    assert len(manager.buffer) == 1
    assert len(manager.vault) == 0


def test_invalid_inputs_are_normalised(manager):
    manager.record_turn("robot", None, "not-a-tag")
    entry = manager.buffer.entries()[0]
    assert (entry.role, entry.content, entry.emotion) == ("user", "", "neutral")
    assert len(manager.vault) == 0


def test_buffer_never_exceeds_capacity(manager):
    for i in range(25):
        manager.record_turn("user", f"hello {i}", "neutral")
    assert len(manager.buffer) == 10
    assert manager.buffer.entries()[0].content == "hello 15"


def test_state_survives_restart(storage):
    first = MemoryManager(storage=storage)
    first.initialize()
    first.record_turn("user", "I feel so sad, my friend betrayed me", "sad")
    first.record_turn("assistant", "*hugs* I'm here.", "smile", "Dr. Elara")

    second = MemoryManager(storage=storage)
    assert second.initialize() is True
    assert [r.id for r in second.vault.records()] == [r.id for r in first.vault.records()]
    assert [e.content for e in second.buffer.entries()] == [e.content for e in first.buffer.entries()]


def test_initialize_is_idempotent(manager):
    manager.record_turn("user", "I feel sad", "sad")
    assert manager.initialize() is True
    assert len(manager.vault) == 1


def test_corrupt_storage_loads_what_it_can():
    storage = InMemoryStorage({
        VAULT_KEY: [
            {"content": "kept", "emotion": "sad", "significance": 4},
            {"content": "bad significance", "significance": "lots"},
            {"emotion": "sad", "significance": 4},
            "not a dict",
        ],
        BUFFER_KEY: "not a list",
    })
    memory = MemoryManager(storage=storage)
    memory.initialize()
    assert [r.content for r in memory.vault.records()] == ["kept"]
    assert len(memory.buffer) == 0


def test_non_finite_significance_is_skipped(manager):
    bundle = json.loads(
        '{"memories": ['
        '{"content": "inf", "emotion": "sad", "significance": Infinity},'
        '{"content": "neg", "emotion": "sad", "significance": -Infinity},'
        '{"content": "nan", "emotion": "sad", "significance": NaN},'
        '{"content": "ok", "emotion": "sad", "significance": 3, "ts": Infinity}'
        ']}'
    )
    assert manager.import_state(bundle) == 1
    record = manager.vault.records()[0]
    assert record.content == "ok"
    assert record.ts < float("inf")


def test_null_buffer_content_becomes_empty(manager):
    manager.import_state({"buffer": [{"role": "user", "content": None}]})
    assert manager.buffer.entries()[0].content == ""
    assert "None" not in manager.build_context()


def test_storage_failures_do_not_break_turns():
    memory = MemoryManager(storage=BrokenStorage())
    assert memory.initialize() is False
    record = memory.record_turn("user", "I feel sad", "sad")
    assert record is not None
    assert len(memory.vault) == 1
    assert memory.save() is False


def test_clear_session_keeps_vault(manager):
    manager.record_turn("user", "I feel sad", "sad")
    manager.clear_session()
    assert len(manager.buffer) == 0
    assert len(manager.vault) == 1


def test_summarize(manager):
    assert manager.summarize() == {
        "total_memories": 0,
        "recent_count": 0,
        "current_topics": [],
        "top_emotions": [],
        "last_updated": None,
    }

    manager.record_turn("user", "I feel so sad, my friend betrayed me", "sad")
    manager.record_turn("user", "I am sad again", "sad")
    manager.record_turn("assistant", "*worried* Tell me more.", "concerned", "Dr. Elara")
    summary = manager.summarize()
    assert summary["total_memories"] == 3
    assert summary["recent_count"] == 3
    assert summary["current_topics"] == ["betrayal", "trust", "friendship", "emotional-distress"]
    assert summary["top_emotions"] == [{"emotion": "sad", "count": 2}, {"emotion": "concerned", "count": 1}]
    assert summary["last_updated"] == manager.vault.records()[-1].ts


def test_export_import_round_trip(manager):
    manager.record_turn("user", "I feel so sad, my friend betrayed me", "sad")
    manager.record_turn("assistant", "*hugs* I'm here.", "smile", "Dr. Elara")
    bundle = manager.export_state()
    assert set(bundle) == {"memories", "buffer", "exported_at"}

    fresh = MemoryManager(storage=InMemoryStorage())
    fresh.initialize()
    assert fresh.import_state(bundle) == 2
    assert [(r.content, r.emotion, r.significance) for r in fresh.vault.records()] == [
        (r.content, r.emotion, r.significance) for r in manager.vault.records()
    ]
    assert [e.content for e in fresh.buffer.entries()] == [e.content for e in manager.buffer.entries()]


def test_import_appends_memories_and_replaces_buffer(manager):
    manager.record_turn("user", "I feel sad", "sad")
    manager.record_turn("user", "hello", "neutral")
    bundle = {
        "memories": [
            {"content": "imported", "emotion": "angry", "significance": 4},
            {"content": "too small", "emotion": "neutral", "significance": 1},
        ],
        "buffer": [{"role": "assistant", "content": "from backup", "emotion": "smile"}],
    }
    assert manager.import_state(bundle) == 1
    assert [r.content for r in manager.vault.records()] == ["I feel sad", "imported"]
    assert [e.content for e in manager.buffer.entries()] == ["from backup"]


def test_import_rejects_non_objects(manager):
    manager.record_turn("user", "I feel sad", "sad")
    assert manager.import_state(None) == 0
    assert manager.import_state(["memories"]) == 0
    assert len(manager.vault) == 1
    assert len(manager.buffer) == 1


def test_import_runs_eviction():
    memory = MemoryManager(config=MemorySettings(vault_hard_cap=3, vault_soft_cap=2))
    memory.initialize()
    bundle = {"memories": [{"content": f"m{i}", "emotion": "sad", "significance": 2 + i} for i in range(4)]}
    memory.import_state(bundle)
    assert [r.content for r in memory.vault.records()] == ["m3", "m2"]


@pytest.mark.parametrize("role", ["user", "assistant"])
def test_search(manager, role):
    manager.record_turn(role, "My uncle stole from the family", "angry")
    results = manager.search("uncle", emotion_filter="angry")
    assert [r.content for r in results] == ["My uncle stole from the family"]


def test_101_equal_turns_keep_first_80(manager):
    records = [manager.record_turn("user", f"note {i}", "empathetic") for i in range(101)]
    assert all(r.significance == 3 for r in records)
    kept = manager.vault.records()
    assert len(kept) == 80
    assert [r.id for r in kept] == [r.id for r in records[:80]]


def test_live_inserts_use_manager_clock(fixed_clock):
    memory = MemoryManager(clock=fixed_clock)
    memory.initialize()
    record = memory.record_turn("user", "I feel sad", "sad")
    assert record.ts == NOW
    assert memory.buffer.entries()[0].ts == NOW
    assert memory.export_state()["exported_at"] == NOW
    # 当天的记录：新近度 +1 +2
    assert relevance_score(record, "zzz", now=NOW) == record.significance + 3


async def test_async_paths_write_off_the_event_loop():
    storage = ThreadRecordingStorage()
    memory = MemoryManager(storage=storage)
    memory.initialize()

    record = await memory.async_record_turn("user", "I feel sad", "sad")
    await memory.async_clear_session()
    imported = await memory.async_import_state({"memories": [{"content": "backup", "emotion": "angry", "significance": 4}]})

    assert record is not None
    assert imported == 1
    assert len(memory.vault) == 2
    assert storage.load(VAULT_KEY)[-1]["content"] == "backup"
    assert storage.save_threads
    assert all(name.startswith("memory_io") for name in storage.save_threads)
    assert threading.main_thread().name not in storage.save_threads


async def test_async_import_rejects_non_objects(manager):
    assert await manager.async_import_state("nope") == 0
