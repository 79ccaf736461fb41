from serenity_bot.memory import InMemoryStorage, JsonFileStorage


def test_json_storage_round_trip(tmp_path):
    storage = JsonFileStorage(tmp_path / "data")
    assert storage.load("k") == []
    assert storage.save("k", [{"a": 1}, {"b": "中文"}]) is True
    assert storage.load("k") == [{"a": 1}, {"b": "中文"}]
    assert not (tmp_path / "data" / "k.json.tmp").exists()


def test_json_storage_corrupt_file(tmp_path, caplog):
    (tmp_path / "k.json").write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(tmp_path)
    assert storage.load("k") == []
    assert any("k.json" in r.getMessage() for r in caplog.records)


def test_json_storage_non_list(tmp_path):
    (tmp_path / "k.json").write_text('{"a": 1}', encoding="utf-8")
    assert JsonFileStorage(tmp_path).load("k") == []


def test_json_storage_write_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    assert JsonFileStorage(blocker).save("k", [{"a": 1}]) is False


def test_in_memory_storage_returns_copies():
    storage = InMemoryStorage()
    items = [{"a": 1}]
    storage.save("k", items)
    items[0]["a"] = 2
    loaded = storage.load("k")
    assert loaded == [{"a": 1}]
    loaded[0]["a"] = 3
    assert storage.load("k") == [{"a": 1}]
    assert storage.load("missing") == []
