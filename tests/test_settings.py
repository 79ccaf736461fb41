import json

from serenity_bot.settings import BotSettings, MemorySettings, load_settings


def _write(tmp_path, data):
    path = tmp_path / "bot_settings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "nope.json"))
    assert settings == BotSettings()
    assert load_settings(None) == BotSettings()


def test_malformed_json_gives_defaults(tmp_path):
    path = tmp_path / "bot_settings.json"
    path.write_text("{oops", encoding="utf-8")
    assert load_settings(str(path)) == BotSettings()


def test_values_are_loaded(tmp_path):
    settings = load_settings(_write(tmp_path, {
        "port": "9000",
        "ollama_base_url": "http://gpu-box:11434/",
        "ollama_model": "mistral",
        "temperature": "0.5",
        "default_persona": "Dr. Theo",
        "emotion_word_boundaries": "yes",
        "log_level": "debug",
        "memory": {"buffer_capacity": 4, "evict_prefer_recent": "on"},
    }))
    assert settings.port == 9000
    assert settings.ollama_base_url == "http://gpu-box:11434"
    assert settings.ollama_model == "mistral"
    assert settings.temperature == 0.5
    assert settings.default_persona == "Dr. Theo"
    assert settings.emotion_word_boundaries is True
    assert settings.log_level == "DEBUG"
    assert settings.memory.buffer_capacity == 4
    assert settings.memory.evict_prefer_recent is True
    assert settings.memory.vault_hard_cap == 100


def test_bad_numbers_fall_back(tmp_path):
    settings = load_settings(_write(tmp_path, {
        "port": "not a port",
        "top_p": [],
        "memory": {"significance_threshold": "x"},
    }))
    assert settings.port == BotSettings.port
    assert settings.top_p == BotSettings.top_p
    assert settings.memory.significance_threshold == MemorySettings.significance_threshold


def test_caps_are_clamped(tmp_path):
    settings = load_settings(_write(tmp_path, {
        "memory": {"vault_hard_cap": 50, "vault_soft_cap": 70, "buffer_capacity": 0},
    }))
    assert settings.memory.vault_hard_cap == 50
    assert settings.memory.vault_soft_cap == 50
    assert settings.memory.buffer_capacity == 1


def test_non_object_memory_section_is_ignored(tmp_path):
    settings = load_settings(_write(tmp_path, {"memory": [1, 2]}))
    assert settings.memory == MemorySettings()


def test_significance_threshold_has_a_floor(tmp_path):
    settings = load_settings(_write(tmp_path, {"memory": {"significance_threshold": 0}}))
    assert settings.memory.significance_threshold == 2
    settings = load_settings(_write(tmp_path, {"memory": {"significance_threshold": 4}}))
    assert settings.memory.significance_threshold == 4
