import json
import threading

import pytest

from serenity_bot.companion import Companion
from serenity_bot.emotion import EmotionExtractor
from serenity_bot.memory import InMemoryStorage, MemoryManager
from serenity_bot.services import BotServices
from serenity_bot.settings import BotSettings

NOW = 1_700_000_000.0


class FakeChat:
    """替代 OllamaChat：固定回复，记录收到的 prompt。"""

    def __init__(self, reply="*smiles softly* I'm here for you.", models=None):
        self.reply = reply
        self.models = models if models is not None else ["llama3"]
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        return self.reply

    async def list_models(self):
        return list(self.models)


class ThreadRecordingStorage(InMemoryStorage):
    """记下每次 save 所在的线程。"""

    def __init__(self):
        super().__init__()
        self.save_threads = []

    def save(self, key, items):
        self.save_threads.append(threading.current_thread().name)
        return super().save(key, items)


class FakeWebSocket:
    """按顺序吐出请求帧，收集服务端回包。"""

    def __init__(self, frames):
        self._frames = list(frames)
        self.sent = []

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._frames:
            raise StopAsyncIteration
        frame = self._frames.pop(0)
        return frame if isinstance(frame, str) else json.dumps(frame)

    async def send(self, data):
        self.sent.append(json.loads(data))


@pytest.fixture
def extractor():
    return EmotionExtractor()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def manager(storage):
    memory = MemoryManager(storage=storage)
    memory.initialize()
    return memory


@pytest.fixture
def companion(manager):
    return Companion(memory=manager)


@pytest.fixture
def fake_chat():
    return FakeChat()


@pytest.fixture
def services(fake_chat, companion):
    return BotServices(chat=fake_chat, companion=companion)


@pytest.fixture
def settings():
    return BotSettings()
