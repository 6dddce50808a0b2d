import random

import pytest

from core.types import MessageContext
from responders.engine import AutoResponderEngine


class FakeClock:
    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_ctx():
    def _make(content="hello", **overrides):
        values = {
            "message_id": "1000",
            "author_id": "42",
            "author_name": "alice",
            "channel_id": "500",
            "guild_id": "900",
            "content": content,
        }
        values.update(overrides)
        return MessageContext(**values)

    return _make


@pytest.fixture
def make_engine(clock):
    def _make(data):
        engine = AutoResponderEngine(rng=random.Random(1234), clock=clock)
        engine.reload(data)
        return engine

    return _make
