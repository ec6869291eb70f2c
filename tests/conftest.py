"""
共通フィクスチャ: 固定時計、メモリ保存先、デモデータ投入済みストア
"""
from datetime import datetime, timedelta, timezone

import pytest

from partyhub.models import PartyInput
from partyhub.persistence import MemoryBackend
from partyhub.store import PartyStore

START = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


class FakeClock:
    """呼び出すたびに step だけ進む時計"""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend, clock):
    return PartyStore(backend, clock=clock).initialize()


@pytest.fixture
def make_input():
    def _make(**overrides):
        values = dict(
            name="Test Party",
            slogan="S",
            description="D",
            color="#000000",
            ideology="Other",
            founder="F",
        )
        values.update(overrides)
        return PartyInput(**values)

    return _make
