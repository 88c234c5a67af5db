"""Shared fixtures."""

from pathlib import Path

import pytest

from wheredunno import logging as wd_logging
from wheredunno.chat import MessageChannel
from wheredunno.whereabouts import DelayedResponder, FactStore


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def json_log_dir(tmp_path: Path):
    """Send structured logs to a temporary directory."""
    log_dir = tmp_path / "logs"
    wd_logging.configure_logger(log_dir=log_dir)
    yield log_dir
    wd_logging._logger = None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "wheredunno.db"


@pytest.fixture
def channel(db_path: Path, clock: FakeClock) -> MessageChannel:
    """Create a MessageChannel with a temporary database."""
    channel = MessageChannel(db_path, clock=clock)
    channel.init_db()
    yield channel
    channel.close()


@pytest.fixture
def store(db_path: Path, clock: FakeClock) -> FactStore:
    """Create a FactStore with a temporary database."""
    store = FactStore(db_path, clock=clock)
    store.init_db()
    yield store
    store.close()


@pytest.fixture
def responder(channel: MessageChannel, clock: FakeClock) -> DelayedResponder:
    return DelayedResponder(channel, delay=10.0, tick_interval=0.01, clock=clock)
