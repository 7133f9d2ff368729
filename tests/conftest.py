"""
Global pytest fixtures for the Snipster test suite.

Responsibilities:
    - Provide a controllable clock so expiry and housekeeping are deterministic
    - Provide isolated in-memory Storage and a LinkStore on top of it
    - Provide a LinkManager wired to the store with a seeded code strategy
"""

import pytest

from snipster.manager.link_manager import LinkManager
from snipster.manager.strategies import PseudoRandomSource, RandomCodeStrategy
from snipster.storage.link_store import LinkStore
from snipster.storage.storage import Storage

START_MS = 1_700_000_000_000


class FakeClock:
    """Callable clock returning a settable epoch-millisecond value."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> Storage:
    """Fresh in-memory key/value backend."""
    return Storage()


@pytest.fixture
def store(storage: Storage, clock: FakeClock) -> LinkStore:
    return LinkStore(storage, clock=clock)


@pytest.fixture
def manager(store: LinkStore, clock: FakeClock) -> LinkManager:
    """LinkManager with a seeded pseudo-random strategy and the fake clock."""
    strategy = RandomCodeStrategy(random_source=PseudoRandomSource(seed=1234), length=7)
    return LinkManager(store=store, code_strategy=strategy, clock=clock)
