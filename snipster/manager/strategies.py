"""
Random sources and short-code generation for Snipster.

Provided random sources:
- SystemRandomSource: OS-backed cryptographically strong randomness (random.SystemRandom)
- PseudoRandomSource: Mersenne Twister (random.Random); optionally seeded for reproducible tests

Code strategy:
- RandomCodeStrategy: draws `length` characters from the 62-char alphanumeric alphabet

Configuration (via snipster.config.settings):
- RANDOM_SOURCE: "system" (default) or "pseudo"
- CODE_LENGTH: generated code length (default 7)

Notes:
- A random source is anything with `randbelow(n) -> int in [0, n)`. Tests inject
  a deterministic one to pin the generated codes.
- `get_random_source()` falls back to the pseudo-random source when the OS
  cannot provide strong randomness.
"""

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Type

from snipster.config import settings

log = logging.getLogger(__name__)

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


class BaseRandomSource(ABC):
    """Abstract source of uniformly distributed indexes."""

    @abstractmethod
    def randbelow(self, n: int) -> int:  # pragma: no cover
        """Return a uniformly distributed integer in [0, n)."""
        raise NotImplementedError


class SystemRandomSource(BaseRandomSource):
    """Strong randomness from the operating system."""

    def __init__(self):
        self._rng = random.SystemRandom()
        # Probe once so a missing OS source is detected at construction time.
        self._rng.randrange(2)

    def randbelow(self, n: int) -> int:
        return self._rng.randrange(n)


class PseudoRandomSource(BaseRandomSource):
    """Weaker, seedable randomness; fine for codes only unique within one store."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def randbelow(self, n: int) -> int:
        return self._rng.randrange(n)


RANDOM_SOURCE_REGISTRY: Dict[str, Type[BaseRandomSource]] = {
    "system": SystemRandomSource,
    "secure": SystemRandomSource,
    "pseudo": PseudoRandomSource,
    "weak": PseudoRandomSource,
}


def get_random_source(name: Optional[str] = None) -> BaseRandomSource:
    """
    Resolve the random source from parameter or settings.RANDOM_SOURCE.

    The strong source degrades to the pseudo-random one when the OS cannot
    supply randomness (`NotImplementedError` from os.urandom).
    """
    key = (name or settings.RANDOM_SOURCE or "system").strip().lower()
    cls = RANDOM_SOURCE_REGISTRY.get(key)
    if cls is None:
        raise ValueError(f"Unknown random source: {key!r}")
    if cls is SystemRandomSource:
        try:
            return SystemRandomSource()
        except NotImplementedError:
            log.warning("No OS randomness available; falling back to pseudo-random codes")
            return PseudoRandomSource()
    return cls()


@dataclass
class RandomCodeStrategy:
    """Random Base62 codes; uniqueness is enforced by the caller's retry loop."""

    random_source: BaseRandomSource = field(default_factory=get_random_source)
    length: int = field(default_factory=lambda: settings.CODE_LENGTH)

    def generate(self) -> str:
        return "".join(ALPHABET[self.random_source.randbelow(len(ALPHABET))] for _ in range(self.length))
