"""
Unit tests for snipster.manager.strategies.
"""

import re

import pytest

from snipster.manager import strategies
from snipster.manager.strategies import (
    ALPHABET,
    PseudoRandomSource,
    RandomCodeStrategy,
    SystemRandomSource,
    get_random_source,
)

BASE62_PATTERN = re.compile(r"^[0-9a-zA-Z]+$")


def test_alphabet_is_62_unique_alphanumerics():
    assert len(ALPHABET) == 62
    assert len(set(ALPHABET)) == 62
    assert BASE62_PATTERN.match(ALPHABET)


def test_random_strategy_length_charset_and_diversity():
    r = RandomCodeStrategy(random_source=SystemRandomSource(), length=7)
    samples = [r.generate() for _ in range(200)]
    assert all(len(x) == 7 and BASE62_PATTERN.match(x) for x in samples)
    assert len(set(samples)) > 190


def test_pseudo_source_is_reproducible_with_seed():
    a = RandomCodeStrategy(random_source=PseudoRandomSource(seed=7), length=7)
    b = RandomCodeStrategy(random_source=PseudoRandomSource(seed=7), length=7)
    assert [a.generate() for _ in range(5)] == [b.generate() for _ in range(5)]


def test_injected_source_drives_characters():
    class Fixed:
        def randbelow(self, n):
            return n - 1

    assert RandomCodeStrategy(random_source=Fixed(), length=4).generate() == "ZZZZ"


@pytest.mark.parametrize("name,cls", [("system", SystemRandomSource), ("secure", SystemRandomSource),
                                      ("pseudo", PseudoRandomSource), ("WEAK", PseudoRandomSource)])
def test_get_random_source_by_name(name, cls):
    assert isinstance(get_random_source(name), cls)


def test_get_random_source_unknown():
    with pytest.raises(ValueError, match="Unknown random source"):
        get_random_source("dice")


def test_falls_back_to_pseudo_when_os_randomness_missing(monkeypatch):
    def _unavailable(self):
        raise NotImplementedError("no urandom")

    monkeypatch.setattr(strategies.SystemRandomSource, "__init__", _unavailable)
    assert isinstance(get_random_source("system"), PseudoRandomSource)
