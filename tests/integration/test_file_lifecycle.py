"""
Integration tests: full link lifecycle on the file backend.

A fresh LinkStore/LinkManager pair is built for every step, mimicking separate
process starts sharing one storage directory.
"""

import pytest

from snipster.errors import AliasTakenError
from snipster.manager.link_manager import LinkManager, ResolveStatus
from snipster.manager.strategies import PseudoRandomSource, RandomCodeStrategy
from snipster.storage.link_store import LinkStore
from snipster.storage.storage_factory import get_storage

WEEK_MS = 7 * 24 * 60 * 60 * 1000


@pytest.fixture
def boot(tmp_path, clock):
    """Return a callable that 'starts' the app: new objects over the same directory."""

    def _boot():
        store = LinkStore(get_storage("file", directory=str(tmp_path)), clock=clock)
        store.housekeeping()
        strategy = RandomCodeStrategy(random_source=PseudoRandomSource(), length=7)
        return LinkManager(store=store, code_strategy=strategy, clock=clock)

    return _boot


def test_create_visit_expire_prune(boot, clock):
    link = boot().shorten("https://example.com/landing", validity_minutes=1)
    assert len(link.code) == 7

    clock.advance(30_000)
    outcome = boot().visit(link.code, referrer="https://news.example")
    assert outcome.status is ResolveStatus.REDIRECT
    assert outcome.url == "https://example.com/landing"

    clock.advance(31_000)
    manager = boot()
    assert manager.visit(link.code).status is ResolveStatus.EXPIRED
    (stored,) = manager.list_links()
    assert len(stored.clicks) == 1

    # expired links survive until the retention window has passed
    clock.now = stored.expires_at + WEEK_MS - 1
    assert len(boot().list_links()) == 1
    clock.now = stored.expires_at + WEEK_MS
    assert boot().list_links() == []


def test_alias_taken_across_restarts(boot):
    boot().shorten("https://example.com", alias="promo")
    with pytest.raises(AliasTakenError):
        boot().shorten("https://other.example", alias="promo")


def test_corrupt_file_treated_as_empty(boot, tmp_path):
    (tmp_path / "url_shortener_links_v1.json").write_text("{{ definitely not json", encoding="utf-8")
    manager = boot()
    assert manager.list_links() == []
    manager.shorten("https://example.com", alias="fresh")
    assert [l.code for l in boot().list_links()] == ["fresh"]


def test_visit_unknown_code(boot):
    boot().shorten("https://example.com", alias="promo")
    assert boot().visit("other").status is ResolveStatus.NOT_FOUND
