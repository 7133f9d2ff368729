"""
Unit tests for the Link/Click models and the persisted JSON codec.
"""

import json

import pytest
from pydantic import ValidationError

from snipster.models import Click, Link, decode_links, encode_links


def _link(**overrides):
    data = dict(id="1-promo", original_url="https://example.com", code="promo", created_at=1, expires_at=60_001)
    data.update(overrides)
    return Link(**data)


def test_encode_uses_persisted_field_names():
    link = _link().with_click(Click(timestamp=5, referrer="direct"))
    (record,) = json.loads(encode_links([link]))
    assert record == {
        "id": "1-promo",
        "originalUrl": "https://example.com",
        "code": "promo",
        "createdAt": 1,
        "expiresAt": 60_001,
        "clicks": [{"ts": 5, "ref": "direct"}],
    }


def test_decode_persisted_layout():
    raw = json.dumps([{
        "id": "1-abc", "originalUrl": "https://x.example", "code": "abc",
        "createdAt": 1, "expiresAt": 2, "clicks": [{"ts": 1, "ref": "r"}, {"ts": 2, "ref": "s"}],
    }])
    (link,) = decode_links(raw)
    assert link.original_url == "https://x.example"
    assert [c.referrer for c in link.clicks] == ["r", "s"]


def test_decode_then_encode_preserves_order():
    links = [_link(id=f"{i}-c{i:03d}", code=f"c{i:03d}") for i in range(5)]
    assert [l.code for l in decode_links(encode_links(links))] == [l.code for l in links]


def test_expires_must_follow_created():
    with pytest.raises(ValidationError):
        _link(created_at=10, expires_at=10)


@pytest.mark.parametrize("code", ["ab", "x" * 31, "bad code"])
def test_code_pattern_enforced(code):
    with pytest.raises(ValidationError):
        _link(code=code)


def test_links_are_immutable():
    link = _link()
    with pytest.raises(ValidationError):
        link.code = "other"


def test_with_click_returns_new_link():
    link = _link()
    clicked = link.with_click(Click(timestamp=2))
    assert link.clicks == ()
    assert clicked.clicks[0].referrer == "direct"
    assert clicked.last_click.timestamp == 2
    assert link.last_click is None


def test_is_expired_is_strict():
    link = _link()
    assert not link.is_expired(60_001)
    assert link.is_expired(60_002)


@pytest.mark.parametrize("raw", ["", "not json", "{}", "[1, 2]", '[{"id": "x"}]', "null"])
def test_decode_rejects_garbage(raw):
    with pytest.raises(ValueError):
        decode_links(raw)
