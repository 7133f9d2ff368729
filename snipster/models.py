"""
Data model for Snipster.

Responsibilities:
    - Describe a shortened link (`Link`) and its append-only click log (`Click`)
    - Describe the creation input (`CreateLinkRequest`)
    - Encode/decode the persisted collection (a JSON array of links)

Persisted layout (one record per link)::

    [{"id": str, "originalUrl": str, "code": str,
      "createdAt": int, "expiresAt": int,
      "clicks": [{"ts": int, "ref": str}, ...]}, ...]

Models are frozen: a link only "changes" by being replaced with a copy that has
one more click (see `Link.with_click`).
"""

import json
import re
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,30}$")
DIRECT_REFERRER = "direct"


class Click(BaseModel):
    """A single recorded visit."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int = Field(alias="ts")
    referrer: str = Field(default=DIRECT_REFERRER, alias="ref")


class Link(BaseModel):
    """A shortened URL with its expiry and click log."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    original_url: str = Field(alias="originalUrl")
    code: str = Field(pattern=CODE_PATTERN.pattern)
    created_at: int = Field(alias="createdAt")
    expires_at: int = Field(alias="expiresAt")
    clicks: Tuple[Click, ...] = ()

    @model_validator(mode="after")
    def _check_expiry_after_creation(self) -> "Link":
        if self.expires_at <= self.created_at:
            raise ValueError("expiresAt must be greater than createdAt")
        return self

    def is_expired(self, now: int) -> bool:
        """Expiry is strict: a link is still valid at exactly `expires_at`."""
        return now > self.expires_at

    def with_click(self, click: Click) -> "Link":
        """Return a copy of this link with `click` appended to its log."""
        return self.model_copy(update={"clicks": self.clicks + (click,)})

    @property
    def last_click(self) -> Optional[Click]:
        return self.clicks[-1] if self.clicks else None


class CreateLinkRequest(BaseModel):
    """
    Input for link creation.

    Fields are deliberately loose (raw form values): trimming, URL validation,
    alias rules and the validity default are all applied by the manager so
    each failure maps onto a specific creation error.
    """

    original_url: Optional[str] = ""
    alias: Optional[str] = None
    validity_minutes: Any = None


_LINKS_ADAPTER = TypeAdapter(List[Link])


def encode_links(links: Sequence[Link]) -> str:
    """Serialize a link collection into the persisted JSON layout."""
    return json.dumps(_LINKS_ADAPTER.dump_python(list(links), by_alias=True, mode="json"))


def decode_links(raw: str) -> List[Link]:
    """
    Parse the persisted JSON layout back into links.

    Raises:
        pydantic.ValidationError / ValueError: If the blob is not valid JSON or
        any record violates the schema.
    """
    return _LINKS_ADAPTER.validate_json(raw)
