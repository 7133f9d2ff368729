"""
LinkManager module for Snipster.

Responsibilities:
    - Create links: validate URL and alias, assign a unique code, stamp expiry
    - Resolve visits: look up a code, enforce expiry, record the click
    - Store-backed helpers that persist after every mutation (shorten, visit, delete)

Design notes:
    - `create` and `resolve` are pure with respect to storage: they take the
      current collection and return new values. Persisting is the caller's job,
      or use the store-backed helpers which run inside `LinkStore.transact`.
    - Alias uniqueness is checked against every stored code, expired ones
      included, so an expired code stays taken until housekeeping prunes it.
    - Randomness and time are injected (code strategy, clock) for deterministic tests.
"""

import enum
import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple
from urllib.parse import quote, unquote, urlparse

from ..clock import Clock, now_ms
from ..config import settings
from ..errors import (
    AliasTakenError,
    CodeGenerationExhaustedError,
    EmptyUrlError,
    InvalidAliasFormatError,
    InvalidUrlError,
)
from ..models import CODE_PATTERN, DIRECT_REFERRER, Click, CreateLinkRequest, Link
from ..storage.link_store import LinkStore
from .strategies import RandomCodeStrategy

log = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}
MS_PER_MINUTE = 60 * 1000


class ResolveStatus(enum.Enum):
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class ResolveOutcome:
    """
    Result of resolving one visit.

    `url` and `links` are only set for REDIRECT; `links` is the updated
    collection (the matched link replaced by a copy with the new click).
    """

    status: ResolveStatus
    code: str
    url: Optional[str] = None
    links: Optional[List[Link]] = None
    link: Optional[Link] = None


def build_short_url(code: str, base_url: Optional[str] = None, route_prefix: Optional[str] = None) -> str:
    """Render `<base_url>/<route_prefix>/<percent-encoded code>`."""
    base = (settings.BASE_URL if base_url is None else base_url).rstrip("/")
    prefix = (settings.ROUTE_PREFIX if route_prefix is None else route_prefix).strip("/")
    encoded = quote(code, safe="")
    return f"{base}/{prefix}/{encoded}" if prefix else f"{base}/{encoded}"


class LinkManager:
    """Coordinates creation and resolution rules for links."""

    def __init__(
        self,
        store: Optional[LinkStore] = None,
        code_strategy: Optional[RandomCodeStrategy] = None,
        clock: Clock = now_ms,
        max_attempts: Optional[int] = None,
        default_validity_minutes: Optional[int] = None,
    ):
        """
        Args:
            store (Optional[LinkStore]): Persistence for the store-backed helpers.
            code_strategy (Optional[RandomCodeStrategy]): Random code generator.
            clock (Clock): Returns "now" in epoch milliseconds.
            max_attempts (Optional[int]): Generation attempts before giving up.
            default_validity_minutes (Optional[int]): Used for missing or bad validity input.
        """
        self.store = store
        self.code_strategy = code_strategy or RandomCodeStrategy()
        self.clock = clock
        self.max_attempts = settings.CODE_MAX_ATTEMPTS if max_attempts is None else max_attempts
        self.default_validity_minutes = (
            settings.DEFAULT_VALIDITY_MINUTES if default_validity_minutes is None else default_validity_minutes
        )
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.default_validity_minutes <= 0:
            raise ValueError("default_validity_minutes must be positive")

    # ---------------------------------------------------------------------
    # Validation Helpers
    # ---------------------------------------------------------------------
    def _validate_url(self, url: str) -> None:
        """
        Require a parseable URL with an http/https scheme and a host.

        Raises:
            InvalidUrlError: If the URL is malformed or uses another scheme.
        """
        try:
            parsed = urlparse(url)
            parsed.port  # raises ValueError on a malformed port
        except ValueError as exc:
            raise InvalidUrlError() from exc
        if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.hostname:
            raise InvalidUrlError()

    def _validate_alias(self, alias: str, taken: set) -> None:
        if not CODE_PATTERN.fullmatch(alias):
            raise InvalidAliasFormatError()
        if alias in taken:
            raise AliasTakenError()

    def _generate_code(self, taken: set) -> str:
        for _ in range(self.max_attempts):
            code = self.code_strategy.generate()
            if code not in taken:
                return code
        log.warning("Gave up generating a code after %d colliding attempts", self.max_attempts)
        raise CodeGenerationExhaustedError()

    def resolve_validity_minutes(self, value: Any) -> float:
        """
        Coerce the requested validity to a positive number of minutes.

        Missing, non-numeric, non-finite and non-positive values fall back to
        the default (30 minutes unless configured otherwise).
        """
        if isinstance(value, bool) or value is None:
            return self.default_validity_minutes
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                return self.default_validity_minutes
        if not isinstance(value, numbers.Real) or not math.isfinite(value) or value <= 0:
            return self.default_validity_minutes
        return int(value) if float(value).is_integer() else float(value)

    # ---------------------------------------------------------------------
    # Core API
    # ---------------------------------------------------------------------
    def create(self, request: CreateLinkRequest, existing: Sequence[Link]) -> Link:
        """
        Build a new link from `request`, unique against `existing`.

        Rules:
            - URL is trimmed; blank -> EmptyUrlError.
            - URL must parse with an http/https scheme -> else InvalidUrlError.
            - A non-blank alias must match [A-Za-z0-9_-]{3,30} (InvalidAliasFormatError)
              and must not equal any stored code (AliasTakenError).
            - Without an alias a random code is drawn, retrying on collision up to
              `max_attempts` times (CodeGenerationExhaustedError).
            - expires_at = created_at + validity_minutes * 60000.

        Returns:
            Link: The new link with no clicks. The caller prepends and saves it.

        Raises:
            CreationError: One of the subclasses above; nothing is persisted.
        """
        url = (request.original_url or "").strip()
        if not url:
            raise EmptyUrlError()
        self._validate_url(url)

        taken = {link.code for link in existing}
        alias = (request.alias or "").strip()
        if alias:
            self._validate_alias(alias, taken)
            code = alias
        else:
            code = self._generate_code(taken)

        minutes = self.resolve_validity_minutes(request.validity_minutes)
        created_at = self.clock()
        expires_at = created_at + int(round(minutes * MS_PER_MINUTE))
        link = Link(
            id=f"{created_at}-{code}",
            original_url=url,
            code=code,
            created_at=created_at,
            expires_at=expires_at,
        )
        log.info("Created link %s -> %s (expires %d)", code, url, expires_at)
        return link

    def resolve(self, code: str, links: Sequence[Link], referrer: Optional[str] = None) -> ResolveOutcome:
        """
        Decide what a visit to `code` does.

        Steps:
            1) Percent-decode the code.
            2) Exact, case-sensitive lookup -> NOT_FOUND when absent.
            3) now > expires_at -> EXPIRED (no click recorded, link is kept).
            4) Otherwise append Click(now, referrer or "direct") to a copy of the
               link and return REDIRECT with the updated collection.

        The caller must persist `outcome.links` before navigating to `outcome.url`.
        """
        decoded = unquote(code)
        index = next((i for i, link in enumerate(links) if link.code == decoded), None)
        if index is None:
            log.debug("Resolve %r: not found", decoded)
            return ResolveOutcome(ResolveStatus.NOT_FOUND, decoded)

        link = links[index]
        now = self.clock()
        if link.is_expired(now):
            log.debug("Resolve %r: expired at %d", decoded, link.expires_at)
            return ResolveOutcome(ResolveStatus.EXPIRED, decoded, link=link)

        updated_link = link.with_click(Click(timestamp=now, referrer=referrer or DIRECT_REFERRER))
        updated = list(links)
        updated[index] = updated_link
        log.debug("Resolve %r: redirect to %s", decoded, link.original_url)
        return ResolveOutcome(
            ResolveStatus.REDIRECT,
            decoded,
            url=link.original_url,
            links=updated,
            link=updated_link,
        )

    # ---------------------------------------------------------------------
    # Store-backed helpers
    # ---------------------------------------------------------------------
    def _require_store(self) -> LinkStore:
        if self.store is None:
            raise RuntimeError("LinkManager has no LinkStore configured")
        return self.store

    def shorten(
        self,
        original_url: str,
        alias: Optional[str] = None,
        validity_minutes: Any = None,
    ) -> Link:
        """Create a link, prepend it to the stored collection and persist."""
        request = CreateLinkRequest(original_url=original_url, alias=alias, validity_minutes=validity_minutes)

        def _step(links: List[Link]) -> Tuple[List[Link], Link]:
            link = self.create(request, links)
            return [link] + links, link

        return self._require_store().transact(_step)

    def visit(self, code: str, referrer: Optional[str] = None) -> ResolveOutcome:
        """Resolve a visit and persist the recorded click before returning."""

        def _step(links: List[Link]) -> Tuple[Optional[List[Link]], ResolveOutcome]:
            outcome = self.resolve(code, links, referrer=referrer)
            return outcome.links, outcome

        outcome = self._require_store().transact(_step)
        log.info("Visit %r -> %s", outcome.code, outcome.status.value)
        return outcome

    def delete_link(self, link_id: str) -> bool:
        """Remove the link with `link_id`. Returns False if no such link exists."""

        def _step(links: List[Link]) -> Tuple[Optional[List[Link]], bool]:
            kept = [link for link in links if link.id != link_id]
            if len(kept) == len(links):
                return None, False
            return kept, True

        removed = self._require_store().transact(_step)
        if removed:
            log.info("Deleted link %s", link_id)
        return removed

    def list_links(self) -> List[Link]:
        """Return the stored collection, newest first."""
        return self._require_store().load()
