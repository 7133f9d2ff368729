"""
LinkStore: the persisted link collection.

Responsibilities:
    - Load the whole collection from a BaseStorage backend (never failing the caller)
    - Save the whole collection, replacing prior content
    - Prune long-expired links (housekeeping)
    - Serialize read-modify-write sequences within a process (`transact`)

Design notes:
    - The collection lives under a single key (settings.STORAGE_KEY) as one JSON blob.
      There is no finer-grained persistence: every mutation rewrites the blob.
    - Missing, corrupt or schema-invalid data loads as an empty collection.
    - `transact` holds an in-process lock across load/modify/save. It does not
      protect against other processes sharing the same backend.
"""

import logging
import threading
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from pydantic import ValidationError

from ..clock import Clock, now_ms
from ..config import settings
from ..models import Link, decode_links, encode_links
from .base import BaseStorage

log = logging.getLogger(__name__)

T = TypeVar("T")


class LinkStore:
    def __init__(
        self,
        storage: BaseStorage,
        key: Optional[str] = None,
        clock: Clock = now_ms,
    ):
        """
        Args:
            storage (BaseStorage): Key/value backend holding the serialized collection.
            key (Optional[str]): Storage key; defaults to settings.STORAGE_KEY.
            clock (Clock): Returns "now" in epoch milliseconds (injectable for tests).
        """
        self.storage = storage
        self.key = key or settings.STORAGE_KEY
        self.clock = clock
        self._lock = threading.RLock()

    def load(self) -> List[Link]:
        """
        Deserialize the persisted collection.

        Returns:
            List[Link]: Stored links, or an empty list when the data is missing,
            unreadable, not JSON, or does not match the schema.
        """
        try:
            raw = self.storage.get_item(self.key)
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("Could not read %r from storage, treating as empty: %s", self.key, exc)
            return []
        if raw is None:
            return []
        try:
            return decode_links(raw)
        except (ValidationError, ValueError) as exc:
            log.warning("Discarding unparsable link collection under %r: %s", self.key, exc)
            return []

    def save(self, links: Sequence[Link]) -> None:
        """Serialize and persist the full collection, replacing prior content."""
        self.storage.set_item(self.key, encode_links(links))
        log.debug("Saved %d links under %r", len(links), self.key)

    def prune(self, links: Sequence[Link], retention_ms: Optional[int] = None) -> List[Link]:
        """
        Keep only links with `expires_at + retention_ms > now`.

        Args:
            links (Sequence[Link]): Collection to filter.
            retention_ms (Optional[int]): Retention window; defaults to settings.RETENTION_MS.
        """
        window = settings.RETENTION_MS if retention_ms is None else retention_ms
        now = self.clock()
        return [link for link in links if link.expires_at + window > now]

    def housekeeping(self, retention_ms: Optional[int] = None) -> List[Link]:
        """
        Startup pruning: load, prune, and persist only if something was removed.

        Returns:
            List[Link]: The (possibly pruned) collection.
        """
        with self._lock:
            links = self.load()
            pruned = self.prune(links, retention_ms)
            if len(pruned) != len(links):
                self.save(pruned)
                log.info("Housekeeping pruned %d expired link(s)", len(links) - len(pruned))
            return pruned

    def transact(self, fn: Callable[[List[Link]], Tuple[Optional[Sequence[Link]], T]]) -> T:
        """
        Run a read-modify-write step under the store lock.

        `fn` receives the current collection and returns `(new_links, result)`.
        When `new_links` is None nothing is written. Exceptions raised by `fn`
        propagate and leave the stored collection untouched.
        """
        with self._lock:
            links = self.load()
            new_links, result = fn(links)
            if new_links is not None:
                self.save(new_links)
            return result
