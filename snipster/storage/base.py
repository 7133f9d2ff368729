"""
Base storage interface for Snipster.

Purpose:
    Define a small key/value contract (modelled on browser local storage:
    string keys, string values, whole-value replacement) that multiple
    backends can implement without requiring changes to the link logic.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def get_item(self, key: str) -> Optional[str]:
        """
        Return the value stored under `key`, or None if absent.

        Raises:
            OSError: If the backend cannot be read. Callers that must never
            fail (LinkStore.load) catch this.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def set_item(self, key: str, value: str) -> None:
        """
        Replace the value stored under `key`.

        The write is all-or-nothing from the caller's point of view: either the
        new value is stored or the prior value remains.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def remove_item(self, key: str) -> bool:
        """
        Remove `key`.

        Returns:
            bool: False if the key did not exist.
        """
        raise NotImplementedError
