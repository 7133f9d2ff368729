"""
Storage module for Snipster (in-memory implementation).

Design:
    - This is an in-memory reference implementation that satisfies the BaseStorage contract.
    - It is intentionally simple to keep unit tests fast and deterministic.
    - For durable persistence use FileStorage (see `file_storage.py`).
"""

from typing import Dict, Optional

from .base import BaseStorage


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize empty storage dictionary.

        Internal schema:
            self.items = {key: serialized_value}
        """
        self.items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> bool:
        return self.items.pop(key, None) is not None
