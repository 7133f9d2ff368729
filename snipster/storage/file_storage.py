"""
FileStorage – directory-backed storage for Snipster
===================================================

Persists each key as one file inside a directory, giving the same contract as
the in-memory Storage (see `storage.py`) by implementing the `BaseStorage`
interface, so you can switch backends without touching the link logic.

Key Design Points
-----------------
- **Atomic replacement**: `set_item` writes to a temporary file in the same
  directory and then `os.replace`s it over the target. A crash mid-write leaves
  the prior value in place.
- **Safe file names**: keys are percent-encoded before being used as file names,
  so a key can never escape the storage directory.
- **Lazy directory creation**: the directory is created on first write only.

Example
-------
>>> storage = FileStorage("/tmp/snipster")
>>> storage.set_item("url_shortener_links_v1", "[]")
>>> storage.get_item("url_shortener_links_v1")
'[]'
"""

import contextlib
import logging
import os
import tempfile
from typing import Optional
from urllib.parse import quote

from .base import BaseStorage

log = logging.getLogger(__name__)


class FileStorage(BaseStorage):
    """Directory-backed implementation of the storage contract.

    Parameters
    ----------
    directory : str
        Directory holding one `<key>.json` file per key.
    """

    def __init__(self, directory: str) -> None:
        self.directory = directory

    # ---- Internal helpers -------------------------------------------------

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, quote(key, safe="") + ".json")

    # ---- Contract methods -------------------------------------------------

    def get_item(self, key: str) -> Optional[str]:
        """Return the file contents for `key`, or None if the file does not exist."""
        try:
            with open(self._path(key), "r", encoding="utf-8") as fh:
                return fh.read()
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        """Atomically replace the file for `key` with `value`."""
        os.makedirs(self.directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self._path(key))
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
            raise
        log.debug("Wrote %d bytes to %s", len(value), self._path(key))

    def remove_item(self, key: str) -> bool:
        """Delete the file for `key`. Returns True if a file was removed."""
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            return False
        return True
