"""
Storage factory – switch storage backend from config (lazy env version)
======================================================================

This module centralizes selection of the storage backend (in-memory vs file)
so the rest of the app can stay ignorant of where data lives.

- Reads environment **at call time** to avoid stale values in tests.

Environment variables
---------------------
- SNIPSTER_STORAGE_BACKEND: "file" (default) or "memory"
- SNIPSTER_STORAGE_DIR:     directory for the file backend
"""

import logging
import os
from typing import Optional

from snipster.config import settings
from snipster.storage.base import BaseStorage
from snipster.storage.file_storage import FileStorage
from snipster.storage.storage import Storage

log = logging.getLogger(__name__)


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a Storage-like object based on configuration.

    Parameters
    ----------
    backend : str, optional
        "file" or "memory". If omitted, reads SNIPSTER_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend. For the file backend, use directory="...".

    Returns
    -------
    BaseStorage-compatible instance
    """
    be = (backend or os.getenv("SNIPSTER_STORAGE_BACKEND", settings.STORAGE_BACKEND)).strip().lower()
    log.debug("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "file":
        directory = kwargs.get("directory") or os.getenv("SNIPSTER_STORAGE_DIR", settings.STORAGE_DIR)
        return FileStorage(directory=directory)

    raise ValueError(f"Unknown storage backend: {be!r}")
