"""
Runtime configuration for Snipster
==================================

Simple settings module that reads from environment variables (only here),
and exposes a stable `settings` object for the rest of the codebase.
Avoid reading env vars anywhere else; import from this module instead.

Storage
-------
- SNIPSTER_STORAGE_BACKEND : "file" (default) or "memory"
- SNIPSTER_STORAGE_DIR     : directory for the file backend (default ~/.snipster)
- SNIPSTER_STORAGE_KEY     : key of the persisted link collection (default "url_shortener_links_v1")

Link lifecycle
--------------
- SNIPSTER_DEFAULT_VALIDITY_MINUTES : validity when none (or a bad value) is given (default 30)
- SNIPSTER_RETENTION_DAYS           : how long expired links survive housekeeping (default 7)

Short-code generation
---------------------
- SNIPSTER_CODE_LENGTH       : generated code length; default 7; clamped to [3, 30]
- SNIPSTER_CODE_MAX_ATTEMPTS : collision retries before giving up (default 100)
- SNIPSTER_RANDOM_SOURCE     : "system" (default) or "pseudo"

Addressing
----------
- SNIPSTER_BASE_URL     : origin used when rendering short URLs (default "http://localhost")
- SNIPSTER_ROUTE_PREFIX : routing prefix in front of the code (default "r")
"""

import os


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


class _Settings:
    # -------- Storage --------
    STORAGE_BACKEND: str = os.getenv("SNIPSTER_STORAGE_BACKEND", "file").strip().lower()
    STORAGE_DIR: str = os.getenv("SNIPSTER_STORAGE_DIR", os.path.join(os.path.expanduser("~"), ".snipster"))
    STORAGE_KEY: str = os.getenv("SNIPSTER_STORAGE_KEY", "url_shortener_links_v1")

    # -------- Link lifecycle --------
    DEFAULT_VALIDITY_MINUTES: int = max(1, _get_int("SNIPSTER_DEFAULT_VALIDITY_MINUTES", 30))
    RETENTION_DAYS: int = max(0, _get_int("SNIPSTER_RETENTION_DAYS", 7))

    # -------- Short-code generation --------
    CODE_LENGTH: int = max(3, min(30, _get_int("SNIPSTER_CODE_LENGTH", 7)))
    CODE_MAX_ATTEMPTS: int = max(1, _get_int("SNIPSTER_CODE_MAX_ATTEMPTS", 100))
    RANDOM_SOURCE: str = os.getenv("SNIPSTER_RANDOM_SOURCE", "system").strip().lower()

    # -------- Addressing --------
    BASE_URL: str = os.getenv("SNIPSTER_BASE_URL", "http://localhost").rstrip("/")
    ROUTE_PREFIX: str = os.getenv("SNIPSTER_ROUTE_PREFIX", "r").strip("/")

    @property
    def RETENTION_MS(self) -> int:
        return self.RETENTION_DAYS * 24 * 60 * 60 * 1000


settings = _Settings()
