from .base import BaseStorage
from .storage import Storage
from .file_storage import FileStorage
from .storage_factory import get_storage
from .link_store import LinkStore

__all__ = ["BaseStorage", "Storage", "FileStorage", "get_storage", "LinkStore"]
