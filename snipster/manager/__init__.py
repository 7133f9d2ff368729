from .link_manager import LinkManager, ResolveOutcome, ResolveStatus, build_short_url
from .strategies import (
    BaseRandomSource,
    PseudoRandomSource,
    RandomCodeStrategy,
    SystemRandomSource,
    get_random_source,
)

__all__ = [
    "LinkManager",
    "ResolveOutcome",
    "ResolveStatus",
    "build_short_url",
    "BaseRandomSource",
    "PseudoRandomSource",
    "RandomCodeStrategy",
    "SystemRandomSource",
    "get_random_source",
]
