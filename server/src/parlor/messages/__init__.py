"""Messages: storage, preparation and incremental updates."""

from .prepare import prepare_for_storage, sanitize_html
from .store import MessageStore
from .sync import PostResult, Updates, UpdateSynchronizer

__all__ = [
    "MessageStore",
    "PostResult",
    "Updates",
    "UpdateSynchronizer",
    "prepare_for_storage",
    "sanitize_html",
]
