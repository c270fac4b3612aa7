"""Repositories module initialization."""

from tenkb_votes.repositories.local_storage import (
    FileLocalStorage,
    InMemoryLocalStorage,
    LocalStorageProtocol,
)

__all__ = [
    "FileLocalStorage",
    "InMemoryLocalStorage",
    "LocalStorageProtocol",
]
