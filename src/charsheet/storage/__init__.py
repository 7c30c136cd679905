"""Storage module for character persistence.

Provides SQLite-based storage for character documents and the
authentication collaborator that decides who may see them.
"""

from charsheet.storage.auth import (
    AuthProvider,
    AuthStateCallback,
    AuthUser,
    InMemoryAuthProvider,
)
from charsheet.storage.database import (
    CharacterRecord,
    CharacterRepository,
    deep_merge,
    get_repository,
)

__all__ = [
    "AuthProvider",
    "AuthStateCallback",
    "AuthUser",
    "InMemoryAuthProvider",
    "CharacterRecord",
    "CharacterRepository",
    "deep_merge",
    "get_repository",
]
