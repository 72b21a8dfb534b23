"""Storage module for LivingMUD persistence.

Provides SQLite-based storage for player state across logins and deaths.
"""

from livingmud.storage.database import (
    Database,
    PlayerRecord,
    PlayerStore,
    get_database,
)

__all__ = [
    "Database",
    "PlayerRecord",
    "PlayerStore",
    "get_database",
]
