"""SQLite persistence for player state.

The engine saves a player at the points where the game demands it (death,
resurrection, logout) and restores one on login. The record is the
player's Living serialized as JSON; the engine never looks inside it.

Guests are never persisted.

Storage location: data/livingmud.db (see StorageSettings.database_path)
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Generator, Protocol

from pydantic import ValidationError as PydanticValidationError

from livingmud.core.exceptions import PersistenceError
from livingmud.core.logging import get_logger
from livingmud.models.living import Living

logger = get_logger(__name__)

UNSAVEABLE_NAMES = frozenset({"", "guest"})


class PlayerStore(Protocol):
    """Save/load round-trip used by the engine."""

    def save_player(self, player: Living) -> bool: ...

    def load_player(self, name: str) -> Living | None: ...


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class PlayerRecord:
    """A stored player row.

    Attributes:
        name: Lower-cased player name (primary key).
        state_json: Serialized Living.
        location: Where the player was when saved.
        saved_at: When the record was last written.
    """

    name: str
    state_json: str
    location: str | None
    saved_at: datetime

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> PlayerRecord:
        """Create from database row."""
        return cls(
            name=row[0],
            state_json=row[1],
            location=row[2],
            saved_at=datetime.fromisoformat(row[3]),
        )


# =============================================================================
# Database Class
# =============================================================================


class Database:
    """SQLite database of player records."""

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured path.
        """
        if db_path is None:
            from livingmud.core.config import get_settings

            self.db_path = get_settings().storage.database_path
        else:
            self.db_path = Path(db_path)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info(f"Database initialized at {self.db_path}")

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS players (
                    name TEXT PRIMARY KEY,
                    state_json TEXT NOT NULL,
                    location TEXT,
                    saved_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Player Operations
    # =========================================================================

    @staticmethod
    def can_save(name: str) -> bool:
        return name.strip().lower() not in UNSAVEABLE_NAMES

    def save_player(self, player: Living) -> bool:
        """Insert or replace a player's record.

        Args:
            player: The player to persist.

        Returns:
            False if the player is a guest and was not saved.

        Raises:
            PersistenceError: If the database write fails.
        """
        if not self.can_save(player.name):
            return False

        name = player.name.lower()
        try:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO players (name, state_json, location, saved_at)
                    VALUES (?, ?, ?, ?)
                """, (name, player.model_dump_json(), player.location, datetime.now().isoformat()))
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to save player: {exc}", player_name=name) from exc

        logger.info(f"Saved player: {name}")
        return True

    def get_record(self, name: str) -> PlayerRecord | None:
        """Get the raw stored record for a player."""
        with self._get_connection() as conn:
            cursor = conn.execute("""
                SELECT name, state_json, location, saved_at
                FROM players WHERE name = ?
            """, (name.lower(),))
            row = cursor.fetchone()

        if row:
            return PlayerRecord.from_row(tuple(row))
        return None

    def load_player(self, name: str) -> Living | None:
        """Restore a player.

        Returns:
            The player, or None if no record exists or the name is a guest.

        Raises:
            PersistenceError: If the stored state cannot be parsed.
        """
        if not self.can_save(name):
            return None

        record = self.get_record(name)
        if record is None:
            return None

        try:
            return Living.model_validate_json(record.state_json)
        except PydanticValidationError as exc:
            raise PersistenceError(
                "Stored player state is corrupt",
                player_name=record.name,
                details={"errors": exc.error_count()},
            ) from exc

    def list_players(self) -> list[str]:
        """Names of all stored players, alphabetically."""
        with self._get_connection() as conn:
            cursor = conn.execute("SELECT name FROM players ORDER BY name")
            return [row[0] for row in cursor.fetchall()]

    def delete_player(self, name: str) -> bool:
        """Delete a player's record.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM players WHERE name = ?", (name.lower(),))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted player: {name}")

        return deleted


# =============================================================================
# Singleton Access
# =============================================================================

_database: Database | None = None


def get_database() -> Database:
    """Get the shared database instance, creating it on first use."""
    global _database
    if _database is None:
        _database = Database()
    return _database


__all__ = [
    "PlayerStore",
    "PlayerRecord",
    "Database",
    "get_database",
]
