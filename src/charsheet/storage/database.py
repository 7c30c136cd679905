"""SQLite persistence for characters.

Each character is stored as one JSON document owned by a user id, with
the summary fields (name, level, race, classes) kept in columns for
listing. Characters are validated before every write and re-validated,
with their schema version normalized, on every read.

Storage location: ``settings.storage.database_path``.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from charsheet.core.config import get_settings
from charsheet.core.exceptions import (
    CharacterImportError,
    CharacterNotFoundError,
    StorageError,
    StorageErrorCode,
)
from charsheet.core.logging import get_logger
from charsheet.engine.character import CharacterEngine
from charsheet.models.character import Character, CharacterSummary
from charsheet.storage.auth import AuthProvider


logger = get_logger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class CharacterRecord:
    """One row of the characters table.

    Attributes:
        id: Storage id.
        owner_id: User id of the owner.
        name: Character name.
        level: Total character level.
        race: Race name.
        class_summary: Classes as 'Fighter 3/Wizard 2'.
        document: Serialized character.
        created_at: When the character was first stored.
        updated_at: The character's ``last_updated`` at the last write.
    """

    id: str
    owner_id: str
    name: str
    level: int
    race: str
    class_summary: str
    document: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> CharacterRecord:
        """Create from database row."""
        return cls(
            id=row[0],
            owner_id=row[1],
            name=row[2],
            level=row[3],
            race=row[4],
            class_summary=row[5],
            document=row[6],
            created_at=datetime.fromisoformat(row[7]),
            updated_at=datetime.fromisoformat(row[8]),
        )

    def to_summary(self) -> CharacterSummary:
        return CharacterSummary(
            id=self.id,
            name=self.name,
            level=self.level,
            race=self.race,
            classes=self.class_summary,
            last_updated=self.updated_at,
        )


def deep_merge(base: Mapping[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``changes`` into a copy of ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in changes.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


# =============================================================================
# Repository
# =============================================================================

_COLUMNS = "id, owner_id, name, level, race, class_summary, document, created_at, updated_at"


class CharacterRepository:
    """SQLite store of character documents.

    Args:
        db_path: Path to the database file. Defaults to the storage settings.
        engine: Engine used to validate, serialize and load characters.
        auth: When given, only the signed-in user may read or change
            their own characters.
    """

    SCHEMA_VERSION = 1

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        engine: CharacterEngine | None = None,
        auth: AuthProvider | None = None,
    ) -> None:
        self.db_path = Path(db_path) if db_path is not None else get_settings().storage.database_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._engine = engine or CharacterEngine()
        self._auth = auth

        self._init_schema()
        logger.info("Character repository initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection that commits on success."""
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
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    level INTEGER NOT NULL,
                    race TEXT NOT NULL,
                    class_summary TEXT NOT NULL,
                    document TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_characters_owner_updated
                ON characters(owner_id, updated_at DESC)
            """)

            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    # =========================================================================
    # Access Control
    # =========================================================================

    def _require_owner(self, owner_id: str, character_id: str | None = None) -> None:
        if self._auth is None:
            return
        user = self._auth.get_current_user()
        if user is None or user.uid != owner_id:
            logger.info("Storage access denied", character_id=character_id, owner_id=owner_id)
            raise StorageError(
                "Permission denied",
                code=StorageErrorCode.PERMISSION_DENIED,
                character_id=character_id,
            )

    def _require_valid(self, character: Character) -> None:
        result = self._engine.validate_character(character)
        if not result.is_valid:
            raise StorageError(
                "Invalid character data: " + ", ".join(result.errors),
                code=StorageErrorCode.INVALID_CHARACTER_DATA,
                character_id=character.info.storage_id,
                details={"errors": result.errors},
            )

    # =========================================================================
    # Rows
    # =========================================================================

    def _fetch(self, character_id: str) -> CharacterRecord:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_COLUMNS} FROM characters WHERE id = ?", (character_id,))
            row = cursor.fetchone()

        if row is None:
            raise CharacterNotFoundError(character_id)
        try:
            return CharacterRecord.from_row(tuple(row))
        except (TypeError, ValueError) as exc:
            raise StorageError(
                f"Stored character is unreadable: {exc}",
                code=StorageErrorCode.CORRUPTED_DATA,
                character_id=character_id,
            ) from exc

    def _load(self, record: CharacterRecord) -> Character:
        try:
            return self._engine.import_from_json(record.document)
        except CharacterImportError as exc:
            raise StorageError(
                f"Stored character is unreadable: {exc.message}",
                code=StorageErrorCode.CORRUPTED_DATA,
                character_id=record.id,
            ) from exc

    def _write(self, owner_id: str, character: Character, *, insert: bool) -> None:
        info = character.info
        summary = (
            owner_id,
            info.name,
            character.classes.total_level,
            info.race.name,
            character.classes.summary(),
            character.model_dump_json(),
        )
        updated_at = character.last_updated.isoformat()

        with self._get_connection() as conn:
            cursor = conn.cursor()
            if insert:
                cursor.execute(f"""
                    INSERT INTO characters ({_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (info.storage_id, *summary, updated_at, updated_at))
            else:
                cursor.execute("""
                    UPDATE characters
                    SET owner_id = ?, name = ?, level = ?, race = ?, class_summary = ?,
                        document = ?, updated_at = ?
                    WHERE id = ?
                """, (*summary, updated_at, info.storage_id))

    # =========================================================================
    # Character Operations
    # =========================================================================

    def create(self, owner_id: str, character: Character) -> Character:
        """Store a new character for ``owner_id``.

        Assigns a storage id and owner to the character in place.

        Raises:
            StorageError: INVALID_CHARACTER_DATA if the character fails
                validation, PERMISSION_DENIED if another user is signed in.
        """
        self._require_owner(owner_id)
        self._require_valid(character)

        character.info.storage_id = str(uuid4())
        character.info.user_id = owner_id
        self._write(owner_id, character, insert=True)

        logger.info(
            "Character saved",
            character_id=character.info.storage_id,
            owner_id=owner_id,
            name=character.info.name,
        )
        return character

    def get_user_characters(self, owner_id: str) -> list[CharacterSummary]:
        """Summaries of a user's characters, most recently updated first."""
        self._require_owner(owner_id)
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"""
                SELECT {_COLUMNS} FROM characters
                WHERE owner_id = ? ORDER BY updated_at DESC
            """, (owner_id,))
            rows = cursor.fetchall()

        return [CharacterRecord.from_row(tuple(row)).to_summary() for row in rows]

    def get_character(self, character_id: str) -> Character:
        """Load a stored character.

        Raises:
            CharacterNotFoundError: If no character has that id.
            StorageError: CORRUPTED_DATA if the stored document no longer
                loads, PERMISSION_DENIED if it belongs to another user.
        """
        record = self._fetch(character_id)
        self._require_owner(record.owner_id, character_id)
        character = self._load(record)
        character.info.storage_id = record.id
        return character

    def update(self, character_id: str, changes: Mapping[str, Any]) -> Character:
        """Merge ``changes`` into a stored character and save it.

        ``changes`` mirrors the serialized character, e.g.
        ``{"info": {"name": "Thorin"}}``; nested objects merge key by key.

        Raises:
            CharacterNotFoundError: If no character has that id.
            StorageError: INVALID_CHARACTER_DATA if the merged character
                does not parse or fails validation.
        """
        record = self._fetch(character_id)
        self._require_owner(record.owner_id, character_id)
        current = self._load(record)

        merged = deep_merge(current.model_dump(mode="json"), changes)
        merged["info"] = deep_merge(merged.get("info") or {}, {"storage_id": record.id})
        try:
            character = Character.model_validate(merged)
        except PydanticValidationError as exc:
            raise StorageError(
                f"Invalid character data: {exc}",
                code=StorageErrorCode.INVALID_CHARACTER_DATA,
                character_id=character_id,
            ) from exc

        self._engine.recalculate(character)
        self._require_valid(character)
        character.touch()
        self._write(record.owner_id, character, insert=False)

        logger.info("Character updated", character_id=character_id, fields=sorted(changes))
        return character

    def delete(self, character_id: str) -> None:
        """Remove a stored character.

        Raises:
            CharacterNotFoundError: If no character has that id.
        """
        record = self._fetch(character_id)
        self._require_owner(record.owner_id, character_id)
        with self._get_connection() as conn:
            conn.execute("DELETE FROM characters WHERE id = ?", (character_id,))

        logger.info("Character deleted", character_id=character_id)

    def export_character(self, character_id: str) -> str:
        """A stored character as JSON."""
        return self._engine.export_to_json(self.get_character(character_id))

    def import_character(self, owner_id: str, payload: str | bytes) -> Character:
        """Store a character from exported JSON as a new character of ``owner_id``.

        Raises:
            StorageError: PARSE_ERROR if the payload does not import.
        """
        try:
            character = self._engine.import_from_json(payload)
        except CharacterImportError as exc:
            raise StorageError(exc.message, code=StorageErrorCode.PARSE_ERROR) from exc

        character.info.storage_id = None
        return self.create(owner_id, character)

    def count(self, owner_id: str | None = None) -> int:
        """Number of stored characters, optionally for one owner."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            if owner_id is None:
                cursor.execute("SELECT COUNT(*) FROM characters")
            else:
                cursor.execute("SELECT COUNT(*) FROM characters WHERE owner_id = ?", (owner_id,))
            return cursor.fetchone()[0]


# =============================================================================
# Singleton Instance
# =============================================================================


_repository_instance: CharacterRepository | None = None


def get_repository() -> CharacterRepository:
    """Get the global repository at the configured database path."""
    global _repository_instance

    if _repository_instance is None:
        _repository_instance = CharacterRepository()

    return _repository_instance


__all__ = [
    "CharacterRecord",
    "CharacterRepository",
    "deep_merge",
    "get_repository",
]
