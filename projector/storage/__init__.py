"""
Entity Storage Layer

RESPONSIBILITY: Persist derived entity rows, one table per entity kind
ALLOWED INPUTS: Whole Entity rows from the projection layer
OUTPUTS: Entity copies, counts, paged listings

WHAT THIS LAYER MUST NOT DO:
============================
- Interpret or validate entity contents
- Apply partial-field updates (rows are always written whole)
- Treat a missing row as an error (absence is a normal answer)
- Swallow write failures (they propagate to the ingestion host)

BOUNDARY ENFORCEMENT:
=====================
- load() returns an independent copy; mutating it changes nothing
  until upsert() is called
- No locking: the ingestion host delivers events one at a time
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, List, Optional
import json
import logging
import os
import sqlite3

from ..contracts.base import Error, ErrorCode, EntityStoreError
from ..contracts.entities import Entity, EntityKind, entity_from_dict

logger = logging.getLogger(__name__)


# =============================================================================
# STORAGE INTERFACE (Dependency Inversion)
# =============================================================================

class EntityStore:
    """
    Abstract entity store.

    Implementations can use different storage systems (memory, sqlite)
    while keeping the same load/upsert semantics.
    """

    def load(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        """Load a row by id, or None when absent."""
        raise NotImplementedError

    def upsert(self, entity: Entity) -> None:
        """Insert or fully replace the row with entity.id."""
        raise NotImplementedError

    def count(self, kind: EntityKind) -> int:
        raise NotImplementedError

    def list(self, kind: EntityKind, limit: int = 100, offset: int = 0) -> List[Entity]:
        """Rows of one kind ordered by id."""
        raise NotImplementedError

    def clear(self) -> None:
        """Drop every row of every kind."""
        raise NotImplementedError

    def counts(self) -> Dict[str, int]:
        return {kind.value: self.count(kind) for kind in EntityKind}


# =============================================================================
# IN-MEMORY STORE (Reference Implementation)
# =============================================================================

class InMemoryEntityStore(EntityStore):
    """
    In-memory implementation.

    Rows are kept serialized so callers can never alias stored state.
    Suitable for testing and small replays.
    """

    def __init__(self):
        self._tables: Dict[EntityKind, Dict[str, Dict[str, object]]] = {
            kind: {} for kind in EntityKind
        }

    def load(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        row = self._tables[kind].get(entity_id)
        if row is None:
            return None
        return entity_from_dict(kind, dict(row))

    def upsert(self, entity: Entity) -> None:
        self._tables[entity.KIND][entity.id] = entity.to_dict()

    def count(self, kind: EntityKind) -> int:
        return len(self._tables[kind])

    def list(self, kind: EntityKind, limit: int = 100, offset: int = 0) -> List[Entity]:
        table = self._tables[kind]
        ids = sorted(table)[offset:offset + limit]
        return [entity_from_dict(kind, dict(table[i])) for i in ids]

    def clear(self) -> None:
        for table in self._tables.values():
            table.clear()


# =============================================================================
# SQLITE STORE
# =============================================================================

class SqliteEntityStore(EntityStore):
    """
    SQLite implementation: one table per entity kind.

    Each row is a JSON document keyed by id. JSON keeps arbitrary
    precision integers intact, which SQLite INTEGER columns would not.
    """

    def __init__(self, database_path: str):
        self._db_path = database_path
        directory = os.path.dirname(os.path.abspath(database_path))
        os.makedirs(directory, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create one table per entity kind."""
        with self._get_conn() as conn:
            for kind in EntityKind:
                conn.execute(f'''
                    CREATE TABLE IF NOT EXISTS "{kind.value}" (
                        id TEXT PRIMARY KEY,
                        data TEXT NOT NULL
                    )
                ''')

    @contextmanager
    def _get_conn(self):
        """Get database connection."""
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def load(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        with self._get_conn() as conn:
            row = conn.execute(
                f'SELECT data FROM "{kind.value}" WHERE id = ?',
                (entity_id,)
            ).fetchone()

        if row is None:
            return None
        return entity_from_dict(kind, json.loads(row['data']))

    def upsert(self, entity: Entity) -> None:
        try:
            with self._get_conn() as conn:
                conn.execute(f'''
                    INSERT INTO "{entity.KIND.value}" (id, data) VALUES (?, ?)
                    ON CONFLICT(id) DO UPDATE SET data = excluded.data
                ''', (entity.id, json.dumps(entity.to_dict(), sort_keys=True)))
        except sqlite3.Error as e:
            logger.error("Write to %s failed for %s: %s", entity.KIND.value, entity.id, e)
            raise EntityStoreError(Error.create(
                ErrorCode.STORE_WRITE_FAILED,
                f"Failed to write {entity.KIND.value} {entity.id}: {e}",
                kind=entity.KIND.value,
                entity_id=entity.id,
            )) from e

    def count(self, kind: EntityKind) -> int:
        with self._get_conn() as conn:
            return conn.execute(f'SELECT COUNT(*) FROM "{kind.value}"').fetchone()[0]

    def list(self, kind: EntityKind, limit: int = 100, offset: int = 0) -> List[Entity]:
        with self._get_conn() as conn:
            rows = conn.execute(
                f'SELECT data FROM "{kind.value}" ORDER BY id LIMIT ? OFFSET ?',
                (limit, offset)
            ).fetchall()
        return [entity_from_dict(kind, json.loads(row['data'])) for row in rows]

    def clear(self) -> None:
        with self._get_conn() as conn:
            for kind in EntityKind:
                conn.execute(f'DELETE FROM "{kind.value}"')


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class EntityStoreConfig:
    """Configuration for entity storage."""
    backend_type: str = "memory"  # "memory" or "sqlite"
    database_path: Optional[str] = None


def create_store(config: Optional[EntityStoreConfig] = None) -> EntityStore:
    """Create storage backend based on configuration."""
    config = config or EntityStoreConfig()
    if config.backend_type == "sqlite":
        if not config.database_path:
            raise ValueError("sqlite backend requires database_path")
        return SqliteEntityStore(config.database_path)
    if config.backend_type != "memory":
        raise ValueError(f"Unknown store backend: {config.backend_type}")
    return InMemoryEntityStore()


__all__ = [
    'EntityStore',
    'InMemoryEntityStore',
    'SqliteEntityStore',
    'EntityStoreConfig',
    'create_store',
]
