# =============================================================================
# mobile_core/offline/local_store.py
# Typed Local Cache of Domain Entities (one SQLite box per entity type)
# =============================================================================
"""
LocalStore - durable, typed local cache keyed by entity id.

Features:
- One box (SQLite file) per registered entity type, opened once
- Upsert by id, last writer wins
- Insertion-ordered listing
- Degraded mode: if any box fails to open, every box becomes an empty
  in-memory box and the failure is logged instead of raised
- DataFrame view of a box (pandas)

Box layout::

    <storage_dir>/
    ├── posts.box
    └── users.box
"""

from __future__ import annotations
import sqlite3
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar
import logging

import pandas as pd

from mobile_core.errors import StorageOpenError, error_boundary, handle_error
from mobile_core.logging import LogContext
from mobile_core.models import DEFAULT_SCHEMAS, RecordSchema

logger = logging.getLogger(__name__)

E = TypeVar("E")

BOX_SUFFIX = ".box"
BOX_FORMAT_VERSION = 1

BOX_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS records (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        entity_id INTEGER NOT NULL UNIQUE,
        payload TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS box_meta (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
    """,
)


class StoreStatus(Enum):
    """Outcome of LocalStore.init()."""
    READY = "ready"
    DEGRADED_EMPTY = "degraded_empty"


class Box:
    """
    A named collection of records of one entity type, keyed by id.

    All statements against a box run under its lock.
    """

    def __init__(self, schema: RecordSchema, connection: sqlite3.Connection, path: Optional[Path]):
        self.schema = schema
        self.path = path
        self._conn = connection
        self._lock = threading.Lock()

    @property
    def key(self) -> str:
        return self.schema.box_key

    @property
    def in_memory(self) -> bool:
        return self.path is None

    def get(self, entity_id: int) -> Optional[str]:
        with self._lock:
            row = self._conn.execute(
                "SELECT payload FROM records WHERE entity_id = ?",
                [entity_id],
            ).fetchone()
        return row[0] if row else None

    def put(self, entity_id: int, payload: str) -> None:
        with self._lock, self._conn:
            self._conn.execute(
                """
                INSERT INTO records (entity_id, payload) VALUES (?, ?)
                ON CONFLICT(entity_id) DO UPDATE SET payload = excluded.payload
                """,
                [entity_id, payload],
            )

    def delete(self, entity_id: int) -> bool:
        with self._lock, self._conn:
            cursor = self._conn.execute(
                "DELETE FROM records WHERE entity_id = ?",
                [entity_id],
            )
        return cursor.rowcount > 0

    def values(self) -> List[str]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT payload FROM records ORDER BY seq ASC"
            ).fetchall()
        return [row[0] for row in rows]

    def clear(self) -> int:
        with self._lock, self._conn:
            cursor = self._conn.execute("DELETE FROM records")
        return cursor.rowcount

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class LocalStore:
    """
    Typed local cache of domain entities.

    Usage:
        store = LocalStore(config.storage_dir)
        store.init()
        store.put(Post(id=1, title="a", description="b", user_id=2))
        store.get(Post, 1)
    """

    def __init__(
        self,
        storage_dir: Path,
        schemas: Iterable[RecordSchema] = DEFAULT_SCHEMAS,
    ):
        """
        Args:
            storage_dir: Directory holding the box files
            schemas: Entity types to open a box for
        """
        self.storage_dir = Path(storage_dir)
        self._schemas: Dict[type, RecordSchema] = {}
        for schema in schemas:
            if schema.entity_type in self._schemas:
                raise ValueError(f"Entity type registered twice: {schema.entity_type.__name__}")
            self._schemas[schema.entity_type] = schema
        tags = [s.type_tag for s in self._schemas.values()]
        if len(set(tags)) != len(tags):
            raise ValueError("Type tags must be unique across entity types")

        self._boxes: Dict[type, Box] = {}
        self._status: Optional[StoreStatus] = None
        self._init_lock = threading.Lock()

    @property
    def status(self) -> Optional[StoreStatus]:
        """None until init() ran."""
        return self._status

    @property
    def is_degraded(self) -> bool:
        return self._status is StoreStatus.DEGRADED_EMPTY

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    def init(self) -> StoreStatus:
        """
        Open one box per registered entity type. Idempotent.

        Returns:
            READY, or DEGRADED_EMPTY when a box failed to open
        """
        with self._init_lock:
            if self._status is not None:
                return self._status

            with LogContext(logger, f"Opening storage boxes in {self.storage_dir}"):
                try:
                    self.storage_dir.mkdir(parents=True, exist_ok=True)
                    for entity_type, schema in self._schemas.items():
                        self._boxes[entity_type] = self._open_box(schema)
                    self._status = StoreStatus.READY
                except StorageOpenError as e:
                    handle_error(e)
                    self._enter_degraded_mode()
                except OSError as e:
                    handle_error(StorageOpenError(
                        f"Storage directory unavailable: {e}",
                        path=str(self.storage_dir),
                    ))
                    self._enter_degraded_mode()

            return self._status

    def _ensure_initialized(self) -> None:
        if self._status is None:
            self.init()

    def _open_box(self, schema: RecordSchema) -> Box:
        """
        Open (or create) the box file for ``schema`` and verify its metadata.

        Raises:
            StorageOpenError: If the file is unreadable or belongs to another
                entity type or format version
        """
        path = self.storage_dir / f"{schema.box_key}{BOX_SUFFIX}"
        conn = None
        try:
            conn = sqlite3.connect(str(path), check_same_thread=False)
            self._prepare(conn, schema)
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            raise StorageOpenError(
                f"Could not open box '{schema.box_key}': {e}",
                box=schema.box_key,
                path=str(path),
            ) from e
        except StorageOpenError:
            conn.close()
            raise

        logger.debug(f"Opened box '{schema.box_key}' at {path}")
        return Box(schema, conn, path)

    def _prepare(self, conn: sqlite3.Connection, schema: RecordSchema) -> None:
        """Create tables on first open, otherwise check the stored metadata."""
        with conn:
            for statement in BOX_SCHEMA:
                conn.execute(statement)
            meta = dict(conn.execute("SELECT key, value FROM box_meta").fetchall())

            if not meta:
                conn.executemany(
                    "INSERT INTO box_meta (key, value) VALUES (?, ?)",
                    [
                        ("type_tag", str(schema.type_tag)),
                        ("format_version", str(BOX_FORMAT_VERSION)),
                    ],
                )
                return

        expected = {
            "type_tag": str(schema.type_tag),
            "format_version": str(BOX_FORMAT_VERSION),
        }
        for key, value in expected.items():
            if meta.get(key) != value:
                raise StorageOpenError(
                    f"Box '{schema.box_key}' has {key}={meta.get(key)!r}, expected {value!r}",
                    box=schema.box_key,
                )

    def _enter_degraded_mode(self) -> None:
        for box in self._boxes.values():
            box.close()
        self._boxes = {}

        for entity_type, schema in self._schemas.items():
            conn = sqlite3.connect(":memory:", check_same_thread=False)
            self._prepare(conn, schema)
            self._boxes[entity_type] = Box(schema, conn, None)

        self._status = StoreStatus.DEGRADED_EMPTY
        logger.warning("LocalStore running in degraded mode: boxes are empty and not persisted")

    def _box_for(self, entity_type: Type[E]) -> Box:
        self._ensure_initialized()
        try:
            return self._boxes[entity_type]
        except KeyError:
            raise KeyError(f"No box registered for {entity_type.__name__}") from None

    # =========================================================================
    # CRUD OPERATIONS
    # =========================================================================

    @error_boundary(default_return=None)
    def get(self, entity_type: Type[E], entity_id: int) -> Optional[E]:
        """
        Look up an entity by id.

        Returns:
            The entity, or None if it was never written or cannot be decoded
        """
        box = self._box_for(entity_type)
        payload = box.get(entity_id)
        if payload is None:
            return None
        return box.schema.decode(payload)

    def put(self, entity: Any) -> None:
        """Insert or replace the entity with the same id."""
        box = self._box_for(type(entity))
        box.put(entity.id, box.schema.encode(entity))
        logger.debug(f"LocalStore: (Saving) {box.key} id={entity.id}")

    def delete(self, entity_type: Type[E], entity_id: int) -> bool:
        """
        Remove an entity.

        Returns:
            True if something was removed
        """
        removed = self._box_for(entity_type).delete(entity_id)
        logger.debug(f"LocalStore: (Deleting) {entity_type.__name__} id={entity_id} removed={removed}")
        return removed

    def list(self, entity_type: Type[E]) -> List[E]:
        """All cached entities of a type, in insertion order. Undecodable records are skipped."""
        box = self._box_for(entity_type)
        entities: List[E] = []
        for payload in box.values():
            try:
                entities.append(box.schema.decode(payload))
            except (ValueError, TypeError) as e:
                logger.warning(f"LocalStore: skipping undecodable {box.key} record: {e}")
        return entities

    def clear(self, entity_type: Type[E]) -> int:
        """
        Remove every entity of a type.

        Returns:
            Number of records removed
        """
        removed = self._box_for(entity_type).clear()
        logger.info(f"LocalStore: cleared {removed} {entity_type.__name__} record(s)")
        return removed

    # =========================================================================
    # PANDAS INTEGRATION
    # =========================================================================

    def to_dataframe(self, entity_type: Type[E]) -> pd.DataFrame:
        """
        Load a box into a pandas DataFrame.

        Returns:
            One row per cached entity, one column per declared field
        """
        schema = self._box_for(entity_type).schema
        rows = [
            {name: getattr(entity, name) for name in schema.field_names}
            for entity in self.list(entity_type)
        ]
        return pd.DataFrame(rows, columns=list(schema.field_names))

    def close(self) -> None:
        """Close all box connections."""
        for box in self._boxes.values():
            box.close()
        self._boxes = {}
        self._status = None
