"""
Repository layer for score definitions, field schemas and records.

Each repository class accepts an optional Database instance,
defaulting to the module-level singleton when not provided.
Thread-safe: each method opens its own connection via db.get_connection().
"""

import json
from typing import Any, Callable, Dict, List, Optional

from common.database import db as _default_db
from common.errors import ScoreDefinitionNotFoundError, ScoreStorageError
from common.logging.logger import get_logger
from common.models import FieldDefinition, RecordRow, decode_value, encode_value
from scoring.definitions import ScoreDefinition
from scoring.protocols import DefinitionStore, FieldExistenceChecker, FieldRecord, RecordSource
from scoring.records import InMemoryRecord

logger = get_logger("repositories")


class DefinitionRepository(DefinitionStore):
    """Score definitions stored as JSON blobs keyed by name."""

    def __init__(self, database=None):
        self._db = database or _default_db

    @staticmethod
    def _parse(name: str, blob: str) -> ScoreDefinition:
        try:
            data = json.loads(blob)
        except json.JSONDecodeError as e:
            raise ScoreStorageError("score_definitions", f"definition '{name}' is not valid JSON: {e}") from e
        return ScoreDefinition.from_dict(name, data)

    # ---- reads ----

    def get_definitions(self) -> Dict[str, ScoreDefinition]:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT name, definition FROM score_definitions ORDER BY rowid")
            return {name: self._parse(name, blob) for name, blob in cursor.fetchall()}
        finally:
            conn.close()

    def get_definition(self, name: str) -> Optional[ScoreDefinition]:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT definition FROM score_definitions WHERE name = ?", (name,))
            row = cursor.fetchone()
            if not row:
                return None
            return self._parse(name, row[0])
        finally:
            conn.close()

    def exists(self, name: str) -> bool:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM score_definitions WHERE name = ?", (name,))
            return cursor.fetchone() is not None
        finally:
            conn.close()

    def require(self, name: str) -> ScoreDefinition:
        """Like get_definition, but raises ScoreDefinitionNotFoundError when absent."""
        definition = self.get_definition(name)
        if definition is None:
            raise ScoreDefinitionNotFoundError(name)
        return definition

    # ---- writes ----

    def save(self, definition: ScoreDefinition) -> None:
        """Insert or replace a definition, keeping its original position."""
        with self._db.connection() as conn:
            conn.execute("""
                INSERT INTO score_definitions (name, definition)
                VALUES (?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    definition = excluded.definition,
                    updated_at = CURRENT_TIMESTAMP
            """, (definition.name, json.dumps(definition.to_dict())))

    def delete(self, name: str) -> bool:
        """Delete a definition. Returns False if it did not exist."""
        with self._db.connection() as conn:
            cursor = conn.execute("DELETE FROM score_definitions WHERE name = ?", (name,))
            deleted = cursor.rowcount > 0
        if not deleted:
            logger.warning(f"Attempted to delete non-existent score definition: {name}")
        return deleted

    def import_definitions(self, data: Dict[str, Dict[str, Any]]) -> List[str]:
        """Save every entry of a ``{name: definition_dict}`` mapping."""
        names = []
        for name, raw in data.items():
            self.save(ScoreDefinition.from_dict(name, raw))
            names.append(name)
        return names


class FieldRepository(FieldExistenceChecker):
    """Per-bundle field schemas; answers field-existence preconditions."""

    def __init__(self, database=None):
        self._db = database or _default_db

    def field_exists(self, entity_type: str, bundle: str, field_name: str) -> bool:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT 1 FROM field_definitions
                WHERE entity_type = ? AND bundle = ? AND field_name = ?
            """, (entity_type, bundle, field_name))
            return cursor.fetchone() is not None
        finally:
            conn.close()

    def get_fields(self, entity_type: str, bundle: str) -> Dict[str, FieldDefinition]:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT entity_type, bundle, field_name, field_type, label, is_multiple
                FROM field_definitions
                WHERE entity_type = ? AND bundle = ?
                ORDER BY field_name
            """, (entity_type, bundle))
            rows = [FieldDefinition.from_row(row) for row in cursor.fetchall()]
            return {f.field_name: f for f in rows}
        finally:
            conn.close()

    def get_score_fields(self, entity_type: str, bundle: str) -> Dict[str, str]:
        """Numeric fields that can hold a score, as {field_name: label}."""
        return {
            name: f.label or name
            for name, f in self.get_fields(entity_type, bundle).items()
            if f.is_numeric
        }

    def get_available_bundles(self, entity_type: str) -> List[str]:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT DISTINCT bundle FROM field_definitions
                WHERE entity_type = ?
                UNION
                SELECT DISTINCT bundle FROM records
                WHERE entity_type = ?
                ORDER BY bundle
            """, (entity_type, entity_type))
            return [row[0] for row in cursor.fetchall()]
        finally:
            conn.close()

    def add_field(self, field: FieldDefinition) -> None:
        with self._db.connection() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO field_definitions
                (entity_type, bundle, field_name, field_type, label, is_multiple)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                field.entity_type, field.bundle, field.field_name,
                field.field_type, field.label, int(field.is_multiple),
            ))

    def create_score_field(
        self,
        entity_type: str,
        bundle: str,
        field_name: str,
        label: Optional[str] = None,
        field_type: str = "decimal",
    ) -> bool:
        """Create a numeric score field if missing. Returns True if it was created."""
        if self.field_exists(entity_type, bundle, field_name):
            return False
        self.add_field(FieldDefinition(
            entity_type=entity_type,
            bundle=bundle,
            field_name=field_name,
            field_type=field_type,
            label=label or field_name,
        ))
        logger.info(f"Created score field {field_name} on {entity_type}:{bundle}")
        return True


class RecordRepository(RecordSource):
    """Records and terms, loaded as InMemoryRecord snapshots."""

    def __init__(self, database=None, fields: Optional[FieldRepository] = None):
        self._db = database or _default_db
        self._fields = fields or FieldRepository(self._db)

    # ---- reads ----

    def find_ids(self, entity_type: str, bundle: str) -> List[str]:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT id FROM records
                WHERE entity_type = ? AND bundle = ?
                ORDER BY rowid
            """, (entity_type, bundle))
            return [row[0] for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_row(self, entity_type: str, record_id: Any) -> Optional[RecordRow]:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT entity_type, id, bundle, fields, updated_at
                FROM records WHERE entity_type = ? AND id = ?
            """, (entity_type, str(record_id)))
            row = cursor.fetchone()
            if not row:
                return None
            try:
                raw = json.loads(row[3] or "{}")
            except json.JSONDecodeError as e:
                raise ScoreStorageError("records", f"{entity_type}:{record_id} has invalid fields JSON: {e}") from e
            fields = {k: decode_value(v) for k, v in raw.items()}
            return RecordRow.from_row(row, fields)
        finally:
            conn.close()

    def load(self, entity_type: str, record_id: Any) -> Optional[InMemoryRecord]:
        """
        Load a fresh snapshot of a record.

        When the bundle has field definitions, they decide which fields exist
        (a defined field may be empty); otherwise the stored keys do.
        References resolve lazily through this repository.
        """
        row = self.get_row(entity_type, record_id)
        if row is None:
            return None

        schema = self._fields.get_fields(row.entity_type, row.bundle)
        return InMemoryRecord(
            record_id=row.id,
            entity_type=row.entity_type,
            bundle=row.bundle,
            fields=row.fields,
            defined_fields=set(schema) | set(row.fields) if schema else None,
            multiple={name for name, f in schema.items() if f.is_multiple},
            resolver=lambda ref: self.load(ref.target_type, ref.target_id),
        )

    def count(self, entity_type: str, bundle: Optional[str] = None) -> int:
        conn = self._db.get_connection()
        try:
            cursor = conn.cursor()
            query = "SELECT COUNT(*) FROM records WHERE entity_type = ?"
            params: list = [entity_type]
            if bundle:
                query += " AND bundle = ?"
                params.append(bundle)
            cursor.execute(query, params)
            return cursor.fetchone()[0]
        finally:
            conn.close()

    # ---- writes ----

    def insert(
        self,
        entity_type: str,
        record_id: Any,
        bundle: str,
        fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        with self._db.connection() as conn:
            conn.execute("""
                INSERT INTO records (entity_type, id, bundle, fields)
                VALUES (?, ?, ?, ?)
            """, (
                entity_type, str(record_id), bundle,
                json.dumps({k: encode_value(v) for k, v in (fields or {}).items()}),
            ))

    def save(
        self,
        record: FieldRecord,
        presave: Optional[Callable[[FieldRecord], Any]] = None,
    ) -> None:
        """Persist *record*, running the *presave* hook on it first."""
        if presave is not None:
            presave(record)

        if isinstance(record, InMemoryRecord):
            values = record.fields
        else:
            row = self.get_row(record.entity_type, record.id)
            names = set(row.fields) if row else set()
            names |= set(self._fields.get_fields(record.entity_type, record.bundle))
            values = {name: record.get_field(name) for name in names if record.has_field(name)}

        with self._db.connection() as conn:
            conn.execute("""
                INSERT INTO records (entity_type, id, bundle, fields)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(entity_type, id) DO UPDATE SET
                    bundle = excluded.bundle,
                    fields = excluded.fields,
                    updated_at = CURRENT_TIMESTAMP
            """, (
                record.entity_type, str(record.id), record.bundle,
                json.dumps({k: encode_value(v) for k, v in values.items()}),
            ))
