"""
Shared pytest fixtures for score engine tests.

Uses DI to inject temp-file SQLite databases and collecting diagnostics,
so nothing touches production state.

The conftest patches the Config singleton at import time so that the
module-level `db = Database()` in common/database.py doesn't fail
when config.json points to an unreachable path.
"""

import os
import sys
import tempfile
from pathlib import Path

# Ensure project root is on sys.path so imports work from tests/
sys.path.insert(0, str(Path(__file__).parent.parent))

# Patch Config BEFORE anything else imports common.database, so the
# module-level `db = Database()` singleton doesn't crash.
from common.config import Config

_test_config = Config.__new__(Config)
_test_config._config = {
    "database": {"sqlite_path": os.path.join(tempfile.gettempdir(), "score_test_singleton.db")},
    "paths": {},
}
Config._instance = _test_config

import pytest
from common.database import Database
from common.models import FieldDefinition
from common.repositories import DefinitionRepository, FieldRepository, RecordRepository
from scoring.composer import ScoreComposer
from scoring.diagnostics import CollectingDiagnostics
from scoring.records import InMemoryRecord


@pytest.fixture
def memory_db(tmp_path):
    """Provides a fresh file-backed SQLite database with full schema.

    Uses tmp_path so each test gets an isolated database (unlike :memory:
    which creates a new DB per connection and loses schema).
    """
    db_file = str(tmp_path / "test_score.db")
    return Database(db_path=db_file)


@pytest.fixture
def definition_repo(memory_db):
    return DefinitionRepository(memory_db)


@pytest.fixture
def field_repo(memory_db):
    return FieldRepository(memory_db)


@pytest.fixture
def record_repo(memory_db, field_repo):
    return RecordRepository(memory_db, fields=field_repo)


@pytest.fixture
def diagnostics():
    return CollectingDiagnostics()


@pytest.fixture
def composer(diagnostics):
    return ScoreComposer(diagnostics=diagnostics)


@pytest.fixture
def make_record():
    """Factory for article records; the score field exists unless told otherwise."""
    def _make(fields=None, score_field="field_final_score", **kwargs):
        values = dict(fields or {})
        if score_field and score_field not in values:
            values[score_field] = None
        kwargs.setdefault("record_id", 1)
        kwargs.setdefault("entity_type", "node")
        kwargs.setdefault("bundle", "article")
        return InMemoryRecord(fields=values, **kwargs)
    return _make


@pytest.fixture
def article_fields(field_repo):
    """Registers the article bundle's field schema."""
    for name, field_type, multiple in [
        ("field_final_score", "decimal", False),
        ("field_completion", "integer", False),
        ("field_status", "list_string", False),
        ("field_category", "entity_reference", False),
        ("field_featured", "boolean", False),
        ("field_tags", "list_string", True),
    ]:
        field_repo.add_field(FieldDefinition("node", "article", name, field_type, is_multiple=multiple))
    field_repo.add_field(FieldDefinition("taxonomy_term", "category", "field_score", "decimal"))
    return field_repo
