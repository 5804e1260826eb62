"""Score calculator service — the surface the presave hook and admin tools call."""

from typing import List, Optional

from common.config import config
from scoring.aggregation import format_score
from scoring.composer import ScoreComposer
from scoring.definitions import ScoreDefinition
from scoring.diagnostics import LoggingDiagnostics
from scoring.protocols import (
    DefinitionStore,
    DiagnosticsSink,
    FieldExistenceChecker,
    FieldRecord,
    RecordSource,
)
from scoring.recalculation import RecalculationDriver, RecalculationReport


class ScoreCalculatorService:
    """
    Scores single records and bulk-recalculates definitions.

    Unless both a definition store and a record source are supplied, all three
    collaborators default to the SQLite repositories on *database* (or the
    module-level database). With custom stores and no *fields* checker the
    score-field precondition is not checked before recalculation.
    """

    def __init__(
        self,
        definitions: Optional[DefinitionStore] = None,
        records: Optional[RecordSource] = None,
        fields: Optional[FieldExistenceChecker] = None,
        composer: Optional[ScoreComposer] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
        database=None,
    ):
        if definitions is None or records is None:
            from common.repositories import DefinitionRepository, FieldRepository, RecordRepository

            fields = fields or FieldRepository(database)
            definitions = definitions or DefinitionRepository(database)
            records = records or RecordRepository(database, fields=fields)

        self.definitions = definitions
        self.records = records
        self.fields = fields
        self.diagnostics = diagnostics or (composer.diagnostics if composer else LoggingDiagnostics())
        self.composer = composer or ScoreComposer(diagnostics=self.diagnostics)
        self.driver = RecalculationDriver(self.composer, definitions, records, fields)

    # -- lookup ---------------------------------------------------------------

    def matching_definitions(self, record: FieldRecord) -> List[ScoreDefinition]:
        return [
            d for d in self.definitions.get_definitions().values()
            if d.applies_to(record.entity_type, record.bundle)
        ]

    def get_final_score_field(self, record: FieldRecord) -> Optional[str]:
        """Score field of the first definition that applies to *record*."""
        for definition in self.matching_definitions(record):
            return definition.final_score_field
        return None

    # -- scoring --------------------------------------------------------------

    def calculate_scores(self, record: FieldRecord) -> Optional[float]:
        """
        Score *record* with the first applicable definition whose score field
        the record has, writing the result into that field.

        Never raises; returns the written score or None.
        """
        try:
            matching = self.matching_definitions(record)
        except Exception as e:
            self.diagnostics.error("Could not load score definitions", error=str(e), record_id=record.id)
            return None

        if not matching:
            self.diagnostics.notice(
                "No scoring configuration found for record",
                record_id=record.id,
                bundle=record.bundle,
            )
            return None

        for definition in matching:
            score = self.composer.apply(record, definition)
            if score is not None:
                return score
        return None

    def recalculate(self, definition_name: str) -> RecalculationReport:
        return self.driver.run(definition_name)

    def recalculate_score_system(self, definition_name: str) -> int:
        """Re-score every record of the named definition; returns how many were updated."""
        return self.driver.recalculate(definition_name)

    @staticmethod
    def format_score_for_display(score: float, decimals: Optional[int] = None) -> str:
        if decimals is None:
            decimals = config.get("scoring.display_decimals")
        return format_score(score, decimals)
