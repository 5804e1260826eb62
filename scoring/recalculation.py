"""Bulk recalculation of every record a score definition applies to."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from common.config import config
from common.errors import ScoreFieldMissingError
from common.logging.logger import get_logger
from scoring.composer import ScoreComposer
from scoring.definitions import ScoreDefinition
from scoring.protocols import DefinitionStore, DiagnosticsSink, FieldExistenceChecker, RecordSource

logger = get_logger("recalculation")


@dataclass
class RecalculationReport:
    """Outcome of one bulk run. ``updated`` excludes skipped records."""
    definition: str
    updated: int = 0
    skipped: List[Any] = field(default_factory=list)
    missing: List[Any] = field(default_factory=list)
    scores: List[float] = field(default_factory=list)
    aborted: Optional[str] = None

    def distribution(self) -> Dict[str, float]:
        """Summary statistics of the scores written in this run."""
        if not self.scores:
            return {}
        arr = np.asarray(self.scores, dtype=float)
        return {
            "mean": float(np.mean(arr)),
            "median": float(np.median(arr)),
            "std": float(np.std(arr)),
            "min": float(np.min(arr)),
            "max": float(np.max(arr)),
            "p90": float(np.percentile(arr, 90)),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "definition": self.definition,
            "updated": self.updated,
            "skipped": list(self.skipped),
            "missing": list(self.missing),
            "aborted": self.aborted,
            "distribution": self.distribution(),
        }


class RecalculationDriver:
    """
    Re-scores every record of a definition's bundles and persists each one.

    Records are independent: each is loaded fresh, scored, and saved on its
    own, so stopping between records (via *should_continue*) leaves every
    already-saved score valid.

    Args:
        composer: Score composer; its diagnostics sink is reused.
        definitions: Definition store.
        records: Record source (enumerate, load, save).
        fields: Field-existence check run before any record is touched.
            When None the precondition is not checked.
        progress_every: Log progress every N records.
    """

    def __init__(
        self,
        composer: ScoreComposer,
        definitions: DefinitionStore,
        records: RecordSource,
        fields: Optional[FieldExistenceChecker] = None,
        progress_every: Optional[int] = None,
    ):
        self.composer = composer
        self.definitions = definitions
        self.records = records
        self.fields = fields
        self.progress_every = progress_every or config.get("recalculation.progress_every")

    @property
    def diagnostics(self) -> DiagnosticsSink:
        return self.composer.diagnostics

    def check_score_field(self, definition: ScoreDefinition) -> bool:
        """True if the final score field exists on at least one bundle."""
        if self.fields is None:
            return True
        return any(
            self.fields.field_exists(definition.entity_type, bundle, definition.final_score_field)
            for bundle in definition.bundles
        )

    def require_score_field(self, definition: ScoreDefinition) -> None:
        """Raise ScoreFieldMissingError unless the score field exists on some bundle."""
        if not self.check_score_field(definition):
            raise ScoreFieldMissingError(definition.final_score_field, definition.bundles)

    def run(
        self,
        definition_name: str,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> RecalculationReport:
        report = RecalculationReport(definition=definition_name)

        definition = self.definitions.get_definition(definition_name)
        if definition is None:
            self.diagnostics.warning("No score definition found", definition=definition_name)
            report.aborted = "definition not found"
            return report

        if not self.check_score_field(definition):
            self.diagnostics.error(
                "Score field does not exist. Aborting recalculation.",
                field=definition.final_score_field,
                definition=definition_name,
                bundles=list(definition.bundles),
            )
            report.aborted = "score field missing"
            return report

        processed = 0
        for bundle in definition.bundles:
            for record_id in self.records.find_ids(definition.entity_type, bundle):
                if should_continue is not None and not should_continue():
                    report.aborted = "cancelled"
                    logger.info(f"Recalculation of {definition_name} cancelled after {processed} records")
                    return report

                processed += 1
                record = self.records.load(definition.entity_type, record_id)
                if record is None:
                    report.missing.append(record_id)
                    continue

                score = self.composer.apply(record, definition)
                if score is None:
                    report.skipped.append(record_id)
                    continue

                self.records.save(record)
                report.updated += 1
                report.scores.append(score)

                if self.progress_every and processed % self.progress_every == 0:
                    logger.info(f"{definition_name}: {processed} records processed")

        logger.info(
            f"Recalculation of {definition_name} finished: {report.updated} updated, "
            f"{len(report.skipped)} skipped, {len(report.missing)} missing"
        )
        return report

    def recalculate(self, definition_name: str) -> int:
        """Number of records whose score was written."""
        return self.run(definition_name).updated
