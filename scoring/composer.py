"""Score composer — evaluates every component of a definition and combines them."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from scoring.aggregation import WeightedBonusAggregator, round_half_up
from scoring.components import Component, POINTS_SCALE
from scoring.definitions import ScoreDefinition
from scoring.diagnostics import LoggingDiagnostics
from scoring.evaluators import BUILTIN_EVALUATORS
from scoring.protocols import ComponentEvaluator, DiagnosticsSink, FieldRecord, ScoreAggregator
from scoring.registry import EvaluatorRegistry


@dataclass
class ComponentScore:
    component: Component
    points: float


@dataclass
class ScoreBreakdown:
    """Every intermediate value of one composition, for debugging and reports."""
    definition: str
    components: List[ComponentScore] = field(default_factory=list)
    weighted_average: float = 0.0
    bonus_total: float = 0.0
    final_points: float = 0.0
    percentage: float = 0.0
    score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "definition": self.definition,
            "components": [
                {
                    "type": c.component.type,
                    "weight": c.component.weight,
                    "is_bonus": c.component.is_bonus,
                    "points": c.points,
                }
                for c in self.components
            ],
            "weighted_average": self.weighted_average,
            "bonus_total": self.bonus_total,
            "final_points": self.final_points,
            "percentage": self.percentage,
            "score": self.score,
        }


class ScoreComposer:
    """
    Orchestrates scoring: evaluates each component once, aggregates, rounds.

    Args:
        evaluators: Optional list of evaluators (defaults to BUILTIN_EVALUATORS).
        aggregator: Optional aggregator (defaults to WeightedBonusAggregator).
        diagnostics: Optional sink (defaults to LoggingDiagnostics on the
            'score' logger).
    """

    def __init__(
        self,
        evaluators: Optional[List[ComponentEvaluator]] = None,
        aggregator: Optional[ScoreAggregator] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
    ):
        self.registry = EvaluatorRegistry()
        for e in (evaluators or BUILTIN_EVALUATORS):
            self.registry.register(e)

        self.aggregator = aggregator or WeightedBonusAggregator()
        self.diagnostics = diagnostics or LoggingDiagnostics()

    # -- component evaluation -----------------------------------------------

    def evaluate(self, record: FieldRecord, component: Component) -> float:
        """Sub-score for one component. Never raises."""
        evaluator = self.registry.get(component.type)
        if evaluator is None:
            self.diagnostics.warning(
                "Unknown component type",
                type=component.type,
                record_id=record.id,
            )
            return 0.0

        try:
            return float(evaluator.evaluate(record, component, self.diagnostics))
        except Exception as e:
            # A failing record backend must not abort the remaining components
            self.diagnostics.warning(
                "Component evaluation failed",
                type=component.type,
                record_id=record.id,
                error=repr(e),
            )
            return 0.0

    def evaluate_all(
        self, record: FieldRecord, definition: ScoreDefinition
    ) -> List[Tuple[Component, float]]:
        return [(c, self.evaluate(record, c)) for c in definition.components]

    # -- public API ---------------------------------------------------------

    def breakdown(self, record: FieldRecord, definition: ScoreDefinition) -> ScoreBreakdown:
        scored = self.evaluate_all(record, definition)
        weighted_average, bonus_total = self.aggregator.totals(scored)
        final_points = self.aggregator.aggregate(scored)
        percentage = final_points / POINTS_SCALE * 100
        score = min(round_half_up(percentage, definition.decimal_places), definition.max_score)

        return ScoreBreakdown(
            definition=definition.name,
            components=[ComponentScore(c, s) for c, s in scored],
            weighted_average=weighted_average,
            bonus_total=bonus_total,
            final_points=final_points,
            percentage=percentage,
            score=score,
        )

    def compose_score(self, record: FieldRecord, definition: ScoreDefinition) -> float:
        """Final rounded score of *record* under *definition*, in [0, max_score]."""
        return self.breakdown(record, definition).score

    def apply(self, record: FieldRecord, definition: ScoreDefinition) -> Optional[float]:
        """
        Compose and write the score into the definition's final score field.

        Returns the written score, or None when the record has no such field or
        the record backend fails (nothing is written and an error diagnostic
        is emitted). Never raises.
        """
        score_field = definition.final_score_field
        try:
            if not record.has_field(score_field):
                self.diagnostics.error(
                    "Score field does not exist on record",
                    field=score_field,
                    record_id=record.id,
                    bundle=record.bundle,
                    definition=definition.name,
                )
                return None

            score = self.compose_score(record, definition)
            record.set_field(score_field, score)
        except Exception as e:
            self.diagnostics.error(
                "Could not write score",
                field=score_field,
                record_id=record.id,
                definition=definition.name,
                error=repr(e),
            )
            return None
        return score
