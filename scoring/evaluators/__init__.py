"""Built-in component evaluators, one per component type."""

from scoring.evaluators.direct_percentage import DirectPercentageEvaluator
from scoring.evaluators.percentage_calculation import PercentageCalculationEvaluator
from scoring.evaluators.list_mapping import ListMappingEvaluator
from scoring.evaluators.capped_linear import CappedLinearEvaluator
from scoring.evaluators.taxonomy_field_value import TaxonomyFieldValueEvaluator
from scoring.evaluators.boolean_points import BooleanPointsEvaluator

BUILTIN_EVALUATORS = [
    DirectPercentageEvaluator(),
    PercentageCalculationEvaluator(),
    ListMappingEvaluator(),
    CappedLinearEvaluator(),
    TaxonomyFieldValueEvaluator(),
    BooleanPointsEvaluator(),
]

__all__ = [
    "DirectPercentageEvaluator",
    "PercentageCalculationEvaluator",
    "ListMappingEvaluator",
    "CappedLinearEvaluator",
    "TaxonomyFieldValueEvaluator",
    "BooleanPointsEvaluator",
    "BUILTIN_EVALUATORS",
]
