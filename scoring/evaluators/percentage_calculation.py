"""Percentage calculation component: numerator / denominator as a percentage."""

from scoring.components import PERCENTAGE_CALCULATION, POINTS_SCALE
from scoring.protocols import ComponentEvaluator
from scoring.values import get_field_value, to_number


class PercentageCalculationEvaluator(ComponentEvaluator):

    @property
    def component_type(self) -> str:
        return PERCENTAGE_CALCULATION

    def evaluate(self, record, component, diagnostics) -> float:
        numerator = get_field_value(record, component.numerator_field, diagnostics)
        denominator = get_field_value(record, component.denominator_field, diagnostics)

        # A zero or empty denominator is common (nothing counted yet) and not reported
        if denominator is None:
            return 0.0
        denominator_number = to_number(denominator)
        if denominator_number is None:
            diagnostics.warning(
                "percentage_calculation: non-numeric denominator",
                record_id=record.id,
                field=component.denominator_field,
                value=denominator,
            )
            return 0.0
        if denominator_number == 0:
            return 0.0

        if numerator is None:
            return 0.0
        numerator_number = to_number(numerator)
        if numerator_number is None:
            diagnostics.warning(
                "percentage_calculation: non-numeric numerator",
                record_id=record.id,
                field=component.numerator_field,
                value=numerator,
            )
            return 0.0

        percentage = numerator_number / denominator_number * 100
        return min(percentage / 100 * POINTS_SCALE, POINTS_SCALE)
