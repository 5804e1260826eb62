"""Direct percentage component: a 0-100 field mapped onto the points scale."""

from scoring.components import DIRECT_PERCENTAGE, POINTS_SCALE
from scoring.protocols import ComponentEvaluator
from scoring.values import get_field_value, to_number


class DirectPercentageEvaluator(ComponentEvaluator):
    """Treats the field as a percentage; 100% or more earns the full 15 points."""

    @property
    def component_type(self) -> str:
        return DIRECT_PERCENTAGE

    def evaluate(self, record, component, diagnostics) -> float:
        value = get_field_value(record, component.field, diagnostics)
        if value is None:
            return 0.0

        number = to_number(value)
        if number is None:
            diagnostics.warning(
                "direct_percentage: non-numeric value",
                record_id=record.id,
                field=component.field,
                value=value,
            )
            return 0.0

        return min(number / 100 * POINTS_SCALE, POINTS_SCALE)
