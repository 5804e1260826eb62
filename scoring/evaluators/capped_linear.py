"""Capped linear component."""

from scoring.components import CAPPED_LINEAR, POINTS_SCALE
from scoring.protocols import ComponentEvaluator
from scoring.values import get_field_value, to_number


class CappedLinearEvaluator(ComponentEvaluator):
    """Scales the field linearly so that ``max_value`` (or more) earns 15 points."""

    @property
    def component_type(self) -> str:
        return CAPPED_LINEAR

    def evaluate(self, record, component, diagnostics) -> float:
        value = get_field_value(record, component.field, diagnostics)
        if value is None or component.max_value == 0:
            return 0.0

        number = to_number(value)
        if number is None:
            diagnostics.warning(
                "capped_linear: non-numeric value",
                record_id=record.id,
                field=component.field,
                value=value,
            )
            return 0.0

        capped = min(number, component.max_value)
        return capped / component.max_value * POINTS_SCALE
