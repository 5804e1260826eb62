"""Boolean points component."""

from scoring.components import BOOLEAN_POINTS
from scoring.protocols import ComponentEvaluator
from scoring.values import get_field_value, is_truthy


class BooleanPointsEvaluator(ComponentEvaluator):
    """Awards the configured points when the field is set, nothing otherwise."""

    @property
    def component_type(self) -> str:
        return BOOLEAN_POINTS

    def evaluate(self, record, component, diagnostics) -> float:
        value = get_field_value(record, component.field, diagnostics)
        return float(component.points) if is_truthy(value) else 0.0
