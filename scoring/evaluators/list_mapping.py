"""List mapping component: looks the field value up in a value -> points table."""

from scoring.components import LIST_MAPPING, POINTS_SCALE
from scoring.protocols import ComponentEvaluator
from scoring.values import get_field_value, to_number


def _mapping_key(value) -> str:
    """Stored mapping keys are strings; integral floats match their integer key."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ListMappingEvaluator(ComponentEvaluator):
    """Keys are compared as strings, so an integer field matches a ``"1"`` key."""

    @property
    def component_type(self) -> str:
        return LIST_MAPPING

    def evaluate(self, record, component, diagnostics) -> float:
        value = get_field_value(record, component.field, diagnostics)
        key = _mapping_key(value)

        if key not in component.mappings:
            diagnostics.warning(
                "list_mapping: value has no mapping",
                record_id=record.id,
                field=component.field,
                value=value,
            )
            return 0.0

        points = to_number(component.mappings[key])
        if points is None:
            diagnostics.warning(
                "list_mapping: mapped points are not numeric",
                field=component.field,
                key=key,
                points=component.mappings[key],
            )
            return 0.0

        return min(points, POINTS_SCALE)
