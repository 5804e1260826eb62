"""Taxonomy field value component: reads a numeric attribute off a referenced term."""

from scoring.components import TAXONOMY_FIELD_VALUE, POINTS_SCALE
from scoring.protocols import ComponentEvaluator
from scoring.values import get_field_value, is_empty, to_number


class TaxonomyFieldValueEvaluator(ComponentEvaluator):

    @property
    def component_type(self) -> str:
        return TAXONOMY_FIELD_VALUE

    def evaluate(self, record, component, diagnostics) -> float:
        term_id = get_field_value(record, component.field, diagnostics)
        if not term_id:
            # A missing field was already reported by get_field_value
            if record.has_field(component.field):
                diagnostics.warning(
                    "taxonomy_field_value: empty reference",
                    record_id=record.id,
                    field=component.field,
                )
            return 0.0

        term = record.resolve_reference(component.field)
        if term is None:
            diagnostics.warning(
                "taxonomy_field_value: referenced term could not be loaded",
                record_id=record.id,
                field=component.field,
                term_id=term_id,
            )
            return 0.0

        if not term.has_field(component.taxonomy_field):
            diagnostics.warning(
                "taxonomy_field_value: term has no such field",
                term_id=term.id,
                taxonomy_field=component.taxonomy_field,
            )
            return 0.0

        raw = term.get_field(component.taxonomy_field)
        if isinstance(raw, (list, tuple)):
            raw = raw[0] if raw else None
        if is_empty(raw):
            return 0.0

        points = to_number(raw)
        if points is None:
            diagnostics.warning(
                "taxonomy_field_value: term value is not numeric",
                term_id=term.id,
                taxonomy_field=component.taxonomy_field,
                value=raw,
            )
            return 0.0

        return min(points, POINTS_SCALE)
