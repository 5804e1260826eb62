"""Tests for the evaluator registry and custom evaluators in the composer."""

import pytest

from scoring.components import parse_component
from scoring.composer import ScoreComposer
from scoring.definitions import ScoreDefinition
from scoring.evaluators import BUILTIN_EVALUATORS
from scoring.protocols import ComponentEvaluator
from scoring.registry import EvaluatorRegistry


class TestEvaluatorRegistry:
    def test_register_and_get(self):
        reg = EvaluatorRegistry()
        evaluator = BUILTIN_EVALUATORS[0]
        reg.register(evaluator)
        assert reg.get(evaluator.component_type) is evaluator

    def test_types_order(self):
        reg = EvaluatorRegistry()
        for e in BUILTIN_EVALUATORS:
            reg.register(e)
        assert reg.types == [
            "direct_percentage",
            "percentage_calculation",
            "list_mapping",
            "capped_linear",
            "taxonomy_field_value",
            "boolean_points",
        ]

    def test_unregister(self):
        reg = EvaluatorRegistry()
        reg.register(BUILTIN_EVALUATORS[0])
        reg.unregister(BUILTIN_EVALUATORS[0].component_type)
        assert reg.get(BUILTIN_EVALUATORS[0].component_type) is None
        assert len(reg) == 0

    def test_unregister_nonexistent_is_noop(self):
        EvaluatorRegistry().unregister("does_not_exist")

    def test_contains(self):
        reg = EvaluatorRegistry()
        reg.register(BUILTIN_EVALUATORS[0])
        assert "direct_percentage" in reg
        assert "nonexistent" not in reg


class _ConstantEvaluator(ComponentEvaluator):
    """Test evaluator that always returns a fixed value."""

    def __init__(self, val: float, type_name: str = "constant"):
        self._val = val
        self._type = type_name

    @property
    def component_type(self):
        return self._type

    def evaluate(self, record, component, diagnostics):
        return self._val


class TestCustomEvaluator:
    def test_custom_evaluator_scores_unknown_tag(self, diagnostics, make_record):
        composer = ScoreComposer(evaluators=[_ConstantEvaluator(6.0)], diagnostics=diagnostics)
        definition = ScoreDefinition.from_dict("x", {"components": [{"type": "constant"}]})
        assert composer.compose_score(make_record({}), definition) == 40.0
        assert diagnostics.messages == []

    def test_register_replaces_builtin(self, composer, make_record):
        composer.registry.register(_ConstantEvaluator(15.0, "direct_percentage"))
        component = parse_component({"type": "direct_percentage", "field": "field_a"})
        assert composer.evaluate(make_record({"field_a": 0}), component) == pytest.approx(15.0)

    def test_builtins_registered(self, composer):
        assert len(composer.registry) == 6
