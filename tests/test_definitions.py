"""Tests for component parsing and the ScoreDefinition model."""

import pytest

from scoring.components import (
    BooleanPoints,
    CappedLinear,
    DirectPercentage,
    ListMapping,
    PercentageCalculation,
    TaxonomyFieldValue,
    UnknownComponent,
    parse_component,
)
from scoring.definitions import ScoreDefinition, definitions_from_dict


class TestParseComponent:
    @pytest.mark.parametrize("data,cls", [
        ({"type": "direct_percentage", "field": "f"}, DirectPercentage),
        ({"type": "percentage_calculation", "numerator_field": "a", "denominator_field": "b"},
         PercentageCalculation),
        ({"type": "list_mapping", "field": "f", "mappings": {"x": 1}}, ListMapping),
        ({"type": "capped_linear", "field": "f", "max_value": 10}, CappedLinear),
        ({"type": "taxonomy_field_value", "field": "f"}, TaxonomyFieldValue),
        ({"type": "boolean_points", "field": "f"}, BooleanPoints),
    ])
    def test_variants(self, data, cls):
        assert isinstance(parse_component(data), cls)

    def test_defaults(self):
        c = parse_component({"type": "boolean_points", "field": "f"})
        assert c.weight == 1.0
        assert c.is_bonus is False
        assert c.points == 5.0
        assert parse_component({"type": "capped_linear"}).max_value == 25.0
        assert parse_component({"type": "taxonomy_field_value"}).taxonomy_field == "field_score"

    def test_missing_type_is_direct_percentage(self):
        assert isinstance(parse_component({"field": "f"}), DirectPercentage)

    def test_unknown_type_kept(self):
        data = {"type": "sentiment", "field": "f", "weight": 2}
        c = parse_component(data)
        assert isinstance(c, UnknownComponent)
        assert c.type == "sentiment"
        assert c.weight == 2.0
        assert c.to_dict() == data

    def test_string_form_values(self):
        c = parse_component({"type": "direct_percentage", "weight": "1.5", "is_bonus": "0"})
        assert c.weight == 1.5
        assert c.is_bonus is False
        assert parse_component({"type": "boolean_points", "is_bonus": "1"}).is_bonus is True

    def test_mapping_keys_stringified(self):
        c = parse_component({"type": "list_mapping", "mappings": {1: 5, "b": 2}})
        assert c.mappings == {"1": 5, "b": 2}

    def test_to_dict_reparses_equal(self):
        c = parse_component({"type": "list_mapping", "field": "f", "mappings": {"a": 3},
                             "weight": 0.5, "is_bonus": True})
        assert parse_component(c.to_dict()) == c


class TestScoreDefinition:
    def test_defaults(self):
        d = ScoreDefinition.from_dict("quality", {"bundles": ["article"]})
        assert d.entity_type == "node"
        assert d.final_score_field == "field_final_score"
        assert d.max_score == 100
        assert d.decimal_places == 1
        assert d.components == ()

    def test_single_bundle_string(self):
        d = ScoreDefinition.from_dict("quality", {"bundles": "article"})
        assert d.bundles == ("article",)

    def test_applies_to(self):
        d = ScoreDefinition.from_dict("quality", {"entity_type": "node", "bundles": ["article", "page"]})
        assert d.applies_to("node", "page")
        assert not d.applies_to("node", "event")
        assert not d.applies_to("taxonomy_term", "article")

    def test_component_order_kept(self):
        d = ScoreDefinition.from_dict("quality", {"components": [
            {"type": "boolean_points", "field": "b"},
            {"type": "direct_percentage", "field": "a"},
        ]})
        assert [c.type for c in d.components] == ["boolean_points", "direct_percentage"]

    def test_to_dict_reparses_equal(self):
        d = ScoreDefinition.from_dict("quality", {
            "bundles": ["article"],
            "final_score_field": "field_quality",
            "max_score": 80,
            "decimal_places": 2,
            "components": [{"type": "capped_linear", "field": "w", "max_value": 10}],
        })
        assert ScoreDefinition.from_dict("quality", d.to_dict()) == d

    def test_definitions_from_dict(self):
        defs = definitions_from_dict({"a": {"bundles": ["x"]}, "b": {"bundles": ["y"]}})
        assert [d.name for d in defs] == ["a", "b"]
