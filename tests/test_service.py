"""Tests for ScoreCalculatorService, RecalculationDriver and PresaveHook."""

import pytest

from common.errors import ScoreFieldMissingError
from scoring.composer import ScoreComposer
from scoring.definitions import ScoreDefinition
from scoring.hooks import PresaveHook
from scoring.records import InMemoryRecord, Reference
from scoring.service import ScoreCalculatorService

QUALITY = {
    "entity_type": "node",
    "bundles": ["article"],
    "final_score_field": "field_final_score",
    "decimal_places": 1,
    "components": [
        {"type": "direct_percentage", "field": "field_completion"},
        {"type": "taxonomy_field_value", "field": "field_category", "taxonomy_field": "field_score"},
        {"type": "boolean_points", "field": "field_featured", "points": 3, "is_bonus": True},
    ],
}


class _LockedRecord(InMemoryRecord):
    def set_field(self, name, value):
        raise RuntimeError("record is locked")


class _SchemaFailureRecord(InMemoryRecord):
    def has_field(self, name):
        if name == "field_final_score":
            raise RuntimeError("schema lookup failed")
        return super().has_field(name)


@pytest.fixture
def service(definition_repo, record_repo, field_repo, diagnostics):
    return ScoreCalculatorService(
        definitions=definition_repo,
        records=record_repo,
        fields=field_repo,
        composer=ScoreComposer(diagnostics=diagnostics),
    )


@pytest.fixture
def seeded(definition_repo, record_repo, article_fields):
    """Quality definition, one category term and three articles."""
    definition_repo.save(ScoreDefinition.from_dict("quality", QUALITY))
    record_repo.insert("taxonomy_term", 7, "category", {"field_score": 9})
    record_repo.insert("node", 1, "article", {
        "field_completion": 60, "field_category": Reference(7), "field_featured": True,
    })
    record_repo.insert("node", 2, "article", {"field_completion": 0})
    record_repo.insert("node", 3, "article", {"field_completion": 100, "field_category": Reference(7)})
    record_repo.insert("node", 4, "page", {"field_completion": 100})
    return record_repo


# ── calculate_scores ──────────────────────────────────────────

class TestCalculateScores:
    def test_scores_matching_record(self, service, seeded):
        record = seeded.load("node", 1)
        # (9 + 9) / 2 = 9 points, +3 bonus = 12 points = 80%
        assert service.calculate_scores(record) == 80.0
        assert record.get_field("field_final_score") == 80.0

    def test_no_matching_definition_is_noop(self, service, seeded, diagnostics):
        record = seeded.load("node", 4)
        assert service.calculate_scores(record) is None
        assert record.get_field("field_final_score") is None
        assert diagnostics.at("notice")[0].context["bundle"] == "page"

    def test_missing_score_field_skips(self, service, definition_repo, record_repo, diagnostics):
        definition_repo.save(ScoreDefinition.from_dict("quality", QUALITY))
        record_repo.insert("node", 1, "article", {"field_completion": 50})
        record = record_repo.load("node", 1)
        assert service.calculate_scores(record) is None
        assert not record.has_field("field_final_score")
        assert len(diagnostics.errors) == 1

    def test_falls_through_to_next_definition_with_field(self, service, definition_repo, make_record):
        definition_repo.save(ScoreDefinition.from_dict(
            "legacy", {**QUALITY, "final_score_field": "field_old_score"}))
        definition_repo.save(ScoreDefinition.from_dict("quality", QUALITY))
        record = make_record({"field_completion": 100, "field_category": None, "field_featured": 0})
        assert service.calculate_scores(record) == 50.0

    def test_store_failure_is_absorbed(self, diagnostics, make_record):
        class BrokenStore:
            def get_definitions(self):
                raise RuntimeError("store offline")

            def get_definition(self, name):
                return None

        svc = ScoreCalculatorService(
            definitions=BrokenStore(), records=object(), composer=ScoreComposer(diagnostics=diagnostics),
        )
        assert svc.calculate_scores(make_record({})) is None
        assert len(diagnostics.errors) == 1

    def test_write_failure_is_absorbed(self, service, definition_repo, diagnostics):
        definition_repo.save(ScoreDefinition.from_dict("quality", QUALITY))
        record = _LockedRecord(1, "node", "article", {"field_completion": 50, "field_final_score": None})
        assert service.calculate_scores(record) is None
        assert record.get_field("field_final_score") is None
        assert diagnostics.errors[0].message == "Could not write score"

    def test_schema_failure_is_absorbed(self, service, definition_repo, diagnostics):
        definition_repo.save(ScoreDefinition.from_dict("quality", QUALITY))
        record = _SchemaFailureRecord(1, "node", "article", {"field_completion": 50, "field_final_score": None})
        assert service.calculate_scores(record) is None
        assert len(diagnostics.errors) == 1

    def test_get_final_score_field(self, service, seeded):
        assert service.get_final_score_field(seeded.load("node", 1)) == "field_final_score"
        assert service.get_final_score_field(seeded.load("node", 4)) is None


# ── recalculate_score_system ──────────────────────────────────

class TestRecalculate:
    def test_updates_every_record(self, service, seeded):
        assert service.recalculate_score_system("quality") == 3
        assert seeded.load("node", 1).get_field("field_final_score") == 80.0
        assert seeded.load("node", 2).get_field("field_final_score") == 0.0
        # (15 + 9) / 2 = 12 points
        assert seeded.load("node", 3).get_field("field_final_score") == 80.0
        assert seeded.load("node", 4).get_field("field_final_score") is None

    def test_idempotent(self, service, seeded):
        service.recalculate_score_system("quality")
        first = seeded.load("node", 3).get_field("field_final_score")
        service.recalculate_score_system("quality")
        assert seeded.load("node", 3).get_field("field_final_score") == first

    def test_unknown_definition_returns_zero(self, service, diagnostics):
        assert service.recalculate_score_system("nope") == 0
        assert len(diagnostics.warnings) == 1

    def test_missing_score_field_aborts(self, service, definition_repo, record_repo, diagnostics):
        definition_repo.save(ScoreDefinition.from_dict("quality", QUALITY))
        record_repo.insert("node", 1, "article", {"field_completion": 50})
        report = service.recalculate("quality")
        assert report.updated == 0
        assert report.aborted == "score field missing"
        assert len(diagnostics.errors) == 1
        assert record_repo.load("node", 1).get_field("field_final_score") is None

    def test_report_distribution(self, service, seeded):
        report = service.recalculate("quality")
        stats = report.distribution()
        assert report.updated == 3
        assert stats["min"] == 0.0
        assert stats["max"] == 80.0
        assert stats["mean"] == pytest.approx(160.0 / 3)

    def test_cancel_between_records(self, service, seeded):
        calls = []

        def should_continue():
            calls.append(1)
            return len(calls) <= 1

        report = service.driver.run("quality", should_continue=should_continue)
        assert report.aborted == "cancelled"
        assert report.updated == 1
        assert seeded.load("node", 2).get_field("field_final_score") is None

    def test_records_without_score_field_are_skipped(self, service, definition_repo, record_repo,
                                                     article_fields):
        definition_repo.save(ScoreDefinition.from_dict(
            "quality", {**QUALITY, "bundles": ["article", "blog"]}))
        record_repo.insert("node", 1, "article", {"field_completion": 60})
        record_repo.insert("node", 2, "blog", {"field_completion": 60})

        assert service.recalculate_score_system("quality") == 1
        report = service.recalculate("quality")
        assert report.updated == 1
        assert report.skipped == ["2"]
        assert report.aborted is None
        assert record_repo.load("node", 2).get_field("field_final_score") is None

    def test_require_score_field(self, service, definition_repo, article_fields):
        service.driver.require_score_field(ScoreDefinition.from_dict("quality", QUALITY))
        page_only = ScoreDefinition.from_dict("pages", {**QUALITY, "bundles": ["page"]})
        with pytest.raises(ScoreFieldMissingError) as exc:
            service.driver.require_score_field(page_only)
        assert exc.value.bundles == ["page"]

    def test_uses_named_definition(self, service, definition_repo, seeded):
        definition_repo.save(ScoreDefinition.from_dict("bonus_only", {
            **QUALITY,
            "components": [{"type": "boolean_points", "field": "field_featured", "points": 15}],
        }))
        assert service.recalculate_score_system("bonus_only") == 3
        assert seeded.load("node", 1).get_field("field_final_score") == 100.0


# ── format_score_for_display ──────────────────────────────────

class TestFormatScoreForDisplay:
    def test_default_zero_decimals(self):
        assert ScoreCalculatorService.format_score_for_display(83.3) == "83%"

    def test_decimals(self):
        assert ScoreCalculatorService.format_score_for_display(83.33, 1) == "83.3%"


# ── PresaveHook ───────────────────────────────────────────────

class TestPresaveHook:
    def test_scores_on_save(self, service, seeded):
        hook = PresaveHook(service)
        record = seeded.load("node", 2)
        record.set_field("field_completion", 50)
        seeded.save(record, presave=hook)
        # 7.5 and 0 averaged = 3.75 points = 25%
        assert seeded.load("node", 2).get_field("field_final_score") == 25.0

    def test_ignores_other_entity_types(self, service, seeded):
        hook = PresaveHook(service)
        term = seeded.load("taxonomy_term", 7)
        assert hook(term) is None

    def test_custom_entity_types(self, service, seeded):
        hook = PresaveHook(service, entity_types=["taxonomy_term"])
        assert hook(seeded.load("node", 1)) is None
