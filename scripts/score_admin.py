#!/usr/bin/env python3
"""
Score Admin

Manage score definitions and run recalculations against the SQLite store.

Input:
    - Score definitions, field definitions and records from SQLite
      (database.sqlite_path in config.json)

Output:
    - Definition listings and recalculation reports to console
    - Updated score fields in the records table

Usage:
    python scripts/score_admin.py list
    python scripts/score_admin.py show article_quality
    python scripts/score_admin.py import definitions.json [--create-fields]
    python scripts/score_admin.py delete article_quality
    python scripts/score_admin.py recalculate article_quality
    python scripts/score_admin.py score node 42 [--breakdown]
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.config import config
from common.errors import ScoreError
from common.logging.logger import setup_logger

logger = setup_logger(
    "score_admin",
    log_dir=config.get("paths.logs_dir"),
    console_output=config.get("logging.console_output"),
)


def cmd_list(args, definitions, fields, service) -> int:
    items = definitions.get_definitions()
    if not items:
        print("No score systems found.")
        return 0
    for name, d in items.items():
        print(f"{name}: {d.entity_type} [{', '.join(d.bundles)}] -> {d.final_score_field} "
              f"({len(d.components)} components)")
    return 0


def cmd_show(args, definitions, fields, service) -> int:
    definition = definitions.require(args.name)
    print(json.dumps({args.name: definition.to_dict()}, indent=2))
    return 0


def cmd_import(args, definitions, fields, service) -> int:
    with open(args.file, "r") as f:
        data = json.load(f)

    names = definitions.import_definitions(data)
    for name in names:
        logger.info(f"Imported score system {name}")
        if args.create_fields:
            d = definitions.get_definition(name)
            for bundle in d.bundles:
                fields.create_score_field(
                    d.entity_type, bundle, d.final_score_field, label=d.final_score_field_label
                )
    return 0


def cmd_delete(args, definitions, fields, service) -> int:
    if not definitions.delete(args.name):
        logger.warning(f"Score system {args.name} does not exist.")
        return 1
    logger.info(f"Score system {args.name} has been deleted.")
    return 0


def cmd_recalculate(args, definitions, fields, service) -> int:
    service.driver.require_score_field(definitions.require(args.name))
    report = service.recalculate(args.name)
    if report.aborted:
        logger.error(f"Recalculation of {args.name} aborted: {report.aborted}")
        return 1

    logger.info(f"Score system {args.name} has been recalculated for {report.updated} records.")
    stats = report.distribution()
    if stats:
        logger.info(
            "Scores: mean={mean:.2f} median={median:.2f} std={std:.2f} "
            "min={min:.2f} max={max:.2f} p90={p90:.2f}".format(**stats)
        )
    if report.skipped:
        logger.warning(f"Skipped {len(report.skipped)} records without the score field")
    return 0


def cmd_score(args, definitions, fields, service) -> int:
    record = service.records.load(args.entity_type, args.id)
    if record is None:
        logger.warning(f"Record {args.entity_type}:{args.id} does not exist.")
        return 1

    if args.breakdown:
        for definition in service.matching_definitions(record):
            print(json.dumps(service.composer.breakdown(record, definition).to_dict(), indent=2))

    target = record.copy() if args.dry_run else record
    score = service.calculate_scores(target)
    if score is None:
        return 1
    if not args.dry_run:
        service.records.save(record)
    print(service.format_score_for_display(score, args.decimals))
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Score Admin - manage score definitions and recalculate scores"
    )
    parser.add_argument(
        "--db",
        default=config.get("database.sqlite_path"),
        help="SQLite database path"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List score systems").set_defaults(func=cmd_list)

    p = sub.add_parser("show", help="Print a score definition as JSON")
    p.add_argument("name")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("import", help="Import definitions from a {name: definition} JSON file")
    p.add_argument("file")
    p.add_argument(
        "--create-fields",
        action="store_true",
        help="Create the final score field on each bundle if missing"
    )
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("delete", help="Delete a score system")
    p.add_argument("name")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("recalculate", help="Recalculate every record of a score system")
    p.add_argument("name")
    p.set_defaults(func=cmd_recalculate)

    p = sub.add_parser("score", help="Score and save a single record")
    p.add_argument("entity_type")
    p.add_argument("id")
    p.add_argument("--breakdown", action="store_true", help="Print per-component points")
    p.add_argument("--dry-run", action="store_true", help="Compute the score without saving it")
    p.add_argument(
        "--decimals",
        type=int,
        default=config.get("scoring.display_decimals"),
        help="Decimals shown in the formatted score"
    )
    p.set_defaults(func=cmd_score)

    args = parser.parse_args()

    from common.database import Database
    from common.repositories import DefinitionRepository, FieldRepository, RecordRepository
    from scoring.diagnostics import LoggingDiagnostics
    from scoring.service import ScoreCalculatorService

    try:
        database = Database(db_path=args.db)
        fields = FieldRepository(database)
        definitions = DefinitionRepository(database)
        records = RecordRepository(database, fields=fields)
        service = ScoreCalculatorService(
            definitions=definitions,
            records=records,
            fields=fields,
            diagnostics=LoggingDiagnostics(logger),
        )
        return args.func(args, definitions, fields, service)
    except ScoreError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
