"""
Score engine — declarative, component-based record scoring.

Public API:
    ScoreComposer, ScoreBreakdown       — evaluate and combine components
    ScoreDefinition, parse_component    — definition model
    EvaluatorRegistry, BUILTIN_EVALUATORS
    WeightedBonusAggregator
    InMemoryRecord, Reference           — record implementation
    LoggingDiagnostics, CollectingDiagnostics
    ScoreCalculatorService              — calculate_scores / recalculate_score_system
    RecalculationDriver, RecalculationReport
    PresaveHook
"""

from scoring.protocols import (
    FieldRecord,
    DiagnosticsSink,
    ComponentEvaluator,
    ScoreAggregator,
    DefinitionStore,
    RecordSource,
    FieldExistenceChecker,
)
from scoring.components import parse_component, POINTS_SCALE
from scoring.definitions import ScoreDefinition
from scoring.records import InMemoryRecord, Reference
from scoring.diagnostics import LoggingDiagnostics, CollectingDiagnostics
from scoring.registry import EvaluatorRegistry
from scoring.evaluators import BUILTIN_EVALUATORS
from scoring.aggregation import WeightedBonusAggregator, format_score, round_half_up
from scoring.composer import ScoreComposer, ScoreBreakdown
from scoring.recalculation import RecalculationDriver, RecalculationReport
from scoring.service import ScoreCalculatorService
from scoring.hooks import PresaveHook

__all__ = [
    # Protocols
    "FieldRecord",
    "DiagnosticsSink",
    "ComponentEvaluator",
    "ScoreAggregator",
    "DefinitionStore",
    "RecordSource",
    "FieldExistenceChecker",
    # Model
    "ScoreDefinition",
    "parse_component",
    "POINTS_SCALE",
    "InMemoryRecord",
    "Reference",
    # Engine
    "EvaluatorRegistry",
    "BUILTIN_EVALUATORS",
    "WeightedBonusAggregator",
    "ScoreComposer",
    "ScoreBreakdown",
    "round_half_up",
    "format_score",
    # Diagnostics
    "LoggingDiagnostics",
    "CollectingDiagnostics",
    # Service
    "ScoreCalculatorService",
    "RecalculationDriver",
    "RecalculationReport",
    "PresaveHook",
]
