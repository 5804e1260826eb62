"""Evaluator registry: maps component type tags to evaluators."""

from typing import Dict, List, Optional

from scoring.protocols import ComponentEvaluator


class EvaluatorRegistry:
    """Component evaluators keyed by the component type they handle."""

    def __init__(self):
        self._evaluators: Dict[str, ComponentEvaluator] = {}

    def register(self, evaluator: ComponentEvaluator) -> None:
        """Register an evaluator (replaces existing with same type)."""
        self._evaluators[evaluator.component_type] = evaluator

    def unregister(self, component_type: str) -> None:
        """Remove an evaluator by type. No-op if not found."""
        self._evaluators.pop(component_type, None)

    def get(self, component_type: str) -> Optional[ComponentEvaluator]:
        return self._evaluators.get(component_type)

    @property
    def types(self) -> List[str]:
        """Ordered list of registered component types."""
        return list(self._evaluators.keys())

    def __len__(self) -> int:
        return len(self._evaluators)

    def __contains__(self, component_type: str) -> bool:
        return component_type in self._evaluators
