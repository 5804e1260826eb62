"""Score definition model."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from common.config import config
from scoring.components import Component, parse_component


@dataclass(frozen=True)
class ScoreDefinition:
    """
    Named configuration: which bundles to score, how, and where to write it.

    Definitions are read-only during evaluation. Editing one means building a
    new instance (``dataclasses.replace``) and saving it back to the store.
    """
    name: str
    entity_type: str = "node"
    bundles: Tuple[str, ...] = ()
    final_score_field: str = "field_final_score"
    final_score_field_label: str = "Final Score"
    max_score: float = 100
    decimal_places: int = 1
    components: Tuple[Component, ...] = field(default_factory=tuple)

    def applies_to(self, entity_type: str, bundle: str) -> bool:
        return entity_type == self.entity_type and bundle in self.bundles

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "ScoreDefinition":
        """Build from the stored dict form, filling omitted keys from config."""
        bundles = data.get("bundles") or []
        if isinstance(bundles, str):
            bundles = [bundles]
        max_score = data.get("max_score")
        decimal_places = data.get("decimal_places")
        return cls(
            name=name,
            entity_type=data.get("entity_type") or config.get("scoring.default_entity_type"),
            bundles=tuple(str(b) for b in bundles),
            final_score_field=(
                data.get("final_score_field") or config.get("scoring.default_score_field")
            ),
            final_score_field_label=data.get("final_score_field_label") or "Final Score",
            max_score=(
                float(max_score) if max_score not in (None, "")
                else config.get("scoring.default_max_score")
            ),
            decimal_places=(
                int(decimal_places) if decimal_places not in (None, "")
                else config.get("scoring.default_decimal_places")
            ),
            components=tuple(parse_component(c) for c in data.get("components") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity_type": self.entity_type,
            "bundles": list(self.bundles),
            "final_score_field": self.final_score_field,
            "final_score_field_label": self.final_score_field_label,
            "max_score": self.max_score,
            "decimal_places": self.decimal_places,
            "components": [c.to_dict() for c in self.components],
        }


def definitions_from_dict(data: Dict[str, Dict[str, Any]]) -> List[ScoreDefinition]:
    """Parse a ``{name: definition}`` mapping (the JSON import format)."""
    return [ScoreDefinition.from_dict(name, d) for name, d in data.items()]
