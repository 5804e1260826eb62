"""Presave hook: scores a record just before it is persisted."""

from typing import Iterable, Optional

from common.config import config
from scoring.protocols import FieldRecord
from scoring.service import ScoreCalculatorService


class PresaveHook:
    """
    Calls ``calculate_scores`` for records of the configured entity types.

    Pass an instance as ``presave=`` to ``RecordRepository.save``.
    """

    def __init__(
        self,
        service: ScoreCalculatorService,
        entity_types: Optional[Iterable[str]] = None,
    ):
        self.service = service
        if entity_types is None:
            entity_types = config.get("scoring.presave_entity_types")
        self.entity_types = set(entity_types)

    def on_presave(self, record: FieldRecord) -> Optional[float]:
        if record.entity_type not in self.entity_types:
            return None
        return self.service.calculate_scores(record)

    __call__ = on_presave
