"""Diagnostics sinks."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from common.logging.logger import get_logger
from scoring.protocols import DiagnosticsSink

# 'notice' sits between INFO and WARNING
NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

_LEVELS = {
    "notice": NOTICE,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class LoggingDiagnostics(DiagnosticsSink):
    """Forwards diagnostics to a stdlib logger; context goes into the JSON log line."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("score")

    def log(self, level: str, message: str, **context: Any) -> None:
        if context:
            rendered = ", ".join(f"{k}={v}" for k, v in context.items())
            text = f"{message} ({rendered})"
        else:
            text = message
        self.logger.log(_LEVELS.get(level, logging.WARNING), text, extra={"context": context})


@dataclass
class Diagnostic:
    level: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)


class CollectingDiagnostics(DiagnosticsSink):
    """Keeps every message in memory, optionally forwarding to another sink."""

    def __init__(self, forward: Optional[DiagnosticsSink] = None):
        self.messages: List[Diagnostic] = []
        self._forward = forward

    def log(self, level: str, message: str, **context: Any) -> None:
        self.messages.append(Diagnostic(level, message, dict(context)))
        if self._forward is not None:
            self._forward.log(level, message, **context)

    def at(self, level: str) -> List[Diagnostic]:
        return [m for m in self.messages if m.level == level]

    @property
    def warnings(self) -> List[Diagnostic]:
        return self.at("warning")

    @property
    def errors(self) -> List[Diagnostic]:
        return self.at("error")

    def clear(self) -> None:
        self.messages.clear()
