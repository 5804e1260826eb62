"""
Exception hierarchy for the score engine.

The engine itself never raises for bad record data (it scores 0 and reports
a diagnostic). These exceptions cover the layers around it: configuration,
storage, and the precondition checks that callers run before a bulk
recalculation.
"""


class ScoreError(Exception):
    """Base exception for all score engine errors."""


class ScoreConfigError(ScoreError, ValueError):
    """Raised when a required configuration key is missing or invalid."""

    def __init__(self, key: str, reason: str = "missing or None"):
        self.key = key
        super().__init__(f"Configuration error for '{key}': {reason}")


class ScoreStorageError(ScoreError):
    """Raised when the SQLite store cannot be read or written."""

    def __init__(self, table: str, detail: str):
        self.table = table
        super().__init__(f"Storage error [{table}]: {detail}")


class ScoreDefinitionNotFoundError(ScoreError):
    """Raised by callers that require a named definition to exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Score definition '{name}' does not exist")


class ScoreFieldMissingError(ScoreError):
    """Raised when a definition's final score field exists on none of its bundles."""

    def __init__(self, field_name: str, bundles):
        self.field_name = field_name
        self.bundles = list(bundles)
        super().__init__(
            f"Score field '{field_name}' does not exist on any of: "
            f"{', '.join(self.bundles) or '(no bundles)'}"
        )
