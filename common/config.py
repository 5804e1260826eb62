import json
from pathlib import Path
from typing import Dict, Any

from common.errors import ScoreConfigError
from common.logging.logger import get_logger

logger = get_logger("config")

# Centralized default values for all config keys used across the codebase.
# Each entry: (type, default_value)
# Types: str, int, float, bool, None (any)
CONFIG_SCHEMA: Dict[str, tuple] = {
    # Paths
    "paths.logs_dir":               (str,   "logs"),

    # Database
    "database.sqlite_path":         (str,   "data/score.db"),

    # Scoring defaults applied when a definition omits a key
    "scoring.default_entity_type":      (str,   "node"),
    "scoring.default_score_field":      (str,   "field_final_score"),
    "scoring.default_max_score":        (int,   100),
    "scoring.default_decimal_places":   (int,   1),
    "scoring.display_decimals":         (int,   0),
    "scoring.presave_entity_types":     (None,  ["node"]),

    # Recalculation
    "recalculation.progress_every":     (int,   500),

    # Logging
    "logging.console_output":       (bool,  True),
}


class Config:
    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _load_config(self):
        config_path = Path("config.json")
        if not config_path.exists():
            self._config = {}
            return

        with open(config_path, "r") as f:
            self._config = json.load(f)

        self._ensure_dirs()

    def _ensure_dirs(self):
        paths = self._config.get("paths", {})
        for path in paths.values():
            if isinstance(path, str) and not path.endswith(('db', 'json', 'txt')):
                try:
                    Path(path).mkdir(parents=True, exist_ok=True)
                except OSError:
                    logger.warning(f"Could not create directory {path}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Gets a config value by dot-separated key.

        Lookup order:
        1. Value from config.json (if present and not None)
        2. Caller-provided default (if not None)
        3. Schema default from CONFIG_SCHEMA
        4. None
        """
        value = self._get_raw(key)
        if value is not None:
            return value

        if default is not None:
            return default

        schema_entry = CONFIG_SCHEMA.get(key)
        if schema_entry is not None:
            return schema_entry[1]

        return None

    def validate(self) -> list:
        """
        Validates the loaded config against CONFIG_SCHEMA.

        Returns a list of warning strings for type mismatches.
        Does NOT raise -- config.json values always take precedence.
        """
        warnings = []
        for key, (expected_type, _default) in CONFIG_SCHEMA.items():
            if expected_type is None:
                continue
            value = self._get_raw(key)
            # bool is an int subclass; a flag is not a valid count
            if expected_type is int and isinstance(value, bool):
                mismatch = True
            else:
                mismatch = value is not None and not isinstance(value, expected_type)
            if mismatch:
                warnings.append(
                    f"Config '{key}': expected {expected_type.__name__}, "
                    f"got {type(value).__name__} ({value!r})"
                )
        for w in warnings:
            logger.warning(w)
        return warnings

    def _get_raw(self, key: str) -> Any:
        """Gets value from config.json without schema fallback."""
        value = self._config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return None
            if value is None:
                return None
        return value

    def require(self, key: str) -> Any:
        """
        Requires a config value to be explicitly set in config.json.

        Raises ScoreConfigError if missing.
        """
        value = self._get_raw(key)
        if value is None:
            logger.error(f"Missing required config key: {key}")
            raise ScoreConfigError(key)
        return value


# Global accessor
config = Config()
