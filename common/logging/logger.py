import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
import json

class JsonFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per LogRecord.

    A ``context`` dict passed through ``extra`` (as the diagnostics sink does)
    is emitted under its own key so that field names, record ids and
    definition names stay machine-readable.
    """
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno
        }
        context = getattr(record, "context", None)
        if context:
            log_record["context"] = context
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)

def setup_logger(name: str, log_dir: str = "logs", level: int = logging.INFO, console_output: bool = True) -> logging.Logger:
    """
    Sets up a logger with both file and console handlers.

    Args:
        name: Name of the logger
        log_dir: Directory to store log files
        level: Logging level
        console_output: Whether to output to console

    Returns:
        Configured logger instance
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    file_handler = RotatingFileHandler(
        log_path / f"{name}.jsonl",
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5
    )
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    return logger

def get_logger(name: str) -> logging.Logger:
    """Convenience function to get a logger with default settings"""
    return setup_logger(name)
