"""Logging utilities for the score engine."""

from common.logging.logger import setup_logger, get_logger, JsonFormatter

__all__ = ['setup_logger', 'get_logger', 'JsonFormatter']
