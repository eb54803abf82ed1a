"""Logging utilities for the duplicate detection engine.

Context passed to the helpers is rendered as truncated JSON, so that very
long user-entered names never flood a log line.
"""
import json
import logging
from typing import Any

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('cider-dedup')

_MAX_VALUE_LENGTH = 80


def shorten(text: Any, max_length: int = _MAX_VALUE_LENGTH) -> Any:
    """Clip a string value for logging; non-strings are returned unchanged."""
    if not isinstance(text, str) or len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def safe_json(obj: Any, max_length: int = 1000) -> str:
    """Serialize log context to JSON, clipping long strings and the total length.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string

    Returns:
        JSON string, or a placeholder if the object cannot be serialized
    """
    try:
        if isinstance(obj, dict):
            obj = {key: shorten(value) for key, value in obj.items()}
        json_str = json.dumps(obj, ensure_ascii=False, default=str)

        if len(json_str) > max_length:
            json_str = json_str[:max_length] + "... [truncated]"

        return json_str
    except (TypeError, ValueError):
        return "<unable to serialize>"


def set_level(level: str) -> None:
    """Apply a level name such as ``"DEBUG"`` to the package logger."""
    logger.setLevel(level.upper())


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional context."""
    if kwargs:
        logger.info(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.info(message)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional context."""
    if kwargs:
        logger.warning(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.warning(message)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional context."""
    if kwargs:
        logger.error(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.error(message)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional context."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if kwargs:
        logger.debug(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.debug(message)


def log_classification(outcome: str, confidence: float, **kwargs) -> None:
    """Log the outcome of a duplicate check.

    Args:
        outcome: ``"duplicate"``, ``"similar"`` or ``"none"``
        confidence: Reported confidence for the check
        **kwargs: Additional context
    """
    log_info(f"Duplicate check: {outcome}",
             confidence=round(confidence, 4),
             **kwargs)
