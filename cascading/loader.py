"""
Configuration loading.

Reads cascade configurations (and the small JSON documents the CLI needs)
from disk. Only the top-level shape is checked here; nested shapes are
checked where the engine uses them.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import structlog

from .exceptions import ConfigurationLoadError

logger = structlog.get_logger(__name__)


def _read_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationLoadError(f"Cannot read '{path}': {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationLoadError(f"Invalid JSON in '{path}': {e}") from e


def parse_cascade_configuration(text: str) -> Dict[str, Any]:
    """
    Parse a cascade configuration from JSON text.

    Raises:
        ConfigurationLoadError: If the text is not JSON or not an object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationLoadError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationLoadError("Cascade configuration must be a JSON object")
    return data


def load_cascade_configuration(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a cascade configuration from a JSON file.

    Raises:
        ConfigurationLoadError: If the file cannot be read, is not JSON or not an object
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigurationLoadError(f"Cascade configuration in '{path}' must be a JSON object")
    logger.debug("Cascade configuration loaded", path=str(path), parents=list(data.keys()))
    return data


def load_json_document(path: Union[str, Path]) -> Any:
    """Load any JSON document (field lists, schemas, field values)."""
    return _read_json(path)
