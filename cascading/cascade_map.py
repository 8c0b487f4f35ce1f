"""
Cascade Map

Single Responsibility: Turn a raw cascade configuration into the normalized
CascadeMap and answer which dependent fields a parent change touches.

This module does NOT talk to the host form; it is pure data manipulation.
"""

from typing import Any, Iterable, List, Mapping, Optional

import structlog

from .exceptions import MalformedCascadeError
from .types import CascadeConfiguration, CascadeEntry, CascadeMap, is_reserved_field_name

logger = structlog.get_logger(__name__)


def is_empty_value(value: Any) -> bool:
    """Normalize None and empty string to 'no value selected'."""
    return value is None or value == ""


def require_mapping(value: Any, what: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise MalformedCascadeError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _unique(names: Iterable[str]) -> List[str]:
    """Deduplicate while keeping first-seen order."""
    seen = set()
    result = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


def definition_fields(definition: Any) -> List[str]:
    """
    Dependent field names of a single cascade definition, reserved keys excluded.

    Args:
        definition: Mapping of dependent field -> restriction (plus metadata keys)

    Returns:
        list: Field names in definition order
    """
    definition = require_mapping(definition, "Cascade definition")
    return [str(name) for name in definition.keys() if not is_reserved_field_name(name)]


def get_definition(entry: CascadeEntry, value: Any) -> Optional[Mapping[str, Any]]:
    """
    Look up the cascade definition registered for a parent value.

    Returns:
        The definition mapping, or None when the value has no rule.
    """
    if is_empty_value(value):
        return None
    definition = entry.cascades.get(str(value))
    if definition is None:
        return None
    return require_mapping(definition, f"Cascade definition for value '{value}'")


def build_cascade_map(configuration: CascadeConfiguration) -> CascadeMap:
    """
    Build the CascadeMap from a raw configuration.

    For every parent field, `alters` collects each non-reserved key across all
    of its value definitions, deduplicated. The rule set itself is kept as
    configured (keys stringified, each definition copied) under `cascades`,
    so later changes to the configuration object do not reach the map.

    Args:
        configuration: parent field -> parent value -> cascade definition, or None

    Returns:
        dict: parent field -> CascadeEntry (empty when configuration is None)
    """
    cascade_map: CascadeMap = {}
    if configuration is None:
        return cascade_map

    configuration = require_mapping(configuration, "Cascade configuration")
    for field_name, field_values in configuration.items():
        field_values = require_mapping(field_values, f"Cascade rules for '{field_name}'")

        alters: List[str] = []
        for definition in field_values.values():
            alters.extend(definition_fields(definition))

        cascade_map[str(field_name)] = CascadeEntry(
            alters=_unique(alters),
            cascades={str(value): dict(definition) for value, definition in field_values.items()},
        )

    logger.debug(
        "Cascade map built",
        parents=list(cascade_map.keys()),
        alters={name: entry.alters for name, entry in cascade_map.items()},
    )
    return cascade_map


def affected_fields(cascade_map: CascadeMap, field_name: str, field_value: Any) -> List[str]:
    """
    Determine which dependent fields must be recomputed after a parent change.

    - No value selected: every field any value of this parent could affect.
    - Value with a rule: the fields named by that rule.
    - Value without a rule: nothing.

    Args:
        cascade_map: The CascadeMap; field_name must be one of its keys
        field_name: Parent field that changed
        field_value: Its new value

    Returns:
        list: Dependent field names, deduplicated, in first-seen order
    """
    entry = cascade_map[field_name]

    if is_empty_value(field_value):
        fields: List[str] = []
        for definition in entry.cascades.values():
            fields.extend(definition_fields(definition))
        return _unique(fields)

    definition = get_definition(entry, field_value)
    if definition is not None:
        return _unique(definition_fields(definition))

    return []


def all_altered_fields(cascade_map: CascadeMap) -> List[str]:
    """Every field named in any `alters` list across the whole map, deduplicated."""
    return _unique(name for entry in cascade_map.values() for name in entry.alters)
