"""
Cascade data model.

Pydantic models for the normalized cascade lookup (CascadeMap), the tagged
restriction variant that replaces the raw "All" token, and the outcome of a
cascade pass.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import MalformedCascadeError


class FieldOptionsFlags(str, Enum):
    """Tokens accepted in place of an explicit value list."""

    ALL = "All"


# Keys allowed inside a cascade definition that carry metadata, not field names
RESERVED_FIELD_NAMES = ("HINT",)

HINT_KEY = "HINT"


def is_reserved_field_name(name: Any) -> bool:
    """Return True if a cascade definition key is metadata rather than a field."""
    return name in RESERVED_FIELD_NAMES


class Unrestricted(BaseModel):
    """Dependent field inherits every allowed value defined by the schema."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unrestricted"] = "unrestricted"


class ExplicitList(BaseModel):
    """Dependent field is restricted to an explicit ordered list of values."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["explicit"] = "explicit"
    values: List[str] = Field(default_factory=list, description="Permitted values, in order")


Restriction = Union[Unrestricted, ExplicitList]


def parse_restriction(raw: Any) -> Restriction:
    """
    Convert a raw cascade definition value into a Restriction.

    Args:
        raw: Either the "All" token (any case) or a list of scalar values.

    Returns:
        Unrestricted or ExplicitList with stringified values.

    Raises:
        MalformedCascadeError: If raw is any other shape.
    """
    if isinstance(raw, str):
        if raw.strip().lower() == FieldOptionsFlags.ALL.value.lower():
            return Unrestricted()
        raise MalformedCascadeError(
            f"Expected '{FieldOptionsFlags.ALL.value}' or a list of values, got string {raw!r}"
        )

    if isinstance(raw, (list, tuple)):
        for value in raw:
            if isinstance(value, (dict, list, tuple, set)):
                raise MalformedCascadeError(
                    f"Allowed values must be scalars, got {type(value).__name__}"
                )
        return ExplicitList(values=[str(value) for value in raw])

    raise MalformedCascadeError(
        f"Expected '{FieldOptionsFlags.ALL.value}' or a list of values, got {type(raw).__name__}"
    )


class CascadeEntry(BaseModel):
    """
    Cascade rules registered for a single parent field.
    """

    model_config = ConfigDict(frozen=True)

    alters: List[str] = Field(
        default_factory=list,
        description="Every dependent field named by any definition of this parent, deduplicated",
    )
    cascades: Dict[str, Any] = Field(
        default_factory=dict,
        description="Parent value -> cascade definition, as configured",
    )


CascadeConfiguration = Optional[Mapping[str, Mapping[str, Mapping[str, Any]]]]
CascadeMap = Dict[str, CascadeEntry]
FieldOptions = Dict[str, List[str]]


class CascadeOutcome(BaseModel):
    """
    Result of one cascade pass for a triggering field.
    """

    field: str = Field(..., description="Field whose change triggered the pass")
    value: Optional[Any] = Field(default=None, description="Value of the triggering field")
    skipped: bool = Field(default=False, description="True if the field is not a parent")
    applied: List[str] = Field(
        default_factory=list, description="Fields whose allowed values were filtered, in order"
    )
    invalid_field: Optional[str] = Field(
        default=None, description="First field found invalid, if any"
    )

    @property
    def is_valid(self) -> bool:
        return self.invalid_field is None
