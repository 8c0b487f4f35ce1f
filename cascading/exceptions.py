"""
Custom exceptions for cascading field rules.
"""

from typing import List, Optional


class CascadeError(Exception):
    """Base exception for cascading field errors."""
    pass


class ConfigurationError(CascadeError):
    """
    Raised when a cascade configuration references fields unknown to the project.

    Validation is advisory: the cascade engine never raises this on its own,
    it is raised by CascadeValidationService.ensure_valid() for callers that
    want to reject a configuration outright.
    """

    def __init__(self, message: str, invalid_fields: Optional[List[str]] = None):
        self.invalid_fields = list(invalid_fields or [])
        super().__init__(message)


class ConfigurationLoadError(ConfigurationError):
    """Raised when a configuration document cannot be read or is not a JSON object."""
    pass


class MalformedCascadeError(CascadeError, TypeError):
    """Raised when a nested cascade shape is malformed at the point of use."""
    pass


class InvalidFieldStateError(CascadeError):
    """
    Raised when a field's current value is outside its filtered allowed values.

    The message is the text surfaced on the host form.
    """

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' value is invalid")


class FieldCatalogError(CascadeError):
    """Raised when the field catalog cannot be fetched or parsed."""
    pass
