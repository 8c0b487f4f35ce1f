"""
Cascade Validation Service

Single Responsibility: Check a cascade configuration against the fields that
actually exist in the project, reporting every unknown name.

Validation is advisory; the cascade engine does not depend on it. Malformed
shapes raise MalformedCascadeError, as they do when the CascadeMap is built.
"""

import asyncio
from typing import Any, List, Mapping, Optional

import structlog

from .cascade_map import require_mapping
from .catalog import FieldCatalogService, ProjectService, WorkItemField
from .exceptions import ConfigurationError
from .types import is_reserved_field_name

logger = structlog.get_logger(__name__)

InvalidField = str


class CascadeValidationService:
    """
    Validates cascade configurations for one project.

    The field catalog is fetched on first use and cached for the lifetime of
    the instance; create a new instance to pick up schema changes.
    """

    def __init__(self, project_service: ProjectService, field_catalog: FieldCatalogService):
        self._project_service = project_service
        self._field_catalog = field_catalog
        self._cached_fields: Optional[List[WorkItemField]] = None
        self._lock = asyncio.Lock()

    async def _get_fields(self, project_id: str) -> List[WorkItemField]:
        async with self._lock:
            if self._cached_fields is None:
                self._cached_fields = await self._field_catalog.get_fields(project_id)
        return self._cached_fields

    async def validate_cascades(self, cascades: Mapping[str, Mapping[str, Any]]) -> Optional[List[InvalidField]]:
        """
        Find every field name in a configuration that the project does not define.

        Args:
            cascades: parent field -> parent value -> cascade definition

        Returns:
            list of invalid field names (parents first, then nested names in
            configuration order), or None when the configuration is valid
        """
        cascades = require_mapping(cascades, "Cascade configuration")
        project = await self._project_service.get_project()
        fields = await self._get_fields(project.id)
        field_list = {field.reference_name for field in fields}

        # Check fields of the config root
        invalid_fields_total: List[InvalidField] = [
            field for field in cascades.keys() if field not in field_list
        ]

        # Check fields on the lower level of config
        for field_name, field_values in cascades.items():
            field_values = require_mapping(field_values, f"Cascade rules for '{field_name}'")
            for value, inner_fields in field_values.items():
                inner_fields = require_mapping(inner_fields, f"Cascade definition for value '{value}'")
                invalid_fields_total.extend(
                    field
                    for field in inner_fields.keys()
                    if not is_reserved_field_name(field) and field not in field_list
                )

        if invalid_fields_total:
            logger.info("Cascade configuration has unknown fields", invalid_fields=invalid_fields_total)
            return invalid_fields_total

        return None

    async def ensure_valid(self, cascades: Mapping[str, Mapping[str, Any]]) -> None:
        """
        Raise ConfigurationError if the configuration names unknown fields.
        """
        invalid_fields = await self.validate_cascades(cascades)
        if invalid_fields:
            raise ConfigurationError(
                f"Unknown fields in cascade configuration: {', '.join(invalid_fields)}",
                invalid_fields=invalid_fields,
            )
