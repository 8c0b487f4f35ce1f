"""
Cascading Fields Service

Coordinates a cascade pass: resolve the fields a parent change affects,
compute their intersected allowed values, apply them to the host form and
validate the resulting state.

Architecture (SRP-compliant):
- build_cascade_map / affected_fields: configuration lookup (cascade_map.py)
- OptionIntersectionEngine: allowed-value computation (options.py)
- HintService: rule guidance (hints.py)
- CascadingFieldsService: sequencing and host writes (this module)
"""

import asyncio
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

import structlog

from .cascade_map import affected_fields, all_altered_fields, build_cascade_map, is_empty_value
from .exceptions import InvalidFieldStateError
from .hints import HintService
from .host import WorkItemFormService
from .options import OptionIntersectionEngine
from .types import CascadeConfiguration, CascadeEntry, CascadeOutcome, FieldOptions

logger = structlog.get_logger(__name__)


class CascadingFieldsService:
    """
    Cascade engine bound to one host form for the length of a form session.

    The CascadeMap is built once from the configuration and never changes.
    """

    def __init__(
        self,
        work_item_service: WorkItemFormService,
        cascade_configuration: CascadeConfiguration,
        hint_service: Optional[HintService] = None,
    ):
        """
        Args:
            work_item_service: Host form the cascades read from and write to
            cascade_configuration: parent field -> value -> definition (None for no rules)
            hint_service: Hint emitter; a silent one is created when omitted
        """
        self._work_item_service = work_item_service
        self._hint_service = hint_service or HintService()
        self._cascade_map = build_cascade_map(cascade_configuration)
        self._options_engine = OptionIntersectionEngine(self._cascade_map, work_item_service)

    @property
    def cascade_map(self) -> Mapping[str, CascadeEntry]:
        """Read-only view of the CascadeMap."""
        return MappingProxyType(self._cascade_map)

    @property
    def hint_service(self) -> HintService:
        return self._hint_service

    def get_affected_fields(self, field_name: str, field_value: Any) -> List[str]:
        return affected_fields(self._cascade_map, field_name, field_value)

    async def prepare_cascade_options(self, affected: List[str]) -> FieldOptions:
        return await self._options_engine.compute(affected)

    async def _validate_filter(self, field_name: str) -> bool:
        """
        A field is valid when it is empty or its value is among the
        currently filtered allowed values.
        """
        allowed_values = await self._work_item_service.get_filtered_allowed_field_values(field_name)
        field_value = await self._work_item_service.get_field_value(field_name)
        if is_empty_value(field_value):
            return True
        return str(field_value) in {str(value) for value in allowed_values}

    async def _hint(self, field_name: str, field_value: Any) -> None:
        try:
            await self._hint_service.hint_field_value(self._cascade_map, field_name, field_value)
        except Exception as e:
            logger.warning("Hint failed", field=field_name, error=str(e), exc_info=True)

    async def perform_cascading(self, changed_field_name: str) -> CascadeOutcome:
        """
        Run a cascade pass for a field whose value changed.

        Filters are applied field by field; the pass stops at the first field
        whose current value is not allowed, after surfacing an error for it.

        Args:
            changed_field_name: Reference name of the field that changed

        Returns:
            CascadeOutcome describing what was applied
        """
        changed_field_value = await self._work_item_service.get_field_value(changed_field_name)
        await self._work_item_service.clear_error()

        outcome = CascadeOutcome(field=changed_field_name, value=changed_field_value)

        if changed_field_name not in self._cascade_map:
            outcome.skipped = True
            return outcome

        await self._hint(changed_field_name, changed_field_value)

        affected = self.get_affected_fields(changed_field_name, changed_field_value)
        field_options = await self.prepare_cascade_options(affected)

        for field_name, values in field_options.items():
            await self._work_item_service.filter_allowed_field_values(field_name, values)
            outcome.applied.append(field_name)

            if not await self._validate_filter(field_name):
                error = InvalidFieldStateError(field_name)
                await self._work_item_service.set_error(str(error))
                outcome.invalid_field = field_name
                logger.info("Cascade stopped on invalid field", trigger=changed_field_name, field=field_name)
                break

        logger.debug(
            "Cascade performed",
            trigger=changed_field_name,
            value=changed_field_value,
            applied=outcome.applied,
        )
        return outcome

    async def cascade_all(self) -> List[CascadeOutcome]:
        """
        Cascade every parent field of the map, then stop hinting for the session.
        """
        outcomes = await asyncio.gather(
            *(self.perform_cascading(field_name) for field_name in self._cascade_map.keys())
        )

        # Only hint the first time the form is cascaded
        self._hint_service.set_enabled(False)
        return list(outcomes)

    async def reset_all_cascades(self) -> None:
        """
        Restore the full allowed values of every dependent field and re-enable hints.
        """
        self._hint_service.set_enabled(True)

        async def reset_field(field_name: str) -> None:
            values = await self._work_item_service.get_allowed_field_values(field_name)
            await self._work_item_service.filter_allowed_field_values(
                field_name, [str(value) for value in values]
            )

        fields_to_reset = all_altered_fields(self._cascade_map)
        await asyncio.gather(*(reset_field(field_name) for field_name in fields_to_reset))
        logger.debug("Cascades reset", fields=fields_to_reset)
