"""
Option Intersection Engine

Single Responsibility: Compute the allowed values of affected dependent fields
by intersecting the restriction every parent rule currently imposes on them.

This class does NOT apply filters or validate field state; the orchestrator
does that with the FieldOptions returned here.
"""

import asyncio
from typing import Any, List, Tuple

import structlog

from .cascade_map import get_definition
from .host import WorkItemFormService
from .log_safe import log_safe_output
from .types import CascadeEntry, CascadeMap, ExplicitList, FieldOptions, Unrestricted, parse_restriction

logger = structlog.get_logger(__name__)


def intersect_options(current: List[str], incoming: List[str]) -> List[str]:
    """
    Values of `current` that also appear in `incoming`, in `current` order,
    duplicates removed.
    """
    keep = set(incoming)
    seen = set()
    result = []
    for value in current:
        if value in keep and value not in seen:
            seen.add(value)
            result.append(value)
    return result


class OptionIntersectionEngine:
    """
    Computes FieldOptions for a set of affected fields.

    Every (affected field, parent rule) pair is resolved concurrently. The
    per-field fold happens after the join, in CascadeMap order, so the
    accumulator is never written by two tasks at once.
    """

    def __init__(self, cascade_map: CascadeMap, work_item_service: WorkItemFormService):
        self._cascade_map = cascade_map
        self._work_item_service = work_item_service

    def _pairs(self, affected: List[str]) -> List[Tuple[str, str, CascadeEntry]]:
        return [
            (field_name, parent_name, entry)
            for field_name in affected
            for parent_name, entry in self._cascade_map.items()
            if field_name in entry.alters
        ]

    async def _schema_values(self, field_name: str) -> List[str]:
        values = await self._work_item_service.get_allowed_field_values(field_name)
        return [str(value) for value in values]

    async def _parent_options(self, field_name: str, parent_name: str, entry: CascadeEntry) -> List[str]:
        """
        Allowed values of `field_name` according to the current value of one parent.

        A parent with no value, a value without a rule, a rule that does not
        mention the field, or an "All" restriction leaves the full schema set.
        """
        parent_value: Any = await self._work_item_service.get_field_value(parent_name)
        definition = get_definition(entry, parent_value)

        restriction = Unrestricted()
        if definition is not None and field_name in definition:
            restriction = parse_restriction(definition[field_name])

        if isinstance(restriction, ExplicitList):
            return list(restriction.values)
        return await self._schema_values(field_name)

    async def compute(self, affected: List[str]) -> FieldOptions:
        """
        Compute the intersected allowed values for each affected field.

        Args:
            affected: Dependent field names, in the order results should iterate

        Returns:
            dict: field -> allowed values, keyed in `affected` order
        """
        pairs = self._pairs(affected)
        results = await asyncio.gather(
            *(self._parent_options(field_name, parent_name, entry) for field_name, parent_name, entry in pairs)
        )

        field_options: FieldOptions = {}
        for (field_name, parent_name, _), options in zip(pairs, results):
            if field_name in field_options:
                field_options[field_name] = intersect_options(field_options[field_name], options)
            else:
                field_options[field_name] = intersect_options(options, options)

        for field_name, options in field_options.items():
            if not options:
                logger.warning("Cascade rules leave no allowed values", field=field_name)

        logger.debug("Field options computed", options=log_safe_output(field_options))
        return field_options
