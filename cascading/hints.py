"""
Hint Service

Single Responsibility: Surface the guidance text attached to a cascade rule
(the reserved HINT key) when a parent field takes a value.

Hints are best-effort. The orchestrator guards every call so a failing
notifier never aborts a cascade pass.
"""

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from .cascade_map import get_definition
from .types import HINT_KEY, CascadeMap

logger = structlog.get_logger(__name__)

HintNotifier = Callable[[str, Any, str], Union[None, Awaitable[None]]]


class HintService:
    """
    Emits hints for (field, value) pairs.

    Enablement is held per instance: a session owns its HintService and
    toggles it as the form is first cascaded and later reset.
    """

    def __init__(self, notifier: Optional[HintNotifier] = None, enabled: bool = True):
        """
        Args:
            notifier: Optional callable(field_name, field_value, hint), sync or async
            enabled: Initial enablement
        """
        self._notifier = notifier
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    async def hint_field_value(self, cascade_map: CascadeMap, field_name: str, field_value: Any) -> Optional[str]:
        """
        Emit the hint configured for `field_name` = `field_value`, if any.

        Returns:
            The hint text that was emitted, or None.
        """
        if not self._enabled:
            return None

        entry = cascade_map.get(field_name)
        if entry is None:
            return None

        definition = get_definition(entry, field_value)
        if definition is None:
            return None

        hint = definition.get(HINT_KEY)
        if not hint:
            return None

        hint = str(hint)
        logger.info("Cascade hint", field=field_name, value=field_value, hint=hint)
        if self._notifier is not None:
            result = self._notifier(field_name, field_value, hint)
            if inspect.isawaitable(result):
                await result
        return hint
