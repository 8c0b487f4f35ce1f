"""
Host form interface.

The cascade engine only ever talks to the record being edited through
WorkItemFormService. Hosts implement exactly these coroutines; the engine
uses no other members.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple


class WorkItemFormService(ABC):
    """
    Abstract interface for the form/record that owns field values and
    enforces allowed-value filters.
    """

    @abstractmethod
    async def get_field_value(self, field_name: str) -> Optional[Any]:
        """Return the current value of a field, or None if empty."""
        ...

    @abstractmethod
    async def get_allowed_field_values(self, field_name: str) -> List[Any]:
        """Return the full schema-defined allowed values of a field."""
        ...

    @abstractmethod
    async def filter_allowed_field_values(self, field_name: str, values: List[str]) -> None:
        """Restrict the selectable values of a field to `values`."""
        ...

    @abstractmethod
    async def get_filtered_allowed_field_values(self, field_name: str) -> List[Any]:
        """Return the currently effective (filtered) allowed values of a field."""
        ...

    @abstractmethod
    async def set_error(self, message: str) -> None:
        """Surface a form-level error to the user."""
        ...

    @abstractmethod
    async def clear_error(self) -> None:
        """Remove any form-level error previously set."""
        ...


class InMemoryWorkItemForm(WorkItemFormService):
    """
    Dict-backed host form.

    Holds the schema allowed values, the current field values, the active
    filters and the form-level error. Every call is recorded in `calls`
    as a (method, args) tuple so callers can inspect what the engine did.
    """

    def __init__(
        self,
        allowed_values: Optional[Dict[str, Iterable[Any]]] = None,
        values: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            allowed_values: field -> schema allowed values
            values: field -> current value
        """
        self._allowed_values: Dict[str, List[Any]] = {
            name: list(options) for name, options in (allowed_values or {}).items()
        }
        self._values: Dict[str, Any] = dict(values or {})
        self._filtered_values: Dict[str, List[str]] = {}
        self.error: Optional[str] = None
        self.calls: List[Tuple[str, tuple]] = []

    def set_field_value(self, field_name: str, value: Any) -> None:
        """Set a field's value (the user editing the form)."""
        self._values[field_name] = value

    def get_filtered_values(self, field_name: str) -> Optional[List[str]]:
        """Active filter for a field, or None if it was never filtered."""
        return self._filtered_values.get(field_name)

    @property
    def filtered_values(self) -> Dict[str, List[str]]:
        return dict(self._filtered_values)

    @property
    def values(self) -> Dict[str, Any]:
        return dict(self._values)

    async def get_field_value(self, field_name: str) -> Optional[Any]:
        self.calls.append(("get_field_value", (field_name,)))
        return self._values.get(field_name)

    async def get_allowed_field_values(self, field_name: str) -> List[Any]:
        self.calls.append(("get_allowed_field_values", (field_name,)))
        return list(self._allowed_values.get(field_name, []))

    async def filter_allowed_field_values(self, field_name: str, values: List[str]) -> None:
        self.calls.append(("filter_allowed_field_values", (field_name, list(values))))
        self._filtered_values[field_name] = list(values)

    async def get_filtered_allowed_field_values(self, field_name: str) -> List[Any]:
        self.calls.append(("get_filtered_allowed_field_values", (field_name,)))
        if field_name in self._filtered_values:
            return list(self._filtered_values[field_name])
        return [str(value) for value in self._allowed_values.get(field_name, [])]

    async def set_error(self, message: str) -> None:
        self.calls.append(("set_error", (message,)))
        self.error = message

    async def clear_error(self) -> None:
        self.calls.append(("clear_error", ()))
        self.error = None

    def calls_to(self, method: str) -> List[tuple]:
        """Arguments of every recorded call to `method`, in order."""
        return [args for name, args in self.calls if name == method]
