"""
Django Form Host

This module lets a Django form act as the host form of the cascade engine.

Architecture (SRP-compliant):
- DjangoFormHost: WorkItemFormService over a django.forms.Form; the schema
  allowed values are the ChoiceField choices the form was declared with and
  filtering rewrites field.choices
- CascadingForm: Form base class that runs the cascade engine as fields are
  updated incrementally
"""

from typing import Any, Dict, List, Optional, Tuple

import django
import structlog
from django import forms
from django.conf import settings

from ..cascade_map import is_empty_value
from ..hints import HintService
from ..host import WorkItemFormService
from ..service import CascadingFieldsService
from ..types import CascadeConfiguration, CascadeOutcome
from ..utils import run_async_safe

# Configure Django settings for standalone form usage
if not settings.configured:
    settings.configure(
        DEBUG=False,
        USE_I18N=False,
        INSTALLED_APPS=[],
    )
    django.setup()

logger = structlog.get_logger(__name__)

Choice = Tuple[Any, Any]


def _flatten_choices(choices) -> List[Choice]:
    """Flatten optgroups into a plain list of (value, label) pairs."""
    flat: List[Choice] = []
    for value, label in choices:
        if isinstance(label, (list, tuple)):
            flat.extend(_flatten_choices(label))
        else:
            flat.append((value, label))
    return flat


class DjangoFormHost(WorkItemFormService):
    """
    WorkItemFormService backed by a Django form instance.

    ChoiceFields: filtering keeps the declared choices (and labels) whose
    value is in the filtered set, in declared order, plus the blank choice if
    the field declares one.

    Other fields accept any value, so their schema set is just the current
    value. Filtered sets for them cannot be rendered; they are remembered per
    field and reported back for validation.
    """

    def __init__(self, form: forms.Form):
        """
        Args:
            form: Django form instance; its current choices are taken as the schema
        """
        self._form = form
        self._schema_choices: Dict[str, List[Choice]] = {
            name: _flatten_choices(field.choices)
            for name, field in form.fields.items()
            if isinstance(field, forms.ChoiceField)
        }
        self._filtered_values: Dict[str, List[str]] = {}
        self._error: Optional[str] = None

    def _choice_field(self, field_name: str) -> Optional[forms.ChoiceField]:
        field = self._form.fields.get(field_name)
        if isinstance(field, forms.ChoiceField):
            return field
        return None

    def _read_value(self, field_name: str) -> Optional[Any]:
        if hasattr(self._form, 'get_field_value'):
            return self._form.get_field_value(field_name)
        if self._form.is_bound and self._form.data and field_name in self._form.data:
            return self._form.data.get(field_name)
        return self._form.initial.get(field_name)

    @property
    def error(self) -> Optional[str]:
        return self._error

    async def get_field_value(self, field_name: str) -> Optional[Any]:
        return self._read_value(field_name)

    async def get_allowed_field_values(self, field_name: str) -> List[Any]:
        if field_name not in self._schema_choices:
            value = self._read_value(field_name)
            return [] if is_empty_value(value) else [str(value)]
        return [value for value, _ in self._schema_choices[field_name] if not is_empty_value(value)]

    async def filter_allowed_field_values(self, field_name: str, values: List[str]) -> None:
        field = self._choice_field(field_name)
        if field is None:
            logger.debug("Field has no choices, keeping filtered values for validation", field=field_name)
            self._filtered_values[field_name] = [str(value) for value in values]
            return
        allowed = {str(value) for value in values}
        field.choices = [
            (value, label)
            for value, label in self._schema_choices.get(field_name, [])
            if is_empty_value(value) or str(value) in allowed
        ]

    async def get_filtered_allowed_field_values(self, field_name: str) -> List[Any]:
        field = self._choice_field(field_name)
        if field is None:
            if field_name in self._filtered_values:
                return list(self._filtered_values[field_name])
            return await self.get_allowed_field_values(field_name)
        return [value for value, _ in _flatten_choices(field.choices) if not is_empty_value(value)]

    async def set_error(self, message: str) -> None:
        self._error = message

    async def clear_error(self) -> None:
        self._error = None


class CascadingForm(forms.Form):
    """
    Base form class whose ChoiceFields are restricted by cascade rules.

    Child forms set `cascade_configuration` (or override
    get_cascade_configuration()) and update fields through update_field(),
    which re-runs the cascade whenever a value actually changes.

    Example:
        class BugForm(CascadingForm):
            cascade_configuration = {"category": {"bug": {"priority": ["1", "2"]}}}
            category = forms.ChoiceField(choices=[("bug", "Bug"), ("feature", "Feature")])
            priority = forms.ChoiceField(choices=[("1", "1"), ("2", "2"), ("3", "3")])
    """

    cascade_configuration: CascadeConfiguration = None

    def __init__(self, *args, hint_service: Optional[HintService] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._incremental_data: Dict[str, Any] = {}
        self._cascade_host = DjangoFormHost(self)
        self._cascading = CascadingFieldsService(
            self._cascade_host,
            self.get_cascade_configuration(),
            hint_service=hint_service,
        )
        # Restrict choices from any pre-populated parent values
        run_async_safe(self._cascading.cascade_all)

    def get_cascade_configuration(self) -> CascadeConfiguration:
        return self.cascade_configuration

    @property
    def cascading(self) -> CascadingFieldsService:
        return self._cascading

    @property
    def cascade_error(self) -> Optional[str]:
        return self._cascade_host.error

    def get_field_value(self, field_name: str) -> Optional[Any]:
        """
        Current field value, checking incremental updates before bound data and initial.
        """
        if field_name in self._incremental_data:
            return self._incremental_data[field_name]
        if self.is_bound and self.data and field_name in self.data:
            return self.data.get(field_name)
        return self.initial.get(field_name)

    def _rebind_form(self):
        """Merge incremental data with existing form data and rebind."""
        updated_data = {}
        if self.is_bound and self.data:
            # Convert QueryDict to dict if needed
            if hasattr(self.data, 'dict'):
                updated_data.update(self.data.dict())
            else:
                updated_data.update(dict(self.data))
        updated_data.update(self._incremental_data)
        self.data = updated_data
        self.is_bound = True

    def _is_value_changed(self, field_name: str, new_value: Any) -> bool:
        current_value = self.get_field_value(field_name)
        normalized_current = None if is_empty_value(current_value) else current_value
        normalized_new = None if is_empty_value(new_value) else new_value
        return normalized_current != normalized_new

    def update_field(self, field_name: str, value: Any) -> Optional[CascadeOutcome]:
        """
        Update a field and cascade its dependent fields when the value changed.

        Returns:
            CascadeOutcome of the pass, or None when the value did not change
        """
        value_changed = self._is_value_changed(field_name, value)

        self._incremental_data[field_name] = value
        self._rebind_form()
        # Validation must run again against the new data
        self._errors = None

        if not value_changed:
            return None
        return run_async_safe(self._cascading.perform_cascading, field_name)

    def clean(self):
        cleaned_data = super().clean()
        if self.cascade_error:
            raise forms.ValidationError(self.cascade_error)
        return cleaned_data

    def reset_cascades(self) -> None:
        """Restore every dependent field's declared choices."""
        run_async_safe(self._cascading.reset_all_cascades)
