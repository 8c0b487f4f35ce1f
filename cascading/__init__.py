"""
Cascading field rules.

Restricts the allowed values of dependent fields on a work item form based on
the values selected in parent fields, following a declarative configuration.
"""

from .cascade_map import affected_fields, build_cascade_map
from .catalog import (
    AzureDevOpsFieldCatalog,
    FieldCatalogService,
    ProjectInfo,
    ProjectService,
    StaticFieldCatalog,
    StaticProjectService,
    WorkItemField,
)
from .exceptions import (
    CascadeError,
    ConfigurationError,
    ConfigurationLoadError,
    FieldCatalogError,
    InvalidFieldStateError,
    MalformedCascadeError,
)
from .hints import HintService
from .host import InMemoryWorkItemForm, WorkItemFormService
from .loader import load_cascade_configuration, parse_cascade_configuration
from .options import OptionIntersectionEngine, intersect_options
from .service import CascadingFieldsService
from .types import (
    RESERVED_FIELD_NAMES,
    CascadeEntry,
    CascadeOutcome,
    ExplicitList,
    FieldOptionsFlags,
    Unrestricted,
    is_reserved_field_name,
    parse_restriction,
)
from .validation import CascadeValidationService

__version__ = "1.0.0"

__all__ = [
    'affected_fields',
    'build_cascade_map',
    'AzureDevOpsFieldCatalog',
    'FieldCatalogService',
    'ProjectInfo',
    'ProjectService',
    'StaticFieldCatalog',
    'StaticProjectService',
    'WorkItemField',
    'CascadeError',
    'ConfigurationError',
    'ConfigurationLoadError',
    'FieldCatalogError',
    'InvalidFieldStateError',
    'MalformedCascadeError',
    'HintService',
    'InMemoryWorkItemForm',
    'WorkItemFormService',
    'load_cascade_configuration',
    'parse_cascade_configuration',
    'OptionIntersectionEngine',
    'intersect_options',
    'CascadingFieldsService',
    'RESERVED_FIELD_NAMES',
    'CascadeEntry',
    'CascadeOutcome',
    'ExplicitList',
    'FieldOptionsFlags',
    'Unrestricted',
    'is_reserved_field_name',
    'parse_restriction',
    'CascadeValidationService',
]
