"""Export module for rendering entity data as CSV, XLSX, PDF and JSON."""

from parksys.export.base import BaseExporter, select_fields
from parksys.export.branding import DEFAULT_BRANDING, BrandingConfig, resolve_branding
from parksys.export.config import (
    BrandingOptions,
    ExportConfig,
    ExportField,
    ExportFormat,
    ExportMetadata,
    ExportOptions,
    ExportPreview,
    ExportResult,
    ExportTemplate,
    FieldType,
    FiltersConfig,
    SortingConfig,
    SortSpec,
)
from parksys.export.entities import EntityRegistry, entity_registry
from parksys.export.errors import (
    DataError,
    EntityNotFoundError,
    ExportError,
    ExportErrorCode,
    FormatNotSupportedError,
    PermissionDeniedError,
    TemplateError,
)
from parksys.export.registry import ExportFormatRegistry, format_registry

__all__ = [
    "BaseExporter",
    "BrandingConfig",
    "BrandingOptions",
    "DEFAULT_BRANDING",
    "DataError",
    "EntityNotFoundError",
    "EntityRegistry",
    "ExportConfig",
    "ExportError",
    "ExportErrorCode",
    "ExportField",
    "ExportFormat",
    "ExportFormatRegistry",
    "ExportMetadata",
    "ExportOptions",
    "ExportPreview",
    "ExportResult",
    "ExportTemplate",
    "FieldType",
    "FiltersConfig",
    "FormatNotSupportedError",
    "PermissionDeniedError",
    "SortSpec",
    "SortingConfig",
    "TemplateError",
    "entity_registry",
    "format_registry",
    "resolve_branding",
    "select_fields",
]
