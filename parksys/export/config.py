"""Export configuration, request and result models."""

from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


Row = dict[str, Any]


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"
    JSON = "json"


class FieldType(str, Enum):
    """Semantic type of an exported field."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    CURRENCY = "currency"
    ARRAY = "array"
    EMAIL = "email"
    URL = "url"


class ExportTemplate(str, Enum):
    """Named visual templates."""

    CORPORATE = "corporate"
    MINIMAL = "minimal"
    DETAILED = "detailed"


class ExportField(BaseModel):
    """One exportable column of an entity."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    transform: Callable[[Any, Row], Any] | None = None  # (value, row) -> value
    condition: Callable[[Row], bool] | None = None  # False blanks the value for that row
    width: int | None = None  # Spreadsheet/document layout hint
    number_format: str | None = None  # Spreadsheet format overriding the type default


class FiltersConfig(BaseModel):
    """Filters the data source understands for an entity."""

    model_config = ConfigDict(frozen=True)

    available: tuple[str, ...] = ()
    default: dict[str, Any] = Field(default_factory=dict)


class SortSpec(BaseModel):
    """Sort key and direction."""

    model_config = ConfigDict(frozen=True)

    field: str
    direction: Literal["asc", "desc"] = "asc"


class SortingConfig(BaseModel):
    """Sort keys the data source understands for an entity."""

    model_config = ConfigDict(frozen=True)

    available: tuple[str, ...] = ()
    default: SortSpec | None = None


class ExportConfig(BaseModel):
    """Declarative description of an exportable entity."""

    model_config = ConfigDict(frozen=True)

    entity: str
    display_name: str
    description: str | None = None
    fields: tuple[ExportField, ...]
    permissions: tuple[str, ...] = ()
    default_format: ExportFormat = ExportFormat.XLSX
    supported_formats: tuple[ExportFormat, ...] = (ExportFormat.CSV, ExportFormat.XLSX)
    filters: FiltersConfig = Field(default_factory=FiltersConfig)
    sorting: SortingConfig = Field(default_factory=SortingConfig)

    @model_validator(mode="after")
    def _check_consistency(self) -> "ExportConfig":
        if not self.fields:
            raise ValueError(f"Entity '{self.entity}' must declare at least one field")

        keys = [f.key for f in self.fields]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"Entity '{self.entity}' has duplicate field keys: {duplicates}")

        if self.default_format not in self.supported_formats:
            raise ValueError(
                f"Entity '{self.entity}' default format '{self.default_format.value}' "
                "is not among its supported formats"
            )
        return self

    def get_field(self, key: str) -> ExportField | None:
        """Return the field with the given key, if declared."""
        for field in self.fields:
            if field.key == key:
                return field
        return None


class BrandingOptions(BaseModel):
    """Per-request branding toggles."""

    include_logo: bool = True
    include_header: bool = True
    include_footer: bool = True
    custom_title: str | None = None


class ExportOptions(BaseModel):
    """Export request."""

    entity: str
    format: ExportFormat
    fields: list[str] | None = None  # None selects every field in config order
    filters: dict[str, Any] | None = None
    filename: str | None = None
    template: ExportTemplate | None = None
    branding: BrandingOptions | None = None  # None enables every toggle
    sorting: SortSpec | None = None
    limit: int | None = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)
    # Stamped by the engine before rendering so every renderer prints the same moment
    generated_at: datetime | None = None
    generated_by: str | None = None


class ExportMetadata(BaseModel):
    """Generation details attached to every result."""

    generated_at: datetime
    generated_by: str
    entity: str
    format: ExportFormat


class ExportResult(BaseModel):
    """Produced file plus the information a transport layer needs to send it."""

    filename: str
    data: bytes
    mime_type: str
    size: int
    record_count: int
    metadata: ExportMetadata
    export_time_ms: int


class ExportPreview(BaseModel):
    """Sample of projected rows shown before running a full export."""

    sample_data: list[dict[str, Any]]
    total_fields: int
    selected_fields: list[str]
    estimated_records: int
