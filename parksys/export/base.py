"""Base class and shared helpers for format renderers."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import ClassVar

from parksys.export.branding import BrandingConfig
from parksys.export.config import (
    BrandingOptions,
    ExportConfig,
    ExportField,
    ExportFormat,
    ExportOptions,
    ExportTemplate,
    Row,
)
from parksys.export.messages import TIMESTAMP_FORMAT, message


def select_fields(config: ExportConfig, options: ExportOptions) -> list[ExportField]:
    """
    Resolve the columns of an export.

    Without an explicit selection every field is used. With one, the
    requested fields plus every required field are used. Output always
    follows config order and unknown keys are ignored.
    """
    if options.fields is None:
        return list(config.fields)

    requested = set(options.fields)
    return [f for f in config.fields if f.key in requested or f.required]


class BaseExporter(ABC):
    """Abstract base class for all format renderers.

    A renderer turns projected rows into a file payload. ``process`` keeps no
    state between calls, so one instance can serve concurrent exports.
    """

    format: ClassVar[ExportFormat]

    @abstractmethod
    async def process(
        self,
        rows: list[Row],
        config: ExportConfig,
        branding: BrandingConfig,
        options: ExportOptions,
    ) -> bytes | str:
        """
        Render projected rows.

        Args:
            rows: Projected rows keyed by field key
            config: Entity export configuration
            branding: Resolved branding profile
            options: Export request

        Returns:
            File payload, text or binary
        """

    @abstractmethod
    def get_file_extension(self) -> str:
        """Get file extension, e.g., 'csv'."""

    @abstractmethod
    def get_mime_type(self) -> str:
        """Get MIME type, e.g., 'text/csv; charset=utf-8'."""

    def branding_options(self, options: ExportOptions) -> BrandingOptions:
        return options.branding or BrandingOptions()

    def include_header(self, options: ExportOptions) -> bool:
        return options.template != ExportTemplate.MINIMAL and self.branding_options(options).include_header

    def include_footer(self, options: ExportOptions) -> bool:
        return options.template != ExportTemplate.MINIMAL and self.branding_options(options).include_footer

    def include_logo(self, branding: BrandingConfig, options: ExportOptions) -> bool:
        return bool(
            branding.templates.header.show_logo
            and branding.organization.logo
            and self.branding_options(options).include_logo
        )

    def report_title(self, config: ExportConfig, branding: BrandingConfig, options: ExportOptions) -> str:
        custom_title = self.branding_options(options).custom_title
        if custom_title:
            return custom_title
        return message(branding.locale.language, "report_title", name=config.display_name)

    def generated_at(self, options: ExportOptions) -> datetime:
        """Moment printed in headers and footers; the engine stamps it from its clock."""
        return options.generated_at or datetime.now()

    def timestamp(self, options: ExportOptions) -> str:
        return self.generated_at(options).strftime(TIMESTAMP_FORMAT)

    def generated_by(self, branding: BrandingConfig, options: ExportOptions) -> str | None:
        """Actor printed in the header, when the template shows it and one is known."""
        if branding.templates.header.show_generated_by and options.generated_by:
            return options.generated_by
        return None
