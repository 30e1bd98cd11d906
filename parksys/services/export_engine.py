"""Export engine coordinating validation, data access, projection and rendering.

An export runs these steps, in order:

1. Validate the entity and format against the entity registry
2. Ask the permission checker whether the actor may export the entity
3. Fetch rows from the data source and apply the limit/offset window
4. Project rows: select fields, apply transforms and conditions, coerce types
5. Render the projected rows with the exporter registered for the format
6. Package payload, filename, MIME type and metadata into an ExportResult

Any failure that is not already an :class:`ExportError` leaves the engine as a
``DATA_ERROR`` with the original exception chained.
"""

import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog

from parksys.config.settings import ExportSettings, get_settings
from parksys.export.base import select_fields
from parksys.export.branding import DEFAULT_BRANDING, BrandingConfig, Organization, resolve_branding
from parksys.export.config import (
    ExportConfig,
    ExportMetadata,
    ExportOptions,
    ExportPreview,
    ExportResult,
    Row,
)
from parksys.export.entities import EntityRegistry, entity_registry
from parksys.export.errors import (
    DataError,
    EntityNotFoundError,
    ExportError,
    ExportErrorCode,
    FormatNotSupportedError,
    PermissionDeniedError,
)
from parksys.export.formatting import coerce_value, to_json_value
from parksys.export.registry import ExportFormatRegistry, format_registry
from parksys.observability.logging import configure_logging
from parksys.services.data_source import DataSource
from parksys.services.permissions import AllowAllPermissionChecker, PermissionChecker

logger = structlog.get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def branding_from_settings(settings: ExportSettings) -> BrandingConfig:
    """Default branding profile carrying the configured organization."""
    organization = Organization(**settings.organization.model_dump())
    return DEFAULT_BRANDING.model_copy(update={"organization": organization})


def project_rows(rows: list[Row], config: ExportConfig, options: ExportOptions) -> list[Row]:
    """
    Project raw rows onto the selected fields of an entity.

    For each selected field the raw value is read by key, passed through the
    field transform, blanked when the field condition rejects the row, and
    coerced for the field type. Rows are never dropped.

    Args:
        rows: Raw rows from the data source
        config: Entity export configuration
        options: Export request

    Returns:
        New rows keyed by field key
    """
    fields = select_fields(config, options)

    if options.fields is not None:
        unknown = sorted(set(options.fields) - {field.key for field in config.fields})
        if unknown:
            logger.debug("unknown_field_requested", entity=config.entity, fields=unknown)

    projected = []
    for row in rows:
        processed: Row = {}
        for field in fields:
            value = row.get(field.key)
            if field.transform is not None:
                value = field.transform(value, row)
            if field.condition is not None and not field.condition(row):
                continue
            processed[field.key] = coerce_value(value, field.type)
        projected.append(processed)
    return projected


class ExportEngine:
    """Runs exports for registered entities.

    The engine holds no per-request state; registries, settings and branding
    are read-only and shared by concurrent exports.

    Example:
        >>> engine = ExportEngine(data_source=InMemoryDataSource({"parks": rows}))
        >>> result = await engine.export(
        ...     ExportOptions(entity="parks", format=ExportFormat.CSV),
        ...     actor_id="42",
        ... )
        >>> result.filename
        'parks_2024-06-01.csv'
    """

    def __init__(
        self,
        data_source: DataSource,
        entities: EntityRegistry | None = None,
        formats: ExportFormatRegistry | None = None,
        permission_checker: PermissionChecker | None = None,
        branding: BrandingConfig | None = None,
        settings: ExportSettings | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize export engine.

        Args:
            data_source: Provider of raw entity rows.
            entities: Entity registry (defaults to the built-in entities).
            formats: Renderer registry (defaults to CSV/XLSX/PDF/JSON).
            permission_checker: Authorization hook (defaults to allow-all).
            branding: Base branding profile (defaults to one built from settings).
            settings: Engine settings (defaults to the process-wide settings).
            clock: Returns the current time; used for filenames and metadata.
        """
        self.data_source = data_source
        self.entities = entities if entities is not None else entity_registry
        self.formats = formats if formats is not None else format_registry
        self.permission_checker = permission_checker or AllowAllPermissionChecker()
        self.settings = settings or get_settings()
        self.branding = branding or branding_from_settings(self.settings)
        self.clock = clock

    def get_config(self, entity: str) -> ExportConfig:
        """Return the export configuration of ``entity``.

        Raises:
            EntityNotFoundError: If the entity is not registered.
        """
        config = self.entities.get(entity)
        if config is None:
            raise EntityNotFoundError(
                f"Entity '{entity}' not found",
                details={"entity": entity, "available": self.entities.list_entities()},
            )
        return config

    async def export(self, options: ExportOptions, actor_id: str | int | None = None) -> ExportResult:
        """Run a full export.

        Args:
            options: Export request.
            actor_id: Identifier of the requesting user, if any.

        Returns:
            ExportResult: Rendered payload with filename, MIME type and metadata.

        Raises:
            ExportError: With code ENTITY_NOT_FOUND, FORMAT_NOT_SUPPORTED,
                PERMISSION_DENIED or DATA_ERROR.
        """
        start_time = time.time()
        actor = str(actor_id) if actor_id is not None else None
        log = logger.bind(entity=options.entity, format=options.format.value, actor=actor)
        log.info("export_started")

        try:
            options = self._with_defaults(options)
            config, rows = await self._prepare(options, actor)

            generated_at = self.clock()
            options = options.model_copy(update={"generated_at": generated_at, "generated_by": actor})

            exporter = self.formats.get_exporter(options.format)
            branding = resolve_branding(self.branding, options.template)
            payload = await exporter.process(rows, config, branding, options)
            data = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)

            result = ExportResult(
                filename=self._generate_filename(options, config, exporter.get_file_extension(), generated_at),
                data=data,
                mime_type=exporter.get_mime_type(),
                size=len(data),
                record_count=len(rows),
                metadata=ExportMetadata(
                    generated_at=generated_at,
                    generated_by=actor or "system",
                    entity=config.entity,
                    format=options.format,
                ),
                export_time_ms=int((time.time() - start_time) * 1000),
            )
        except ExportError as e:
            self._log_export_error(log, e)
            raise
        except Exception as e:
            log.exception("export_failed", error=str(e), error_type=type(e).__name__)
            raise self._data_error(options, e) from e

        log.info(
            "export_completed",
            filename=result.filename,
            record_count=result.record_count,
            size=result.size,
            export_time_ms=result.export_time_ms,
        )
        return result

    async def preview(self, options: ExportOptions, actor_id: str | int | None = None) -> ExportPreview:
        """Return a small sample of projected rows without rendering a file.

        The sample is limited to ``settings.preview_limit`` rows from the
        start of the data set. Values are JSON-safe (dates as ISO-8601).
        """
        actor = str(actor_id) if actor_id is not None else None
        log = logger.bind(entity=options.entity, format=options.format.value, actor=actor)

        try:
            options = self._with_defaults(options).model_copy(
                update={"limit": self.settings.preview_limit, "offset": 0}
            )
            config, rows = await self._prepare(options, actor)
        except ExportError as e:
            self._log_export_error(log, e)
            raise
        except Exception as e:
            log.exception("preview_failed", error=str(e), error_type=type(e).__name__)
            raise self._data_error(options, e) from e

        fields = select_fields(config, options)
        return ExportPreview(
            sample_data=[{key: to_json_value(value) for key, value in row.items()} for row in rows],
            total_fields=len(config.fields),
            selected_fields=[field.key for field in fields],
            estimated_records=len(rows),
        )

    def _with_defaults(self, options: ExportOptions) -> ExportOptions:
        if options.template is None:
            return options.model_copy(update={"template": self.settings.default_template})
        return options

    async def _prepare(self, options: ExportOptions, actor: str | None) -> tuple[ExportConfig, list[Row]]:
        config = self._validate_and_get_config(options)
        await self._validate_permissions(config.entity, actor)
        raw_rows = await self._fetch_data(options, config)
        return config, project_rows(raw_rows, config, options)

    def _validate_and_get_config(self, options: ExportOptions) -> ExportConfig:
        config = self.get_config(options.entity)

        if options.format not in config.supported_formats:
            raise FormatNotSupportedError(
                f"Format '{options.format.value}' is not supported for entity '{options.entity}'",
                details={
                    "entity": options.entity,
                    "format": options.format.value,
                    "supported_formats": [fmt.value for fmt in config.supported_formats],
                },
            )

        if not self.formats.supports(options.format):
            raise FormatNotSupportedError(
                f"No renderer available for format '{options.format.value}'",
                details={"format": options.format.value, "available": self.formats.list_formats()},
            )

        return config

    async def _validate_permissions(self, entity: str, actor: str | None) -> None:
        allowed = await self.permission_checker.check_permission(entity, actor)
        if not allowed:
            raise PermissionDeniedError(
                f"Actor is not allowed to export '{entity}'",
                details={"entity": entity, "actor": actor},
            )

    async def _fetch_data(self, options: ExportOptions, config: ExportConfig) -> list[Row]:
        filters = options.filters if options.filters is not None else dict(config.filters.default)
        sorting = options.sorting or config.sorting.default

        try:
            rows = await self.data_source.fetch_rows(config.entity, filters, sorting)
        except Exception as e:
            raise DataError(
                f"Failed to fetch data for {config.display_name}",
                details={"entity": config.entity, "error": str(e), "error_type": type(e).__name__},
            ) from e

        logger.debug("rows_fetched", entity=config.entity, count=len(rows))

        offset = options.offset
        if options.limit is not None:
            return list(rows[offset : offset + options.limit])
        return list(rows[offset:])

    def _generate_filename(
        self, options: ExportOptions, config: ExportConfig, extension: str, generated_at: datetime
    ) -> str:
        if options.filename:
            return options.filename

        if generated_at.tzinfo is not None:
            generated_at = generated_at.astimezone(timezone.utc)
        return f"{config.entity.lower()}_{generated_at.date().isoformat()}.{extension}"

    def _data_error(self, options: ExportOptions, error: Exception) -> DataError:
        return DataError(
            "Internal error while exporting",
            details={
                "entity": options.entity,
                "format": options.format.value,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )

    def _log_export_error(self, log: Any, error: ExportError) -> None:
        if error.code == ExportErrorCode.DATA_ERROR:
            log.error("export_failed", code=error.code.value, error=error.message, details=error.details)
        else:
            log.warning("export_rejected", code=error.code.value, error=error.message)


def create_export_engine(data_source: DataSource, settings: ExportSettings | None = None, **kwargs: Any) -> ExportEngine:
    """Build an engine from settings and configure logging accordingly."""
    settings = settings or get_settings()
    configure_logging(settings.logging.level, settings.logging.json_format)
    return ExportEngine(data_source, settings=settings, **kwargs)
