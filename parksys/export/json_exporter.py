"""JSON exporter implementation."""

import json

from parksys.export.base import BaseExporter, select_fields
from parksys.export.branding import BrandingConfig
from parksys.export.config import ExportConfig, ExportFormat, ExportOptions, Row
from parksys.export.formatting import to_json_value


class JSONExporter(BaseExporter):
    """JSON exporter."""

    format = ExportFormat.JSON

    async def process(
        self,
        rows: list[Row],
        config: ExportConfig,
        branding: BrandingConfig,
        options: ExportOptions,
    ) -> str:
        """Export rows to JSON."""
        fields = select_fields(config, options)

        export_data = {
            "entity": config.entity,
            "display_name": config.display_name,
            "columns": [
                {"key": field.key, "label": field.label, "type": field.type.value} for field in fields
            ],
            "rows": [
                {field.key: to_json_value(row.get(field.key)) for field in fields} for row in rows
            ],
            "metadata": {
                "record_count": len(rows),
                "exported_at": self.generated_at(options).isoformat(),
            },
        }

        return json.dumps(export_data, indent=2, ensure_ascii=False)

    def get_file_extension(self) -> str:
        """Return 'json'."""
        return "json"

    def get_mime_type(self) -> str:
        """Return JSON MIME type."""
        return "application/json"
