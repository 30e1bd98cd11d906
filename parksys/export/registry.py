"""Export format registry - Factory pattern."""

from parksys.export.base import BaseExporter
from parksys.export.config import ExportFormat
from parksys.export.csv_exporter import CSVExporter
from parksys.export.excel_exporter import ExcelExporter
from parksys.export.json_exporter import JSONExporter
from parksys.export.pdf_exporter import PDFExporter


class ExportFormatRegistry:
    """Maps each export format to the renderer class that produces it."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._exporters: dict[ExportFormat, type[BaseExporter]] = {}

    def register(self, exporter_class: type[BaseExporter]) -> None:
        """
        Register an exporter under the format it declares.

        Args:
            exporter_class: Exporter class type
        """
        self._exporters[exporter_class.format] = exporter_class

    def supports(self, format: ExportFormat | str) -> bool:
        try:
            return ExportFormat(format) in self._exporters
        except ValueError:
            return False

    def get_exporter(self, format: ExportFormat | str) -> BaseExporter:
        """
        Get exporter instance.

        Args:
            format: Export format

        Returns:
            BaseExporter: Exporter instance

        Raises:
            ValueError: If format is not supported
        """
        if not self.supports(format):
            raise ValueError(f"Unsupported export format: {format}")

        exporter_class = self._exporters[ExportFormat(format)]
        return exporter_class()

    def list_formats(self) -> list[str]:
        """
        List all supported formats.

        Returns:
            List of format names
        """
        return [fmt.value for fmt in self._exporters.keys()]


# Global registry instance
format_registry = ExportFormatRegistry()

# Register built-in exporters
format_registry.register(CSVExporter)
format_registry.register(ExcelExporter)
format_registry.register(PDFExporter)
format_registry.register(JSONExporter)
