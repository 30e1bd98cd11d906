"""Unit tests for the export format registry."""

import pytest

from parksys.export.config import ExportFormat
from parksys.export.csv_exporter import CSVExporter
from parksys.export.excel_exporter import ExcelExporter
from parksys.export.registry import ExportFormatRegistry, format_registry


def test_builtin_formats():
    assert format_registry.list_formats() == ["csv", "xlsx", "pdf", "json"]


def test_get_exporter_returns_instance():
    assert isinstance(format_registry.get_exporter("xlsx"), ExcelExporter)
    assert isinstance(format_registry.get_exporter(ExportFormat.CSV), CSVExporter)


def test_unsupported_format():
    registry = ExportFormatRegistry()
    registry.register(CSVExporter)

    assert registry.supports("csv") is True
    assert registry.supports("pdf") is False
    assert registry.supports("docx") is False
    with pytest.raises(ValueError, match="Unsupported export format"):
        registry.get_exporter("pdf")
