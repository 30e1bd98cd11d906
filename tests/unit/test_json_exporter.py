"""Unit tests for JSON export."""

import json

import pytest

from parksys.export.branding import DEFAULT_BRANDING
from parksys.export.config import ExportFormat, ExportOptions
from parksys.export.json_exporter import JSONExporter
from parksys.services.export_engine import project_rows


@pytest.mark.asyncio
async def test_json_document_structure(tree_config, tree_rows):
    exporter = JSONExporter()
    options = ExportOptions(entity="trees", format=ExportFormat.JSON)
    rows = project_rows(tree_rows, tree_config, options)

    text = await exporter.process(rows, tree_config, DEFAULT_BRANDING, options)
    payload = json.loads(text)

    assert payload["entity"] == "trees"
    assert payload["display_name"] == "Árboles"
    assert payload["columns"][3] == {
        "key": "maintenance_cost",
        "label": "Costo de Mantenimiento",
        "type": "currency",
    }
    assert payload["metadata"]["record_count"] == 2
    assert payload["rows"][0]["planted_at"] == "2020-03-15T00:00:00"
    assert payload["rows"][0]["tags"] == ["ornamental", "nativo"]
    assert payload["rows"][0]["active"] is True
    assert payload["rows"][1]["maintenance_cost"] is None


@pytest.mark.asyncio
async def test_non_ascii_is_not_escaped(tree_config):
    options = ExportOptions(entity="trees", format=ExportFormat.JSON)

    text = await JSONExporter().process([], tree_config, DEFAULT_BRANDING, options)

    assert "Árboles" in text
    assert json.loads(text)["rows"] == []


def test_exporter_metadata():
    exporter = JSONExporter()
    assert exporter.get_file_extension() == "json"
    assert exporter.get_mime_type() == "application/json"
