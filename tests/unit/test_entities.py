"""Unit tests for the entity registry and config models."""

import pytest
from pydantic import ValidationError

from parksys.export.config import ExportConfig, ExportField, ExportFormat
from parksys.export.entities import EntityRegistry, entity_registry


def test_builtin_entities_registered():
    assert entity_registry.list_entities() == [
        "parks",
        "amenities",
        "activities",
        "instructors",
        "volunteers",
    ]


def test_get_unknown_entity_returns_none():
    assert entity_registry.get("does-not-exist") is None


def test_supports_format():
    assert entity_registry.supports_format("parks", "pdf") is True
    assert entity_registry.supports_format("amenities", ExportFormat.PDF) is False
    assert entity_registry.supports_format("parks", "docx") is False
    assert entity_registry.supports_format("does-not-exist", "csv") is False


def test_required_fields():
    assert entity_registry.required_fields("instructors") == ["first_name", "last_name"]
    assert entity_registry.required_fields("does-not-exist") == []


def test_every_entity_is_consistent():
    for entity in entity_registry.list_entities():
        config = entity_registry.get(entity)
        assert config.fields
        assert config.default_format in config.supported_formats


def test_extend_returns_new_registry(sample_config):
    extended = entity_registry.extend(sample_config)

    assert "samples" in extended
    assert "samples" not in entity_registry
    assert len(extended) == len(entity_registry) + 1


def test_duplicate_entity_rejected(sample_config):
    with pytest.raises(ValueError, match="already registered"):
        EntityRegistry([sample_config, sample_config])


def test_config_requires_fields():
    with pytest.raises(ValidationError, match="at least one field"):
        ExportConfig(entity="empty", display_name="Vacío", fields=())


def test_config_rejects_duplicate_keys():
    with pytest.raises(ValidationError, match="duplicate field keys"):
        ExportConfig(
            entity="dup",
            display_name="Dup",
            fields=(ExportField(key="a", label="A"), ExportField(key="a", label="A2")),
        )


def test_default_format_must_be_supported():
    with pytest.raises(ValidationError, match="not among its supported formats"):
        ExportConfig(
            entity="bad",
            display_name="Bad",
            fields=(ExportField(key="a", label="A"),),
            default_format=ExportFormat.PDF,
            supported_formats=(ExportFormat.CSV,),
        )


def test_configs_are_read_only():
    config = entity_registry.get("parks")
    with pytest.raises(ValidationError):
        config.display_name = "Otro"


def test_parks_coordinates_transform_uses_lat_lng():
    field = entity_registry.get("parks").get_field("coordinates")
    row = {"latitude": 20.5, "longitude": -103.1}

    assert field.transform(None, row) == "20.5, -103.1"
    assert field.transform("given", row) == "given"
    assert field.transform(None, {}) is None
