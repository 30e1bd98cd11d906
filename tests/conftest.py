"""
Test configuration and shared fixtures for export tests.
"""

from datetime import datetime, timezone

import pytest

from parksys.config.settings import ExportSettings, reset_settings
from parksys.export.branding import DEFAULT_BRANDING
from parksys.export.config import (
    ExportConfig,
    ExportField,
    ExportFormat,
    FieldType,
)
from parksys.export.entities import EntityRegistry, entity_registry
from parksys.services.data_source import InMemoryDataSource
from parksys.services.export_engine import ExportEngine


@pytest.fixture(autouse=True)
def reset_config():
    """Reset cached settings before and after each test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> ExportSettings:
    return ExportSettings()


@pytest.fixture
def branding():
    return DEFAULT_BRANDING


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-06-01 12:00 UTC."""
    return lambda: datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_config() -> ExportConfig:
    """Small entity with a text, number and date column."""
    return ExportConfig(
        entity="samples",
        display_name="Muestras",
        fields=(
            ExportField(key="a", label="A", type=FieldType.TEXT),
            ExportField(key="b", label="B", type=FieldType.NUMBER),
            ExportField(key="c", label="C", type=FieldType.DATE),
        ),
        default_format=ExportFormat.CSV,
        supported_formats=(ExportFormat.CSV, ExportFormat.XLSX, ExportFormat.PDF, ExportFormat.JSON),
    )


@pytest.fixture
def tree_config() -> ExportConfig:
    """Entity with a required field, a conditional field and every field type."""
    return ExportConfig(
        entity="trees",
        display_name="Árboles",
        fields=(
            ExportField(key="code", label="Código", required=True),
            ExportField(key="species", label="Especie"),
            ExportField(key="height", label="Altura (m)", type=FieldType.NUMBER),
            ExportField(
                key="maintenance_cost",
                label="Costo de Mantenimiento",
                type=FieldType.CURRENCY,
                condition=lambda row: row.get("active"),
            ),
            ExportField(key="active", label="Activo", type=FieldType.BOOLEAN),
            ExportField(key="tags", label="Etiquetas", type=FieldType.ARRAY),
            ExportField(key="planted_at", label="Fecha de Plantación", type=FieldType.DATE),
            ExportField(key="contact", label="Contacto", type=FieldType.EMAIL),
        ),
        default_format=ExportFormat.CSV,
        supported_formats=(ExportFormat.CSV, ExportFormat.XLSX, ExportFormat.PDF, ExportFormat.JSON),
    )


@pytest.fixture
def tree_rows() -> list[dict]:
    return [
        {
            "code": "T-001",
            "species": "Jacaranda mimosifolia",
            "height": "12.5",
            "maintenance_cost": 1234.5,
            "active": True,
            "tags": ["ornamental", "nativo"],
            "planted_at": "2020-03-15",
            "contact": "arbolado@municipio.gob.mx",
        },
        {
            "code": "T-002",
            "species": 'Fresno "americano", variedad',
            "height": 8,
            "maintenance_cost": 900,
            "active": False,
            "tags": [],
            "planted_at": "2019-11-02T08:30:00",
            "contact": None,
        },
    ]


@pytest.fixture
def test_registry(sample_config, tree_config) -> EntityRegistry:
    """Built-in entities plus the test entities."""
    return entity_registry.extend(sample_config, tree_config)


@pytest.fixture
def park_rows() -> list[dict]:
    """25 park rows, index encoded in the name."""
    return [
        {
            "name": f"Parque {i:02d}",
            "description": f"Descripción del parque {i}",
            "type": "urbano" if i % 2 == 0 else "metropolitano",
            "municipality": "Guadalajara",
            "area": 1000 * (i + 1),
            "latitude": 20.6597 + i / 1000,
            "longitude": -103.3496,
            "capacity": 100 + i,
            "certifications": ["ISO 14001"] if i % 3 == 0 else [],
            "created_at": datetime(2024, 1, 1 + (i % 28)),
        }
        for i in range(25)
    ]


@pytest.fixture
def engine(test_registry, tree_rows, park_rows, settings, fixed_clock) -> ExportEngine:
    data_source = InMemoryDataSource(
        {
            "trees": tree_rows,
            "parks": park_rows,
            "samples": [{"a": "x", "b": "3", "c": "2024-01-05"}],
        }
    )
    return ExportEngine(
        data_source=data_source,
        entities=test_registry,
        settings=settings,
        clock=fixed_clock,
    )
