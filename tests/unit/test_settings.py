"""Unit tests for settings, logging setup and engine wiring."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from parksys.config.settings import ExportSettings, get_settings, reset_settings
from parksys.export.config import ExportTemplate
from parksys.observability.logging import configure_logging
from parksys.services.data_source import InMemoryDataSource
from parksys.services.export_engine import ExportEngine, branding_from_settings, create_export_engine


@pytest.fixture
def restore_logging():
    """Put the root logger and structlog back after a test configures them."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_defaults(settings):
    assert settings.organization.name == "Gobierno Municipal"
    assert settings.organization.department == "Dirección de Parques y Jardines"
    assert settings.default_template == ExportTemplate.CORPORATE
    assert settings.preview_limit == 10
    assert settings.logging.level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PARKSYS_EXPORT_PREVIEW_LIMIT", "25")
    monkeypatch.setenv("PARKSYS_EXPORT_DEFAULT_TEMPLATE", "minimal")
    monkeypatch.setenv("PARKSYS_EXPORT_ORGANIZATION__NAME", "Municipio de Zapopan")
    reset_settings()

    settings = get_settings()

    assert settings.preview_limit == 25
    assert settings.default_template == ExportTemplate.MINIMAL
    assert settings.organization.name == "Municipio de Zapopan"
    assert settings.organization.website == "www.municipio.gob.mx"


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_invalid_preview_limit():
    with pytest.raises(ValidationError):
        ExportSettings(preview_limit=0)


def test_branding_uses_configured_organization():
    settings = ExportSettings(organization={"name": "Municipio de Tlaquepaque", "phone": "33 1234 5678"})

    branding = branding_from_settings(settings)

    assert branding.organization.name == "Municipio de Tlaquepaque"
    assert branding.organization.phone == "33 1234 5678"
    assert branding.colors.primary == "#067f5f"


def test_engine_defaults_to_process_settings():
    engine = ExportEngine(data_source=InMemoryDataSource())
    assert engine.settings is get_settings()
    assert engine.branding.organization.name == "Gobierno Municipal"


def test_configure_logging_json(restore_logging):
    configure_logging("debug", json_format=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    formatter = root.handlers[0].formatter
    assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)


def test_create_export_engine_configures_logging(restore_logging):
    settings = ExportSettings(logging={"level": "WARNING"})

    engine = create_export_engine(InMemoryDataSource(), settings=settings)

    assert engine.settings is settings
    assert logging.getLogger().level == logging.WARNING
