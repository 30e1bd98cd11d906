"""Application settings loaded from environment variables.

Settings are read once per process and shared. Every value can be overridden
with a ``PARKSYS_EXPORT_`` prefixed variable; nested blocks use ``__``:

    PARKSYS_EXPORT_PREVIEW_LIMIT=25
    PARKSYS_EXPORT_ORGANIZATION__NAME="Municipio de Zapopan"
    PARKSYS_EXPORT_LOGGING__JSON_FORMAT=true
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from parksys.export.config import ExportTemplate


class OrganizationSettings(BaseModel):
    """Identity printed in report headers and footers."""

    name: str = "Gobierno Municipal"
    department: str | None = "Dirección de Parques y Jardines"
    website: str | None = "www.municipio.gob.mx"
    logo: str | None = "/assets/logo-municipal.png"
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class LoggingSettings(BaseModel):
    """Logging output configuration."""

    level: str = "INFO"
    json_format: bool = False


class ExportSettings(BaseSettings):
    """Export engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="PARKSYS_EXPORT_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    organization: OrganizationSettings = Field(default_factory=OrganizationSettings)
    default_template: ExportTemplate = ExportTemplate.CORPORATE
    preview_limit: int = Field(default=10, ge=1)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> ExportSettings:
    """Return the process-wide settings instance."""
    return ExportSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
