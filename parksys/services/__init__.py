"""Export services: engine, data sources and authorization hooks."""

from parksys.services.data_source import DataSource, InMemoryDataSource, SQLModelDataSource
from parksys.services.export_engine import (
    ExportEngine,
    branding_from_settings,
    create_export_engine,
    project_rows,
)
from parksys.services.permissions import (
    AllowAllPermissionChecker,
    CapabilityPermissionChecker,
    PermissionChecker,
)

__all__ = [
    "AllowAllPermissionChecker",
    "CapabilityPermissionChecker",
    "DataSource",
    "ExportEngine",
    "InMemoryDataSource",
    "PermissionChecker",
    "SQLModelDataSource",
    "branding_from_settings",
    "create_export_engine",
    "project_rows",
]
