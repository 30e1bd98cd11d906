"""Registry of exportable entities."""

from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

from parksys.export.config import (
    ExportConfig,
    ExportField,
    ExportFormat,
    FieldType,
    FiltersConfig,
    SortingConfig,
    SortSpec,
)


class EntityRegistry:
    """Read-only lookup table from entity name to its export configuration.

    Registries are built once; :meth:`extend` returns a new registry instead
    of modifying an existing one.
    """

    def __init__(self, configs: Iterable[ExportConfig] = ()) -> None:
        table: dict[str, ExportConfig] = {}
        for config in configs:
            if config.entity in table:
                raise ValueError(f"Entity '{config.entity}' is already registered")
            table[config.entity] = config
        self._configs = MappingProxyType(table)

    def get(self, entity: str) -> ExportConfig | None:
        """Return the config for ``entity`` or None when it is not registered."""
        return self._configs.get(entity)

    def list_entities(self) -> list[str]:
        """List registered entity names in registration order."""
        return list(self._configs)

    def supports_format(self, entity: str, format: ExportFormat | str) -> bool:
        """Whether ``entity`` is registered and can be exported as ``format``."""
        config = self.get(entity)
        if config is None:
            return False
        try:
            return ExportFormat(format) in config.supported_formats
        except ValueError:
            return False

    def required_fields(self, entity: str) -> list[str]:
        """Keys of the fields that can never be left out of an export."""
        config = self.get(entity)
        if config is None:
            return []
        return [field.key for field in config.fields if field.required]

    def extend(self, *configs: ExportConfig) -> "EntityRegistry":
        """Return a new registry holding the current entities plus ``configs``."""
        return EntityRegistry([*self._configs.values(), *configs])

    def __contains__(self, entity: object) -> bool:
        return entity in self._configs

    def __len__(self) -> int:
        return len(self._configs)


def _coordinates(value: Any, row: dict[str, Any]) -> Any:
    if value:
        return value
    latitude, longitude = row.get("latitude"), row.get("longitude")
    if latitude is None or longitude is None:
        return None
    return f"{latitude}, {longitude}"


PARKS = ExportConfig(
    entity="parks",
    display_name="Parques",
    description="Información completa de parques municipales",
    fields=(
        ExportField(key="name", label="Nombre del Parque", required=True, width=25),
        ExportField(key="description", label="Descripción", width=40),
        ExportField(key="type", label="Tipo", width=15),
        ExportField(key="municipality", label="Municipio", width=20),
        ExportField(key="area", label="Superficie (m²)", type=FieldType.NUMBER, width=15),
        ExportField(key="coordinates", label="Coordenadas", transform=_coordinates, width=20),
        ExportField(
            key="latitude",
            label="Latitud",
            type=FieldType.NUMBER,
            number_format="#,##0.000000",
            width=15,
        ),
        ExportField(
            key="longitude",
            label="Longitud",
            type=FieldType.NUMBER,
            number_format="#,##0.000000",
            width=15,
        ),
        ExportField(key="address", label="Dirección", width=30),
        ExportField(key="manager", label="Administrador", width=20),
        ExportField(key="contact_phone", label="Teléfono", width=15),
        ExportField(key="email", label="Correo Electrónico", type=FieldType.EMAIL, width=25),
        ExportField(key="opening_hours", label="Horario Apertura", width=15),
        ExportField(key="closing_hours", label="Horario Cierre", width=15),
        ExportField(key="capacity", label="Capacidad", type=FieldType.NUMBER, width=12),
        ExportField(key="accessibility_features", label="Accesibilidad", width=25),
        ExportField(key="safety_features", label="Seguridad", width=25),
        ExportField(key="maintenance_notes", label="Notas de Mantenimiento", width=30),
        ExportField(key="conservation_status", label="Estado de Conservación", width=20),
        ExportField(key="regulation_url", label="URL Reglamento", type=FieldType.URL, width=30),
        ExportField(key="video_url", label="URL Video", type=FieldType.URL, width=30),
        ExportField(key="certifications", label="Certificaciones", type=FieldType.ARRAY, width=30),
        ExportField(key="created_at", label="Fecha de Registro", type=FieldType.DATE, width=15),
        ExportField(
            key="updated_at",
            label="Última Actualización",
            type=FieldType.DATE,
            number_format="dd/mm/yyyy hh:mm",
            width=18,
        ),
    ),
    permissions=("parks.export", "admin"),
    default_format=ExportFormat.XLSX,
    supported_formats=(ExportFormat.CSV, ExportFormat.XLSX, ExportFormat.PDF),
    filters=FiltersConfig(available=("type", "municipality", "conservation_status")),
    sorting=SortingConfig(
        available=("name", "area", "created_at", "updated_at"),
        default=SortSpec(field="name", direction="asc"),
    ),
)

AMENITIES = ExportConfig(
    entity="amenities",
    display_name="Amenidades",
    description="Catálogo de amenidades disponibles",
    fields=(
        ExportField(key="name", label="Nombre", required=True, width=25),
        ExportField(key="category", label="Categoría", width=20),
        ExportField(key="icon", label="Icono", width=15),
        ExportField(key="icon_type", label="Tipo de Icono", width=15),
        ExportField(
            key="custom_icon_url", label="URL Icono Personalizado", type=FieldType.URL, width=30
        ),
        ExportField(key="parks_count", label="Parques Asignados", type=FieldType.NUMBER, width=15),
        ExportField(key="total_modules", label="Total Módulos", type=FieldType.NUMBER, width=15),
        ExportField(
            key="utilization_rate",
            label="Tasa de Utilización (%)",
            type=FieldType.NUMBER,
            number_format="#,##0.0",
            width=18,
        ),
        ExportField(key="created_at", label="Fecha de Registro", type=FieldType.DATE, width=15),
    ),
    permissions=("amenities.export", "admin"),
    default_format=ExportFormat.XLSX,
    supported_formats=(ExportFormat.CSV, ExportFormat.XLSX),
    filters=FiltersConfig(available=("category", "icon_type")),
    sorting=SortingConfig(
        available=("name", "category", "parks_count", "created_at"),
        default=SortSpec(field="parks_count", direction="desc"),
    ),
)

ACTIVITIES = ExportConfig(
    entity="activities",
    display_name="Actividades",
    description="Actividades programadas en los parques",
    fields=(
        ExportField(key="title", label="Título", required=True, width=30),
        ExportField(key="description", label="Descripción", width=40),
        ExportField(key="category", label="Categoría", width=20),
        ExportField(key="instructor", label="Instructor", width=25),
        ExportField(key="park_name", label="Parque", width=25),
        ExportField(key="schedule", label="Horario", width=20),
        ExportField(key="capacity", label="Capacidad", type=FieldType.NUMBER, width=12),
        ExportField(key="enrolled", label="Inscritos", type=FieldType.NUMBER, width=12),
        # Free activities have no price to report.
        ExportField(
            key="price",
            label="Precio",
            type=FieldType.CURRENCY,
            condition=lambda row: not row.get("is_free"),
            width=15,
        ),
        ExportField(key="is_free", label="Gratuita", type=FieldType.BOOLEAN, width=10),
        ExportField(key="status", label="Estado", width=15),
        ExportField(key="created_at", label="Fecha de Registro", type=FieldType.DATE, width=15),
    ),
    permissions=("activities.export", "admin"),
    default_format=ExportFormat.XLSX,
    supported_formats=(ExportFormat.CSV, ExportFormat.XLSX, ExportFormat.PDF),
    filters=FiltersConfig(available=("category", "status", "is_free")),
    sorting=SortingConfig(
        available=("title", "category", "capacity", "enrolled", "created_at"),
        default=SortSpec(field="created_at", direction="desc"),
    ),
)

INSTRUCTORS = ExportConfig(
    entity="instructors",
    display_name="Instructores",
    description="Listado completo de instructores registrados en el sistema",
    fields=(
        ExportField(key="first_name", label="Nombre", required=True, width=20),
        ExportField(key="last_name", label="Apellido", required=True, width=20),
        ExportField(key="email", label="Correo Electrónico", type=FieldType.EMAIL, width=25),
        ExportField(key="phone", label="Teléfono", width=15),
        ExportField(key="status", label="Estado", width=15),
        ExportField(key="specialties", label="Especialidades", type=FieldType.ARRAY, width=30),
        ExportField(
            key="experience_years", label="Años de Experiencia", type=FieldType.NUMBER, width=10
        ),
        ExportField(key="bio", label="Biografía", width=40),
        ExportField(key="hourly_rate", label="Tarifa por Hora", type=FieldType.CURRENCY, width=15),
        ExportField(key="preferred_park_name", label="Parque Preferido", width=25),
        ExportField(
            key="rating",
            label="Calificación",
            type=FieldType.NUMBER,
            number_format="#,##0.0",
            width=10,
        ),
        ExportField(
            key="activities_count", label="Actividades Asignadas", type=FieldType.NUMBER, width=10
        ),
        ExportField(key="created_at", label="Fecha de Registro", type=FieldType.DATE, width=15),
    ),
    permissions=("instructors.export", "admin"),
    default_format=ExportFormat.XLSX,
    supported_formats=(ExportFormat.CSV, ExportFormat.XLSX, ExportFormat.PDF),
    filters=FiltersConfig(available=("status", "specialties", "experience_years")),
    sorting=SortingConfig(
        available=("first_name", "last_name", "experience_years", "rating", "created_at"),
        default=SortSpec(field="created_at", direction="desc"),
    ),
)

VOLUNTEERS = ExportConfig(
    entity="volunteers",
    display_name="Voluntarios",
    description="Base de datos de voluntarios registrados",
    fields=(
        ExportField(key="name", label="Nombre Completo", required=True, width=25),
        ExportField(key="email", label="Correo Electrónico", type=FieldType.EMAIL, width=25),
        ExportField(key="phone", label="Teléfono", width=15),
        ExportField(key="age", label="Edad", type=FieldType.NUMBER, width=10),
        ExportField(key="occupation", label="Ocupación", width=20),
        ExportField(key="availability", label="Disponibilidad", width=20),
        ExportField(key="experience", label="Experiencia", width=30),
        ExportField(key="interests", label="Intereses", type=FieldType.ARRAY, width=30),
        ExportField(key="is_active", label="Activo", type=FieldType.BOOLEAN, width=10),
        ExportField(key="created_at", label="Fecha de Registro", type=FieldType.DATE, width=15),
    ),
    permissions=("volunteers.export", "admin"),
    default_format=ExportFormat.XLSX,
    supported_formats=(ExportFormat.CSV, ExportFormat.XLSX),
    filters=FiltersConfig(available=("is_active", "availability"), default={"is_active": True}),
    sorting=SortingConfig(
        available=("name", "age", "created_at"),
        default=SortSpec(field="name", direction="asc"),
    ),
)


# Global registry instance
entity_registry = EntityRegistry([PARKS, AMENITIES, ACTIVITIES, INSTRUCTORS, VOLUNTEERS])
