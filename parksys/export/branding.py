"""Corporate branding profiles applied to generated documents."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from parksys.export.config import ExportTemplate


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Organization(_Frozen):
    name: str
    logo: str | None = None  # URL or path
    website: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    department: str | None = None


class BrandColors(_Frozen):
    """Hex colors, ``#RRGGBB``."""

    primary: str = "#067f5f"
    secondary: str = "#00a587"
    accent: str = "#10B981"
    text: str = "#1F2937"
    background: str = "#FFFFFF"
    table_header: str = "#067f5f"
    table_alternate: str = "#F8F9FA"


class FontSizes(_Frozen):
    title: int = 18
    subtitle: int = 14
    body: int = 11
    footer: int = 9
    caption: int = 8


class BrandFonts(_Frozen):
    title: str = "Arial"
    body: str = "Arial"
    size: FontSizes = FontSizes()


class HeaderTemplate(_Frozen):
    show_logo: bool = True
    show_organization: bool = True
    show_date: bool = True
    show_title: bool = True
    show_generated_by: bool = True
    custom_text: str | None = None
    layout: Literal["left", "center", "right", "split"] = "split"


class FooterTemplate(_Frozen):
    show_page_numbers: bool = True
    show_timestamp: bool = True
    show_contact: bool = True
    show_disclaimer: bool = True
    custom_text: str | None = None
    disclaimer: str | None = "Documento generado automáticamente por ParkSys"
    position: Literal["left", "center", "right"] = "center"


class TableTemplate(_Frozen):
    alternate_rows: bool = True
    show_borders: bool = True
    header_style: Literal["bold", "colored", "minimal"] = "colored"
    font_size: int = 11
    row_height: float | None = None
    column_auto_fit: bool = True


class Templates(_Frozen):
    header: HeaderTemplate = HeaderTemplate()
    footer: FooterTemplate = FooterTemplate()
    table: TableTemplate = TableTemplate()


class Locale(_Frozen):
    language: Literal["es", "en", "pt"] = "es"
    date_format: str = "%d/%m/%Y"  # strftime pattern for text output
    number_format: str = "#,##0"
    currency_format: str = '"$"#,##0.00'
    currency_symbol: str = "$"


class BrandingConfig(_Frozen):
    """Visual presentation profile shared by every renderer."""

    organization: Organization
    colors: BrandColors = BrandColors()
    fonts: BrandFonts = BrandFonts()
    templates: Templates = Templates()
    locale: Locale = Locale()


DEFAULT_BRANDING = BrandingConfig(
    organization=Organization(
        name="Gobierno Municipal",
        logo="/assets/logo-municipal.png",
        website="www.municipio.gob.mx",
        department="Dirección de Parques y Jardines",
    ),
)


def resolve_branding(base: BrandingConfig, template: ExportTemplate) -> BrandingConfig:
    """Return ``base`` with the header/footer toggles of a named template.

    ``base`` is left untouched; a new profile is returned.
    """
    header = base.templates.header
    footer = base.templates.footer

    if template == ExportTemplate.MINIMAL:
        header = header.model_copy(
            update={"show_logo": False, "show_organization": False, "layout": "center"}
        )
        footer = footer.model_copy(update={"show_contact": False, "show_disclaimer": False})
    elif template == ExportTemplate.DETAILED:
        header = header.model_copy(
            update={
                "show_logo": True,
                "show_organization": True,
                "show_generated_by": True,
                "layout": "split",
            }
        )
        footer = footer.model_copy(
            update={
                "show_page_numbers": True,
                "show_timestamp": True,
                "show_contact": True,
                "show_disclaimer": True,
            }
        )
    else:
        header = header.model_copy(
            update={"show_logo": True, "show_organization": True, "layout": "split"}
        )

    templates = base.templates.model_copy(update={"header": header, "footer": footer})
    return base.model_copy(update={"templates": templates})
