"""Unit tests for branding profiles, captions and errors."""

from parksys.export.branding import DEFAULT_BRANDING, resolve_branding
from parksys.export.config import ExportTemplate
from parksys.export.errors import (
    DataError,
    EntityNotFoundError,
    ExportError,
    ExportErrorCode,
    TemplateError,
)
from parksys.export.messages import boolean_label, message


def test_default_profile():
    assert DEFAULT_BRANDING.colors.table_header == "#067f5f"
    assert DEFAULT_BRANDING.fonts.size.title == 18
    assert DEFAULT_BRANDING.locale.language == "es"
    assert DEFAULT_BRANDING.templates.footer.disclaimer == "Documento generado automáticamente por ParkSys"


def test_minimal_template_hides_identity():
    branding = resolve_branding(DEFAULT_BRANDING, ExportTemplate.MINIMAL)

    assert branding.templates.header.show_logo is False
    assert branding.templates.header.show_organization is False
    assert branding.templates.footer.show_contact is False
    assert branding.templates.footer.show_disclaimer is False
    # The base profile is shared and stays untouched
    assert DEFAULT_BRANDING.templates.header.show_logo is True


def test_detailed_template_shows_everything():
    base = DEFAULT_BRANDING.model_copy(
        update={
            "templates": DEFAULT_BRANDING.templates.model_copy(
                update={
                    "footer": DEFAULT_BRANDING.templates.footer.model_copy(
                        update={"show_page_numbers": False}
                    )
                }
            )
        }
    )

    branding = resolve_branding(base, ExportTemplate.DETAILED)

    assert branding.templates.footer.show_page_numbers is True
    assert branding.templates.header.show_generated_by is True


def test_captions_fall_back_to_spanish():
    assert message("pt", "total_records_line", count=3) == "Total de registros: 3"
    assert message("fr", "report_title", name="Parques") == "Reporte: Parques"
    assert boolean_label(False, "pt") == "Não"


def test_error_codes_and_serialization():
    error = EntityNotFoundError("Entity 'x' not found", details={"entity": "x"})

    assert isinstance(error, ExportError)
    assert error.code == ExportErrorCode.ENTITY_NOT_FOUND
    assert str(error) == "Entity 'x' not found"
    assert error.to_dict() == {
        "error": "Entity 'x' not found",
        "code": "ENTITY_NOT_FOUND",
        "details": {"entity": "x"},
    }
    assert DataError("boom").code == ExportErrorCode.DATA_ERROR
    assert TemplateError("bad").code == ExportErrorCode.TEMPLATE_ERROR
    assert ExportError("custom", code=ExportErrorCode.PERMISSION_DENIED).code == ExportErrorCode.PERMISSION_DENIED
