"""Localized captions for report headers and footers."""

MESSAGES: dict[str, dict[str, str]] = {
    "es": {
        "organization": "Organización",
        "report": "Reporte",
        "report_title": "Reporte: {name}",
        "generated_on": "Fecha de Generación",
        "generated": "Generado: {timestamp}",
        "generated_by": "Generado por",
        "department": "Departamento",
        "total_records": "Total de Registros",
        "total_records_line": "Total de registros: {count}",
        "website": "Sitio Web",
        "notice": "Aviso",
        "page": "Página {number}",
        "yes": "Sí",
        "no": "No",
    },
    "en": {
        "organization": "Organization",
        "report": "Report",
        "report_title": "Report: {name}",
        "generated_on": "Generated On",
        "generated": "Generated: {timestamp}",
        "generated_by": "Generated by",
        "department": "Department",
        "total_records": "Total Records",
        "total_records_line": "Total records: {count}",
        "website": "Website",
        "notice": "Notice",
        "page": "Page {number}",
        "yes": "Yes",
        "no": "No",
    },
    "pt": {
        "organization": "Organização",
        "report": "Relatório",
        "report_title": "Relatório: {name}",
        "generated_on": "Data de Geração",
        "generated": "Gerado: {timestamp}",
        "generated_by": "Gerado por",
        "department": "Departamento",
        "total_records": "Total de Registros",
        "total_records_line": "Total de registros: {count}",
        "website": "Site",
        "notice": "Aviso",
        "page": "Página {number}",
        "yes": "Sim",
        "no": "Não",
    },
}

TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"


def message(language: str, key: str, **values: object) -> str:
    """Look up a caption, falling back to Spanish for unknown languages."""
    catalog = MESSAGES.get(language, MESSAGES["es"])
    return catalog[key].format(**values)


def boolean_label(value: bool, language: str) -> str:
    return message(language, "yes" if value else "no")
