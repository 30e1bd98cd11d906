"""Excel exporter implementation."""

import io
import re
from typing import Any

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE, Cell
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.page import PageMargins
from openpyxl.worksheet.worksheet import Worksheet

from parksys.export.base import BaseExporter, select_fields
from parksys.export.branding import BrandingConfig
from parksys.export.config import (
    ExportConfig,
    ExportField,
    ExportFormat,
    ExportOptions,
    FieldType,
    Row,
)
from parksys.export.formatting import XLSX_ARRAY_SEPARATOR, format_text, to_cell_value
from parksys.export.messages import message

DATE_NUMBER_FORMAT = "dd/mm/yyyy"

MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 50
LOGO_ROWS = 3

_INVALID_SHEET_CHARS = re.compile(r"[\\/*?:\[\]]")

# Header layout / footer position -> horizontal alignment
_HORIZONTAL = {"left": "left", "center": "center", "right": "right", "split": "center"}


def _argb(hex_color: str) -> str:
    """'#067f5f' -> 'FF067F5F'."""
    return "FF" + hex_color.lstrip("#").upper()


def _clean(text: str) -> str:
    """Drop control characters worksheets cannot store."""
    return ILLEGAL_CHARACTERS_RE.sub("", text)


class ExcelExporter(BaseExporter):
    """Excel exporter - uses openpyxl.

    Cells keep native values (numbers, dates) with a number format applied,
    so the workbook can be sorted and used in formulas. Text is always stored
    as a string, never as a formula.
    """

    format = ExportFormat.XLSX

    async def process(
        self,
        rows: list[Row],
        config: ExportConfig,
        branding: BrandingConfig,
        options: ExportOptions,
    ) -> bytes:
        """Export rows to an XLSX workbook."""
        fields = select_fields(config, options)

        wb = Workbook()
        wb.properties.creator = _clean(branding.organization.name)
        wb.properties.title = _clean(config.display_name)
        wb.properties.subject = _clean(self.report_title(config, branding, options))

        ws = wb.active
        ws.title = self._sheet_title(config.display_name)
        self._setup_page(ws)

        current_row = 1
        if self.include_header(options):
            current_row = self._add_header(ws, config, branding, options, len(fields), current_row)
            current_row += 2

        current_row = self._add_table_header(ws, fields, branding, current_row)
        current_row = self._add_table_data(ws, rows, fields, branding, current_row)

        if self.include_footer(options):
            current_row += 2
            self._add_footer(ws, branding, options, len(rows), len(fields), current_row)

        self._set_column_widths(ws, rows, fields, branding)

        # Save to memory
        output = io.BytesIO()
        wb.save(output)
        return output.getvalue()

    def _write(self, ws: Worksheet, row: int, column: int, value: Any) -> Cell:
        """Write a cell; strings are cleaned and pinned to the string type."""
        if isinstance(value, str):
            cell = ws.cell(row=row, column=column, value=_clean(value))
            cell.data_type = "s"
            return cell
        return ws.cell(row=row, column=column, value=value)

    def _sheet_title(self, display_name: str) -> str:
        title = _INVALID_SHEET_CHARS.sub(" ", _clean(display_name)).strip()
        return title[:31] or "Sheet1"

    def _setup_page(self, ws: Worksheet) -> None:
        ws.page_setup.paperSize = ws.PAPERSIZE_A4
        ws.page_setup.orientation = ws.ORIENTATION_LANDSCAPE
        ws.page_setup.fitToWidth = 1
        ws.page_setup.fitToHeight = 0
        ws.sheet_properties.pageSetUpPr.fitToPage = True
        ws.page_margins = PageMargins(
            left=0.7, right=0.7, top=0.75, bottom=0.75, header=0.3, footer=0.3
        )

    def _merge_row(self, ws: Worksheet, row: int, column_count: int) -> None:
        if column_count > 1:
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=column_count)

    def _add_header(
        self,
        ws: Worksheet,
        config: ExportConfig,
        branding: BrandingConfig,
        options: ExportOptions,
        column_count: int,
        start_row: int,
    ) -> int:
        header = branding.templates.header
        fonts = branding.fonts
        language = branding.locale.language
        body_font = Font(name=fonts.body, size=fonts.size.body)
        current_row = start_row

        if self.include_logo(branding, options):
            # Reserved for the logo image
            current_row += LOGO_ROWS

        if header.show_title:
            cell = self._write(ws, current_row, 1, self.report_title(config, branding, options))
            cell.font = Font(
                name=fonts.title,
                size=fonts.size.title,
                bold=True,
                color=_argb(branding.colors.primary),
            )
            cell.alignment = Alignment(horizontal=_HORIZONTAL[header.layout], vertical="center")
            self._merge_row(ws, current_row, column_count)
            current_row += 1

        if header.show_organization:
            cell = self._write(ws, current_row, 1, branding.organization.name)
            cell.font = Font(name=fonts.body, size=fonts.size.subtitle, bold=True)
            current_row += 1

        if branding.organization.department:
            cell = self._write(ws, current_row, 1, branding.organization.department)
            cell.font = body_font
            current_row += 1

        if header.show_date:
            cell = self._write(
                ws, current_row, 1, message(language, "generated", timestamp=self.timestamp(options))
            )
            cell.font = body_font
            current_row += 1

        actor = self.generated_by(branding, options)
        if actor:
            cell = self._write(ws, current_row, 1, f"{message(language, 'generated_by')}: {actor}")
            cell.font = body_font
            current_row += 1

        if header.custom_text:
            cell = self._write(ws, current_row, 1, header.custom_text)
            cell.font = Font(name=fonts.body, size=fonts.size.body, italic=True)
            self._merge_row(ws, current_row, column_count)
            current_row += 1

        return current_row

    def _border(self) -> Border:
        side = Side(style="thin", color="FFCCCCCC")
        return Border(left=side, right=side, top=side, bottom=side)

    def _alignment(self, field_type: FieldType) -> Alignment:
        if field_type in (FieldType.NUMBER, FieldType.CURRENCY):
            return Alignment(horizontal="right", vertical="center")
        if field_type in (FieldType.DATE, FieldType.BOOLEAN):
            return Alignment(horizontal="center", vertical="center")
        return Alignment(horizontal="left", vertical="center")

    def _number_format(self, field: ExportField, branding: BrandingConfig) -> str | None:
        if field.number_format:
            return field.number_format
        if field.type == FieldType.DATE:
            return DATE_NUMBER_FORMAT
        if field.type == FieldType.CURRENCY:
            return branding.locale.currency_format
        if field.type == FieldType.NUMBER:
            return branding.locale.number_format
        return None

    def _add_table_header(
        self, ws: Worksheet, fields: list[ExportField], branding: BrandingConfig, start_row: int
    ) -> int:
        style = branding.templates.table.header_style
        fonts = branding.fonts
        fill = PatternFill(fill_type="solid", fgColor=_argb(branding.colors.table_header))

        if style == "colored":
            font = Font(name=fonts.body, size=fonts.size.subtitle, bold=True, color="FFFFFFFF")
        elif style == "bold":
            font = Font(name=fonts.body, size=fonts.size.subtitle, bold=True, color=_argb(branding.colors.text))
        else:
            font = Font(name=fonts.body, size=fonts.size.subtitle, color=_argb(branding.colors.text))

        for index, field in enumerate(fields, start=1):
            cell = self._write(ws, start_row, index, field.label)
            cell.font = font
            if style == "colored":
                cell.fill = fill
            cell.border = self._border()
            cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        return start_row + 1

    def _add_table_data(
        self,
        ws: Worksheet,
        rows: list[Row],
        fields: list[ExportField],
        branding: BrandingConfig,
        start_row: int,
    ) -> int:
        table = branding.templates.table
        alternate_fill = PatternFill(fill_type="solid", fgColor=_argb(branding.colors.table_alternate))
        font = Font(name=branding.fonts.body, size=table.font_size)
        number_formats = {field.key: self._number_format(field, branding) for field in fields}

        for offset, row in enumerate(rows):
            row_number = start_row + offset
            shaded = table.alternate_rows and offset % 2 == 1

            for index, field in enumerate(fields, start=1):
                value = to_cell_value(row.get(field.key), field.type, branding.locale)
                cell = self._write(ws, row_number, index, value)

                number_format = number_formats[field.key]
                if number_format and value is not None and not isinstance(value, str):
                    cell.number_format = number_format

                if shaded:
                    cell.fill = alternate_fill
                if table.show_borders:
                    cell.border = self._border()
                cell.alignment = self._alignment(field.type)
                cell.font = font

            if table.row_height:
                ws.row_dimensions[row_number].height = table.row_height

        return start_row + len(rows)

    def _add_footer(
        self,
        ws: Worksheet,
        branding: BrandingConfig,
        options: ExportOptions,
        record_count: int,
        column_count: int,
        start_row: int,
    ) -> None:
        footer = branding.templates.footer
        organization = branding.organization
        language = branding.locale.language
        font = Font(name=branding.fonts.body, size=branding.fonts.size.footer, italic=True)
        alignment = Alignment(horizontal=_HORIZONTAL[footer.position])

        lines: list[tuple[str, Font, bool]] = [
            (message(language, "total_records_line", count=record_count), font, False)
        ]
        if footer.show_timestamp:
            lines.append((message(language, "generated", timestamp=self.timestamp(options)), font, False))
        if footer.show_contact and organization.website:
            contact = " | ".join(
                part for part in (organization.name, organization.website, organization.phone) if part
            )
            lines.append((contact, font, True))
        if footer.custom_text:
            lines.append((footer.custom_text, font, True))
        if footer.show_disclaimer and footer.disclaimer:
            caption = Font(name=branding.fonts.body, size=branding.fonts.size.caption, italic=True)
            lines.append((footer.disclaimer, caption, True))

        for offset, (text, line_font, merged) in enumerate(lines):
            cell = self._write(ws, start_row + offset, 1, text)
            cell.font = line_font
            if merged:
                cell.alignment = alignment
                self._merge_row(ws, start_row + offset, column_count)

    def _set_column_widths(
        self, ws: Worksheet, rows: list[Row], fields: list[ExportField], branding: BrandingConfig
    ) -> None:
        auto_fit = branding.templates.table.column_auto_fit
        for index, field in enumerate(fields, start=1):
            letter = get_column_letter(index)
            if field.width:
                ws.column_dimensions[letter].width = field.width
                continue
            if not auto_fit:
                continue

            max_length = len(field.label)
            for row in rows:
                text = format_text(row.get(field.key), field.type, branding.locale, XLSX_ARRAY_SEPARATOR)
                max_length = max(max_length, len(text))
            ws.column_dimensions[letter].width = min(
                max(max_length + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH
            )

    def get_file_extension(self) -> str:
        """Return 'xlsx'."""
        return "xlsx"

    def get_mime_type(self) -> str:
        """Return Excel MIME type."""
        return "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
