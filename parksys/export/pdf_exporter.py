"""PDF exporter implementation."""

import io
import math
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

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
from parksys.export.formatting import PDF_ARRAY_SEPARATOR, format_text
from parksys.export.messages import message

PORTRAIT_MAX_FIELDS = 6
MARGIN = 15 * mm
DEFAULT_FIELD_WIDTH = 15
HEADER_RULE_GAP = 6
LINE_SPACING = 1.4
CELL_PADDING = 6
# Rough glyph width relative to the font size, on the wide side
CHAR_WIDTH_RATIO = 0.6
# Share of the frame height a single table row may take
MAX_ROW_SHARE = 0.5
ELLIPSIS = "…"

_BUILTIN_FONTS = {
    "helvetica": ("Helvetica", "Helvetica-Bold"),
    "arial": ("Helvetica", "Helvetica-Bold"),
    "times": ("Times-Roman", "Times-Bold"),
    "times new roman": ("Times-Roman", "Times-Bold"),
    "courier": ("Courier", "Courier-Bold"),
}

_ALIGNMENTS = {"left": TA_LEFT, "center": TA_CENTER, "right": TA_RIGHT}

HeaderLine = tuple[str, str, int, str]


def _font(family: str, bold: bool = False) -> str:
    """Map a branding font family onto one of the PDF standard fonts."""
    regular, heavy = _BUILTIN_FONTS.get(family.lower(), _BUILTIN_FONTS["helvetica"])
    return heavy if bold else regular


def _paragraph_text(text: str) -> str:
    return escape(text).replace("\n", "<br/>")


def clip_text(text: str, width: float, font_size: float, max_lines: int) -> str:
    """Cut text that would wrap past max_lines in a column of the given width.

    Reportlab cannot split a single table row across pages, so a cell taller
    than the frame would make the layout fail.
    """
    chars_per_line = max(int(width / (font_size * CHAR_WIDTH_RATIO)), 1)
    used = 0
    kept: list[str] = []
    for segment in text.split("\n"):
        needed = max(1, math.ceil(len(segment) / chars_per_line))
        if used + needed > max_lines:
            room = (max_lines - used) * chars_per_line - len(ELLIPSIS)
            if room > 0:
                kept.append(segment[:room])
            return "\n".join(kept).rstrip() + ELLIPSIS
        kept.append(segment)
        used += needed
    return text


class PDFExporter(BaseExporter):
    """PDF exporter - uses reportlab.

    The branded header is drawn at fixed positions on the first page; the
    data table flows over as many pages as needed and repeats its header row.
    Every cell is a pre-formatted string, formatted like the CSV output.
    """

    format = ExportFormat.PDF

    def page_size(self, field_count: int) -> tuple[float, float]:
        """A4, landscape when more than six columns are exported."""
        if field_count > PORTRAIT_MAX_FIELDS:
            return landscape(A4)
        return A4

    async def process(
        self,
        rows: list[Row],
        config: ExportConfig,
        branding: BrandingConfig,
        options: ExportOptions,
    ) -> bytes:
        """Export rows to a PDF document."""
        fields = select_fields(config, options)
        page_width, page_height = self.page_size(len(fields))
        header_lines = self._header_lines(config, branding, options) if self.include_header(options) else []
        include_footer = self.include_footer(options)

        output = io.BytesIO()
        doc = SimpleDocTemplate(
            output,
            pagesize=(page_width, page_height),
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=self.report_title(config, branding, options),
            author=branding.organization.name,
            subject=config.description or config.display_name,
        )

        story = []
        if header_lines:
            story.append(Spacer(1, self._header_height(header_lines)))
        if fields:
            story.append(self._build_table(rows, fields, branding, doc.width, doc.height))
        if include_footer:
            story.extend(self._footer_flowables(branding, options, len(rows)))

        def on_first_page(canvas: Canvas, document: SimpleDocTemplate) -> None:
            if header_lines:
                self._draw_header(canvas, document, header_lines, branding)
            if include_footer:
                self._draw_page_number(canvas, document, branding)

        def on_later_pages(canvas: Canvas, document: SimpleDocTemplate) -> None:
            if include_footer:
                self._draw_page_number(canvas, document, branding)

        doc.build(story, onFirstPage=on_first_page, onLaterPages=on_later_pages)
        return output.getvalue()

    def _header_lines(
        self, config: ExportConfig, branding: BrandingConfig, options: ExportOptions
    ) -> list[HeaderLine]:
        """(text, font, size, alignment) for each header line, top to bottom.

        The split layout keeps the identity lines on the left and pushes the
        generation details to the right.
        """
        header = branding.templates.header
        fonts = branding.fonts
        language = branding.locale.language
        identity = "left" if header.layout == "split" else header.layout
        details = "right" if header.layout == "split" else header.layout
        lines = []

        if header.show_organization:
            lines.append((branding.organization.name, _font(fonts.title, bold=True), fonts.size.title, identity))
        if branding.organization.department:
            lines.append((branding.organization.department, _font(fonts.body), fonts.size.body, identity))
        if header.show_title:
            lines.append(
                (
                    self.report_title(config, branding, options),
                    _font(fonts.title, bold=True),
                    fonts.size.subtitle,
                    identity,
                )
            )
        if header.show_date:
            lines.append(
                (
                    message(language, "generated", timestamp=self.timestamp(options)),
                    _font(fonts.body),
                    fonts.size.footer,
                    details,
                )
            )
        actor = self.generated_by(branding, options)
        if actor:
            lines.append(
                (f"{message(language, 'generated_by')}: {actor}", _font(fonts.body), fonts.size.footer, details)
            )
        if header.custom_text:
            lines.append((header.custom_text, _font(fonts.body), fonts.size.body, identity))
        return lines

    def _header_height(self, lines: list[HeaderLine]) -> float:
        return sum(size * LINE_SPACING for _, _, size, _ in lines) + 2 * HEADER_RULE_GAP

    def _draw_header(
        self,
        canvas: Canvas,
        doc: SimpleDocTemplate,
        lines: list[HeaderLine],
        branding: BrandingConfig,
    ) -> None:
        page_width, page_height = doc.pagesize
        left = doc.leftMargin
        right = page_width - doc.rightMargin
        y = page_height - doc.topMargin

        canvas.saveState()
        canvas.setFillColor(colors.HexColor(branding.colors.text))
        for text, font, size, alignment in lines:
            y -= size * LINE_SPACING
            canvas.setFont(font, size)
            if alignment == "center":
                canvas.drawCentredString((left + right) / 2, y, text)
            elif alignment == "right":
                canvas.drawRightString(right, y, text)
            else:
                canvas.drawString(left, y, text)

        y -= HEADER_RULE_GAP
        canvas.setStrokeColor(colors.HexColor(branding.colors.primary))
        canvas.setLineWidth(1.5)
        canvas.line(left, y, right, y)
        canvas.restoreState()

    def _draw_page_number(self, canvas: Canvas, doc: SimpleDocTemplate, branding: BrandingConfig) -> None:
        footer = branding.templates.footer
        if not footer.show_page_numbers:
            return
        page_width, _ = doc.pagesize
        y = doc.bottomMargin / 2
        text = message(branding.locale.language, "page", number=canvas.getPageNumber())

        canvas.saveState()
        canvas.setFont(_font(branding.fonts.body), branding.fonts.size.caption)
        canvas.setFillColor(colors.HexColor(branding.colors.text))
        if footer.position == "left":
            canvas.drawString(doc.leftMargin, y, text)
        elif footer.position == "right":
            canvas.drawRightString(page_width - doc.rightMargin, y, text)
        else:
            canvas.drawCentredString(page_width / 2, y, text)
        canvas.restoreState()

    def _cell_style(self, name: str, branding: BrandingConfig, size: int, field_type: FieldType) -> ParagraphStyle:
        if field_type in (FieldType.NUMBER, FieldType.CURRENCY):
            alignment = TA_RIGHT
        elif field_type in (FieldType.DATE, FieldType.BOOLEAN):
            alignment = TA_CENTER
        else:
            alignment = TA_LEFT
        return ParagraphStyle(
            name,
            fontName=_font(branding.fonts.body),
            fontSize=size,
            leading=size * 1.2,
            alignment=alignment,
            textColor=colors.HexColor(branding.colors.text),
        )

    def font_size(self, fields: list[ExportField], branding: BrandingConfig) -> int:
        # Wide landscape tables drop to the caption size so columns stay readable.
        if len(fields) <= PORTRAIT_MAX_FIELDS:
            return branding.templates.table.font_size
        return branding.fonts.size.caption

    def cell_texts(self, rows: list[Row], fields: list[ExportField], branding: BrandingConfig) -> list[list[str]]:
        """Table text, label row first, before any clipping."""
        data = [[field.label for field in fields]]
        for row in rows:
            data.append(
                [format_text(row.get(field.key), field.type, branding.locale, PDF_ARRAY_SEPARATOR) for field in fields]
            )
        return data

    def _header_row_style(self, branding: BrandingConfig, size: int) -> ParagraphStyle:
        style = branding.templates.table.header_style
        if style == "colored":
            return ParagraphStyle(
                "ExportTableHeader",
                fontName=_font(branding.fonts.body, bold=True),
                fontSize=size,
                leading=size * 1.2,
                alignment=TA_CENTER,
                textColor=colors.white,
            )
        return ParagraphStyle(
            "ExportTableHeader",
            fontName=_font(branding.fonts.body, bold=style == "bold"),
            fontSize=size,
            leading=size * 1.2,
            alignment=TA_CENTER,
            textColor=colors.HexColor(branding.colors.text),
        )

    def _build_table(
        self,
        rows: list[Row],
        fields: list[ExportField],
        branding: BrandingConfig,
        available_width: float,
        available_height: float,
    ) -> Table:
        table_template = branding.templates.table
        size = self.font_size(fields, branding)
        leading = size * 1.2

        weights = [field.width or DEFAULT_FIELD_WIDTH for field in fields]
        total = sum(weights)
        col_widths = [available_width * weight / total for weight in weights]
        max_lines = max(int(available_height * MAX_ROW_SHARE / leading), 1)

        header_style = self._header_row_style(branding, size)
        cell_styles = [
            self._cell_style(f"ExportCell-{field.key}", branding, size, field.type) for field in fields
        ]

        texts = self.cell_texts(rows, fields, branding)
        data = [[Paragraph(_paragraph_text(label), header_style) for label in texts[0]]]
        for values in texts[1:]:
            data.append(
                [
                    Paragraph(
                        _paragraph_text(clip_text(value, width - 2 * CELL_PADDING, size, max_lines)),
                        style,
                    )
                    for value, width, style in zip(values, col_widths, cell_styles)
                ]
            )

        commands = [
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ("LEFTPADDING", (0, 0), (-1, -1), CELL_PADDING),
            ("RIGHTPADDING", (0, 0), (-1, -1), CELL_PADDING),
        ]
        if table_template.header_style == "colored":
            commands.append(("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(branding.colors.table_header)))
        elif table_template.header_style == "bold":
            commands.append(("LINEBELOW", (0, 0), (-1, 0), 1, colors.HexColor(branding.colors.primary)))
        if table_template.show_borders:
            commands.append(("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#CCCCCC")))
        if table_template.alternate_rows and rows:
            commands.append(
                (
                    "ROWBACKGROUNDS",
                    (0, 1),
                    (-1, -1),
                    [colors.HexColor(branding.colors.background), colors.HexColor(branding.colors.table_alternate)],
                )
            )

        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle(commands))
        return table

    def _footer_flowables(self, branding: BrandingConfig, options: ExportOptions, record_count: int) -> list:
        footer = branding.templates.footer
        language = branding.locale.language
        body = ParagraphStyle(
            "ExportFooter",
            fontName=_font(branding.fonts.body),
            fontSize=branding.fonts.size.footer,
            leading=branding.fonts.size.footer * LINE_SPACING,
            textColor=colors.HexColor(branding.colors.text),
            alignment=_ALIGNMENTS[footer.position],
        )
        small = ParagraphStyle(
            "ExportDisclaimer",
            parent=body,
            fontSize=branding.fonts.size.caption,
            leading=branding.fonts.size.caption * LINE_SPACING,
        )

        lines = [message(language, "total_records_line", count=record_count)]
        if footer.show_timestamp:
            lines.append(message(language, "generated", timestamp=self.timestamp(options)))
        if footer.show_contact and branding.organization.website:
            lines.append(branding.organization.website)
        if footer.custom_text:
            lines.append(footer.custom_text)

        flowables = [Spacer(1, 12)]
        flowables.extend(Paragraph(_paragraph_text(line), body) for line in lines)
        if footer.show_disclaimer and footer.disclaimer:
            flowables.append(Spacer(1, 6))
            flowables.append(Paragraph(_paragraph_text(footer.disclaimer), small))
        return flowables

    def get_file_extension(self) -> str:
        """Return 'pdf'."""
        return "pdf"

    def get_mime_type(self) -> str:
        """Return PDF MIME type."""
        return "application/pdf"
