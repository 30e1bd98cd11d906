"""CSV exporter implementation."""

import csv
import io

from parksys.export.base import BaseExporter, select_fields
from parksys.export.branding import BrandingConfig
from parksys.export.config import ExportConfig, ExportFormat, ExportOptions, Row
from parksys.export.formatting import CSV_ARRAY_SEPARATOR, format_text
from parksys.export.messages import message

UTF8_BOM = "\ufeff"
LINE_TERMINATOR = "\n"


class CSVExporter(BaseExporter):
    """CSV exporter - RFC 4180 quoting with a branded header and footer.

    A value is quoted only when it contains a comma, a double quote or a line
    break; embedded quotes are doubled.
    """

    format = ExportFormat.CSV

    async def process(
        self,
        rows: list[Row],
        config: ExportConfig,
        branding: BrandingConfig,
        options: ExportOptions,
    ) -> str:
        """Export rows to CSV text."""
        output = io.StringIO()
        # BOM so spreadsheet tools detect UTF-8 instead of Latin-1
        output.write(UTF8_BOM)

        writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator=LINE_TERMINATOR)
        fields = select_fields(config, options)

        if self.include_header(options):
            self._write_rows(output, writer, self._header_lines(config, branding, options))
            writer.writerow([])

        self._write_rows(output, writer, [[field.label for field in fields]])
        self._write_rows(
            output,
            writer,
            (
                [
                    format_text(row.get(field.key), field.type, branding.locale, CSV_ARRAY_SEPARATOR)
                    for field in fields
                ]
                for row in rows
            ),
        )

        if self.include_footer(options):
            writer.writerow([])
            self._write_rows(output, writer, self._footer_lines(branding, len(rows)))

        return output.getvalue()

    def _write_rows(self, output: io.StringIO, writer, lines) -> None:
        for values in lines:
            # csv.writer quotes a lone empty field; an empty value is written bare
            if values == [""]:
                output.write(LINE_TERMINATOR)
            else:
                writer.writerow(values)

    def _header_lines(
        self, config: ExportConfig, branding: BrandingConfig, options: ExportOptions
    ) -> list[list[str]]:
        language = branding.locale.language
        header = branding.templates.header
        lines = []

        if header.show_organization:
            lines.append([message(language, "organization"), branding.organization.name])
        if header.show_title:
            title = self.branding_options(options).custom_title or config.display_name
            lines.append([message(language, "report"), title])
        if header.show_date:
            lines.append([message(language, "generated_on"), self.timestamp(options)])
        actor = self.generated_by(branding, options)
        if actor:
            lines.append([message(language, "generated_by"), actor])
        if branding.organization.department:
            lines.append([message(language, "department"), branding.organization.department])
        if header.custom_text:
            lines.append([header.custom_text])

        return lines

    def _footer_lines(self, branding: BrandingConfig, record_count: int) -> list[list[str]]:
        language = branding.locale.language
        footer = branding.templates.footer
        lines = [[message(language, "total_records"), str(record_count)]]

        if footer.show_contact and branding.organization.website:
            lines.append([message(language, "website"), branding.organization.website])
        if footer.custom_text:
            lines.append([footer.custom_text])
        if footer.show_disclaimer and footer.disclaimer:
            lines.append([message(language, "notice"), footer.disclaimer])

        return lines

    def get_file_extension(self) -> str:
        """Return 'csv'."""
        return "csv"

    def get_mime_type(self) -> str:
        """Return CSV MIME type."""
        return "text/csv; charset=utf-8"
