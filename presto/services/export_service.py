"""
Service d'export CSV/Excel des rapports / Activity report CSV/Excel export service.
Une ligne par jour du mois puis une ligne de total.
"""

import csv
import io
import re
import unicodedata

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from presto.models.activity_report import ActivityReport
from presto.services import holiday_service

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

REPORT_FIELDS = ["date", "day", "value", "note", "weekend", "holiday"]

# Jours non ouvrés grisés / Non-working days shaded
_OFF_DAY_FILL = PatternFill(start_color="EEEEEE", end_color="EEEEEE", fill_type="solid")


class ExportService:
    """Export d'un rapport d'activité vers CSV/XLSX / Activity report export to CSV/XLSX."""

    MEDIA_TYPES = {
        "csv": "text/csv; charset=utf-8",
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }

    @staticmethod
    def slugify(value: str) -> str:
        """Nom de fichier ASCII / ASCII filename-safe slug."""
        ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
        slug = re.sub(r"[^a-zA-Z0-9]+", "-", ascii_value).strip("-").lower()
        return slug or "client"

    @staticmethod
    def filename(report: ActivityReport, fmt: str) -> str:
        """Presto-{année}-{MM}-{client}.{ext}"""
        client_slug = ExportService.slugify(report.mission.client.name)
        return f"Presto-{report.year}-{report.month:02d}-{client_slug}.{fmt}"

    @staticmethod
    def report_rows(report: ActivityReport) -> list[dict]:
        """Une ligne par entrée, triée par date / One row per entry, ordered by date."""
        rows = []
        for entry in sorted(report.entries, key=lambda e: e.date):
            holiday = None
            if entry.is_holiday:
                holiday = holiday_service.holiday_name(entry.date, report.holiday_country)
            rows.append({
                "date": entry.date.isoformat(),
                "day": DAY_NAMES[entry.date.weekday()],
                "value": entry.value,
                "note": entry.note or "",
                "weekend": "true" if entry.is_weekend else "false",
                "holiday": holiday or "",
            })
        return rows

    @staticmethod
    def to_csv(report: ActivityReport) -> bytes:
        """Générer un CSV UTF-8 BOM avec séparateur ';' / Generate UTF-8 BOM CSV with ';' separator."""
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=REPORT_FIELDS, delimiter=";", extrasaction="ignore")
        writer.writeheader()
        for row in ExportService.report_rows(report):
            writer.writerow(row)
        writer.writerow({"date": "TOTAL", "value": report.total_days})
        return ("\ufeff" + output.getvalue()).encode("utf-8")

    @staticmethod
    def to_xlsx(report: ActivityReport) -> bytes:
        """Générer un fichier Excel avec en-tête mission/période / Generate an Excel file with a summary header."""
        mission = report.mission
        wb = Workbook()
        ws = wb.active
        ws.title = f"{report.year}-{report.month:02d}"

        # Bloc d'en-tête / Summary block
        summary = [
            ("Mission", mission.name),
            ("Client", mission.client.name),
            ("Period", f"{report.year}-{report.month:02d}"),
            ("Total days", report.total_days),
        ]
        for row_idx, (label, value) in enumerate(summary, 1):
            ws.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
            ws.cell(row=row_idx, column=2, value=value)

        header_row = len(summary) + 2
        for col_idx, field in enumerate(REPORT_FIELDS, 1):
            ws.cell(row=header_row, column=col_idx, value=field).font = Font(bold=True)

        rows = ExportService.report_rows(report)
        for row_idx, row in enumerate(rows, header_row + 1):
            off_day = row["weekend"] == "true" or bool(row["holiday"])
            for col_idx, field in enumerate(REPORT_FIELDS, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=row.get(field))
                if off_day:
                    cell.fill = _OFF_DAY_FILL

        total_row = header_row + len(rows) + 1
        ws.cell(row=total_row, column=1, value="TOTAL").font = Font(bold=True)
        ws.cell(row=total_row, column=3, value=report.total_days).font = Font(bold=True)

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    @staticmethod
    def render(report: ActivityReport, fmt: str) -> bytes:
        if fmt == "csv":
            return ExportService.to_csv(report)
        return ExportService.to_xlsx(report)
