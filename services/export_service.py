"""
Export service: initiatives as CSV or as an Excel executive report.

The Excel report has three sheets: EXECUTIVE SUMMARY (key metrics and
flagged updates), INITIATIVES (one row per initiative) and NEEDS ATTENTION
(critical, at-risk and off-track initiatives).
"""

import csv
from datetime import date
from io import BytesIO, StringIO
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Border, Side, PatternFill
import structlog

from models.initiative import ExecutiveSummary, InitiativeResponse

logger = structlog.get_logger(__name__)

UNASSIGNED_OWNER = "Unassigned"

COLUMNS = [
    "Title",
    "Description",
    "Status",
    "Priority",
    "Team",
    "Owner",
    "Start Date",
    "End Date",
    "Progress",
    "Tags",
    "Last Updated",
]

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_filename(prefix: str, extension: str, today: Optional[date] = None) -> str:
    """'initiatives' + 'csv' -> 'initiatives-2024-05-01.csv'"""
    return f"{prefix}-{(today or date.today()).isoformat()}.{extension}"


def initiative_row(initiative: InitiativeResponse, owners: dict[str, str]) -> list:
    """One export row, in COLUMNS order."""
    last_updated = initiative.updated_at or initiative.created_at
    return [
        initiative.title,
        initiative.description or "",
        initiative.status or "",
        initiative.priority or "",
        initiative.team or "",
        owners.get(initiative.owner_id or "", UNASSIGNED_OWNER),
        initiative.start_date.isoformat(),
        initiative.end_date.isoformat(),
        initiative.progress,
        "; ".join(initiative.tags),
        last_updated.isoformat() if last_updated else "",
    ]


class ExportService:
    """Service for generating initiative export files."""

    def initiatives_csv(
        self,
        initiatives: list[InitiativeResponse],
        owners: Optional[dict[str, str]] = None
    ) -> str:
        """
        Initiatives as CSV with a header row.

        Args:
            initiatives: Rows to export, in order
            owners: owner_id → display name

        Returns:
            CSV text
        """
        owners = owners or {}
        buf = StringIO()
        writer = csv.writer(buf, quoting=csv.QUOTE_ALL)
        writer.writerow(COLUMNS)
        for initiative in initiatives:
            writer.writerow(initiative_row(initiative, owners))

        logger.info("initiatives_csv_generated", count=len(initiatives))
        return buf.getvalue()

    def initiatives_excel(
        self,
        initiatives: list[InitiativeResponse],
        summary: ExecutiveSummary,
        owners: Optional[dict[str, str]] = None
    ) -> BytesIO:
        """
        Generate the executive report workbook.

        Args:
            initiatives: Rows for the INITIATIVES sheet
            summary: Metrics and highlighted initiatives
            owners: owner_id → display name

        Returns:
            BytesIO containing the Excel file
        """
        owners = owners or {}

        logger.info(
            "generating_executive_report",
            initiative_count=len(initiatives),
            flagged=len(summary.flagged)
        )

        wb = Workbook()

        # Styles
        bold_font = Font(bold=True)
        title_font = Font(bold=True, size=16)
        section_font = Font(bold=True, size=12)
        thin_border = Border(bottom=Side(style="thin", color="000000"))
        header_fill = PatternFill(start_color="E0E8FF", end_color="E0E8FF", fill_type="solid")
        risk_fill = PatternFill(start_color="FFE0E0", end_color="FFE0E0", fill_type="solid")

        # ===== SHEET 1: EXECUTIVE SUMMARY =====
        ws_summary = wb.active
        ws_summary.title = "EXECUTIVE SUMMARY"
        ws_summary.column_dimensions["A"].width = 40
        ws_summary.column_dimensions["B"].width = 60

        row = 1
        ws_summary[f"A{row}"] = "EXECUTIVE REPORT - PLAN OF RECORD"
        ws_summary[f"A{row}"].font = title_font
        row += 1
        ws_summary[f"A{row}"] = "Generated:"
        ws_summary[f"B{row}"] = date.today().isoformat()
        row += 2

        ws_summary[f"A{row}"] = summary.overview
        row += 2

        ws_summary[f"A{row}"] = "KEY METRICS"
        ws_summary[f"A{row}"].font = section_font
        ws_summary[f"A{row}"].border = thin_border
        row += 1
        metrics = [
            ("Total Initiatives", summary.total),
            ("Completed", summary.completed),
            ("On Track", summary.in_progress),
            ("At Risk / Off Track", summary.at_risk),
            ("Average Progress", f"{summary.average_progress:.1f}%"),
            ("Completion Rate", f"{summary.completion_rate:.1f}%"),
        ]
        for label, value in metrics:
            ws_summary[f"A{row}"] = label
            ws_summary[f"B{row}"] = value
            row += 1
        row += 1

        ws_summary[f"A{row}"] = "NOTABLE UPDATES"
        ws_summary[f"A{row}"].font = section_font
        ws_summary[f"A{row}"].border = thin_border
        row += 1
        if not summary.flagged:
            ws_summary[f"A{row}"] = "No initiatives flagged for the executive summary."
            row += 1
        for initiative in summary.flagged:
            ws_summary[f"A{row}"] = f"{initiative.title} ({initiative.status or 'Unknown'})"
            ws_summary[f"A{row}"].font = bold_font
            ws_summary[f"B{row}"] = initiative.executive_update or "No update provided yet."
            row += 1
            if initiative.reason_if_not_on_track:
                ws_summary[f"A{row}"] = "Reason not on track:"
                ws_summary[f"B{row}"] = initiative.reason_if_not_on_track
                row += 1

        # ===== SHEET 2: INITIATIVES =====
        ws_list = wb.create_sheet("INITIATIVES")
        for col, header in enumerate(COLUMNS, start=1):
            cell = ws_list.cell(row=1, column=col, value=header)
            cell.font = bold_font
            cell.fill = header_fill
        for index, initiative in enumerate(initiatives, start=2):
            for col, value in enumerate(initiative_row(initiative, owners), start=1):
                ws_list.cell(row=index, column=col, value=value)
        ws_list.column_dimensions["A"].width = 40
        ws_list.column_dimensions["B"].width = 60

        # ===== SHEET 3: NEEDS ATTENTION =====
        ws_risk = wb.create_sheet("NEEDS ATTENTION")
        headers = ["Title", "Status", "Priority", "Owner", "Progress", "Reason"]
        for col, header in enumerate(headers, start=1):
            cell = ws_risk.cell(row=1, column=col, value=header)
            cell.font = bold_font
            cell.fill = header_fill
        if not summary.needs_attention:
            ws_risk.cell(row=2, column=1, value="No critical initiatives requiring immediate attention.")
        for index, initiative in enumerate(summary.needs_attention, start=2):
            values = [
                initiative.title,
                initiative.status or "",
                initiative.priority or "",
                owners.get(initiative.owner_id or "", UNASSIGNED_OWNER),
                initiative.progress,
                initiative.reason_if_not_on_track or "",
            ]
            for col, value in enumerate(values, start=1):
                cell = ws_risk.cell(row=index, column=col, value=value)
                cell.fill = risk_fill
        ws_risk.column_dimensions["A"].width = 40
        ws_risk.column_dimensions["F"].width = 60

        # Save to BytesIO
        output = BytesIO()
        wb.save(output)
        output.seek(0)

        logger.info("executive_report_generated", initiative_count=len(initiatives))
        return output


# Singleton instance
_export_service: Optional[ExportService] = None


def get_export_service() -> ExportService:
    """Get or create ExportService instance."""
    global _export_service
    if _export_service is None:
        _export_service = ExportService()
    return _export_service
