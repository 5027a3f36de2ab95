"""Serializers for the four export formats.

Every serializer returns the complete file content in memory; nothing here
touches the filesystem.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

HEADER_FILL_RGB = (66, 139, 202)
ALTERNATE_ROW_RGB = (245, 245, 245)


def _cell_text(value: Any) -> str:
    """Render one cell; falsy values become empty, containers become JSON."""
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    if not value:
        return ""
    return str(value)


def _headers(rows: Sequence[Mapping[str, Any]], headers: Optional[Sequence[str]] = None) -> List[str]:
    return list(headers) if headers else list(rows[0].keys())


def generate_filename(data_type: str, network: str, extension: str, now: Optional[datetime] = None) -> str:
    """``{type}_{network}_{YYYY-MM-DD}_{HH-MM-SS}.{ext}`` in UTC."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return f"{data_type}_{network}_{moment:%Y-%m-%d}_{moment:%H-%M-%S}.{extension}"


def convert_to_csv(rows: Sequence[Mapping[str, Any]], headers: Optional[Sequence[str]] = None) -> str:
    if not rows:
        return ""

    fieldnames = _headers(rows, headers)
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=fieldnames,
        extrasaction="ignore",
        lineterminator="\n",
        quoting=csv.QUOTE_MINIMAL,
    )
    writer.writeheader()
    for row in rows:
        writer.writerow({name: _cell_text(row.get(name)) for name in fieldnames})
    return buffer.getvalue().removesuffix("\n")


def convert_to_json(rows: Sequence[Mapping[str, Any]], metadata: Optional[Mapping[str, Any]] = None) -> str:
    payload = {
        "metadata": dict(metadata) if metadata is not None else None,
        "data": list(rows),
        "exportInfo": {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "totalRecords": len(rows),
            "format": "json",
        },
    }
    return json.dumps(payload, indent=2, default=str, ensure_ascii=False)


def _export_date(metadata: Mapping[str, Any]) -> str:
    raw = metadata.get("exportDate")
    if not raw:
        return ""
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return str(raw)


def convert_to_pdf(rows: Sequence[Mapping[str, Any]], metadata: Mapping[str, Any]) -> bytes:
    """Title, metadata lines and (when there are rows) one table."""
    headers = _headers(rows) if rows else []
    pagesize = landscape(A4) if len(headers) > 6 else A4

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        title=f"{metadata.get('type', 'Export')} Report",
    )
    styles = getSampleStyleSheet()
    story: List[Any] = [
        Paragraph(escape(f"{metadata.get('type', 'Export')} Report"), styles["Title"]),
        Paragraph(escape(f"Network: {metadata.get('network', '')}"), styles["Normal"]),
        Paragraph(f"Total Records: {metadata.get('totalRecords', len(rows))}", styles["Normal"]),
        Paragraph(f"Export Date: {_export_date(metadata)}", styles["Normal"]),
        Spacer(1, 8 * mm),
    ]

    if rows:
        cell_style = styles["BodyText"].clone("ExportCell", fontSize=7, leading=8)
        table_data = [headers] + [
            [Paragraph(escape(_cell_text(row.get(header))), cell_style) for header in headers]
            for row in rows
        ]
        table = Table(table_data, repeatRows=1)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.Color(*(c / 255 for c in HEADER_FILL_RGB))),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [
                colors.white,
                colors.Color(*(c / 255 for c in ALTERNATE_ROW_RGB)),
            ]),
            ("TOPPADDING", (0, 0), (-1, -1), 2),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]))
        story.append(table)

    doc.build(story)
    return buffer.getvalue()


def _xlsx_value(value: Any) -> Any:
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    if value is None:
        return ""
    return value


def convert_to_xlsx(rows: Sequence[Mapping[str, Any]], metadata: Optional[Mapping[str, Any]] = None) -> bytes:
    """Workbook with a ``Data`` sheet and, when metadata is given, a ``Metadata`` sheet."""
    workbook = Workbook()
    data_sheet = workbook.active
    data_sheet.title = "Data"

    if rows:
        headers = _headers(rows)
        data_sheet.append(headers)
        for cell in data_sheet[1]:
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = PatternFill("solid", fgColor="%02X%02X%02X" % HEADER_FILL_RGB)
        for row in rows:
            data_sheet.append([_xlsx_value(row.get(header)) for header in headers])

    if metadata is not None:
        metadata_sheet = workbook.create_sheet("Metadata")
        metadata_sheet.append(list(metadata.keys()))
        metadata_sheet.append([_xlsx_value(value) for value in metadata.values()])

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


CONTENT_TYPES: Dict[str, str] = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json; charset=utf-8",
    "pdf": "application/pdf",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}
