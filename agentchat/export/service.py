"""Export entry point: format records, serialize, then (optionally) write."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, get_args

from .formatters import FORMATTERS, RECORD_TYPE_LABELS
from .serializers import (
    CONTENT_TYPES,
    convert_to_csv,
    convert_to_json,
    convert_to_pdf,
    convert_to_xlsx,
    generate_filename,
)

logger = logging.getLogger(__name__)

ExportFormat = Literal["csv", "json", "pdf", "xlsx"]
SUPPORTED_FORMATS = get_args(ExportFormat)


class ExportError(Exception):
    """Base error for failed exports."""


class UnsupportedExportFormat(ExportError, ValueError):
    """Raised for a format other than csv, json, pdf or xlsx."""


@dataclass(slots=True)
class ExportOptions:
    format: str
    filename: Optional[str] = None
    include_metadata: bool = True
    output_dir: Optional[Path] = None


@dataclass(slots=True)
class ExportFile:
    filename: str
    content: bytes
    media_type: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None


def build_metadata(record_type: str, network: str, total_records: int) -> Dict[str, Any]:
    return {
        "type": RECORD_TYPE_LABELS.get(record_type, record_type),
        "network": network,
        "totalRecords": total_records,
        "exportDate": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


def _serialize(rows: List[Mapping[str, Any]], metadata: Dict[str, Any], options: ExportOptions) -> bytes:
    meta = metadata if options.include_metadata else None
    if options.format == "csv":
        return convert_to_csv(rows).encode("utf-8")
    if options.format == "json":
        return convert_to_json(rows, meta).encode("utf-8")
    if options.format == "pdf":
        return convert_to_pdf(rows, metadata)
    if options.format == "xlsx":
        return convert_to_xlsx(rows, meta)
    raise UnsupportedExportFormat(f"Unsupported export format: {options.format}")


def _write_atomically(directory: Path, filename: str, content: bytes) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / filename
    fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".export-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fp:
            fp.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target


def export_data(
    records: Sequence[Mapping[str, Any]],
    record_type: str,
    network: str,
    options: ExportOptions,
) -> ExportFile:
    """
    Convert ``records`` into one export file.

    Unknown record types are exported as-is. The file is only written (when
    ``options.output_dir`` is set) after the whole payload has been serialized,
    so a failure never leaves a partial file behind.
    """
    if options.format not in SUPPORTED_FORMATS:
        raise UnsupportedExportFormat(f"Unsupported export format: {options.format}")

    formatter = FORMATTERS.get(record_type)
    rows = formatter(records) if formatter else [dict(record) for record in records]
    metadata = build_metadata(record_type, network, len(records))

    try:
        content = _serialize(rows, metadata, options)
    except ExportError:
        raise
    except Exception as exc:
        logger.error("Export of %s as %s failed: %s", record_type, options.format, exc, exc_info=True)
        raise ExportError(f"Export failed: {exc}") from exc

    filename = options.filename or generate_filename(record_type, network, options.format)
    export_file = ExportFile(
        filename=filename,
        content=content,
        media_type=CONTENT_TYPES[options.format],
        metadata=metadata,
    )

    if options.output_dir is not None:
        export_file.path = _write_atomically(Path(options.output_dir), filename, content)
        logger.info("Wrote %d %s record(s) to %s", len(rows), record_type, export_file.path)

    return export_file
