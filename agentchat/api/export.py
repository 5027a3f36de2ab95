import logging
import re
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from ..export import ExportError, ExportOptions, UnsupportedExportFormat, export_data
from ..types import ExportRequest

router = APIRouter(prefix="/api")
_logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII ``filename`` and a UTF-8 ``filename*`` (RFC 6266)."""
    cleaned = _CONTROL_CHARS.sub("", filename)
    fallback = cleaned.encode("ascii", "replace").decode("ascii").replace("?", "_")
    fallback = fallback.replace("\\", "\\\\").replace('"', '\\"')
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(cleaned, safe='')}"


@router.post("/export")
async def export_endpoint(request: ExportRequest) -> Response:
    """Render records as csv/json/pdf/xlsx and return them as a download."""
    options = ExportOptions(
        format=request.format.lower(),
        filename=request.filename,
        include_metadata=request.include_metadata,
    )
    try:
        export_file = export_data(request.records, request.record_type, request.network, options)
    except UnsupportedExportFormat as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ExportError as e:
        _logger.error("Export failed: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return Response(
        content=export_file.content,
        media_type=export_file.media_type,
        headers={"Content-Disposition": content_disposition(export_file.filename)},
    )
