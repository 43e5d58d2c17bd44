"""Helpers shared by the media routes."""

from pathlib import Path
from typing import Optional, Tuple

from fastapi import HTTPException, UploadFile
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from ..models.responses import error_detail
from ..services.exceptions import ToolError, ToolTimeoutError
from ..services.file_manager import FileManager
from ..utils.media_types import media_type_for


def require_upload(file: Optional[UploadFile]) -> UploadFile:
    if file is None or not file.filename:
        raise HTTPException(
            status_code=400,
            detail=error_detail("NO_FILE", "No file uploaded", "Send the media as the 'file' form field"),
        )
    return file


async def store_upload(file: Optional[UploadFile], file_manager: FileManager) -> Tuple[Path, int]:
    """Validate that a file was sent and write it to the uploads directory."""
    return await file_manager.save_upload(require_upload(file))


def tool_failure(code: str, message: str, exc: ToolError) -> HTTPException:
    """Translate a tool failure into an HTTPException carrying its stderr."""
    if isinstance(exc, ToolTimeoutError):
        return HTTPException(
            status_code=504,
            detail=error_detail("PROCESSING_TIMEOUT", message, exc.details),
        )
    return HTTPException(status_code=500, detail=error_detail(code, message, exc.details))


def file_download(
    path: Path,
    filename: str,
    fmt: str,
    file_manager: FileManager,
    headers: Optional[dict] = None,
) -> FileResponse:
    """Send ``path`` as an attachment and delete it once the body is sent."""
    return FileResponse(
        path=str(path),
        filename=filename,
        media_type=media_type_for(fmt),
        headers=headers,
        background=BackgroundTask(file_manager.discard, path),
    )
