"""Media inspection endpoint."""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from ..dependencies import get_file_manager, get_transcoder, verify_api_key
from ..models.responses import error_detail
from ..services.exceptions import ProbeParseError, ToolError
from ..services.file_manager import FileManager
from ..services.transcoder import Transcoder
from .common import store_upload, tool_failure

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("/info")
async def media_info(
    file: Optional[UploadFile] = File(None, description="Media file to inspect"),
    transcoder: Transcoder = Depends(get_transcoder),
    file_manager: FileManager = Depends(get_file_manager),
):
    """Return ffprobe's format and stream report for the upload."""
    input_path, _ = await store_upload(file, file_manager)

    try:
        return await run_in_threadpool(transcoder.probe, input_path)
    except ProbeParseError as e:
        raise HTTPException(
            status_code=500,
            detail=error_detail("PROBE_PARSE_FAILED", "Failed to parse file info", str(e)),
        )
    except ToolError as e:
        raise tool_failure("PROBE_FAILED", "Failed to get file info", e)
    finally:
        file_manager.discard(input_path)
