"""Segment splitting endpoint."""

import base64
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from ..dependencies import get_file_manager, get_transcoder, verify_api_key
from ..models.requests import SplitParams
from ..models.responses import SegmentInfo, SplitResponse
from ..services.exceptions import ToolError
from ..services.file_manager import FileManager
from ..services.transcoder import Transcoder
from .common import store_upload, tool_failure

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("/split", response_model=SplitResponse)
async def split(
    file: Optional[UploadFile] = File(None, description="Audio file to split"),
    segment_time: str = Form("600", alias="segmentTime"),
    segment_format: str = Form("mp3", alias="format"),
    transcoder: Transcoder = Depends(get_transcoder),
    file_manager: FileManager = Depends(get_file_manager),
):
    """
    Split a file into segments of ``segmentTime`` seconds.

    Streams are copied without re-encoding, so cut points fall on the nearest
    keyframe. Segments are returned inline as base64 in name order.
    """
    params = SplitParams(segment_time=segment_time, format=segment_format)

    input_path, _ = await store_upload(file, file_manager)
    output_dir = file_manager.new_output_dir()

    try:
        segment_paths = await run_in_threadpool(
            transcoder.split, input_path, output_dir, params.segment_time, params.format
        )

        segments = []
        for path in segment_paths:
            content = path.read_bytes()
            segments.append(SegmentInfo(
                filename=path.name,
                data=base64.b64encode(content).decode("ascii"),
                size=len(content),
            ))
    except ToolError as e:
        raise tool_failure("SPLIT_FAILED", "Split failed", e)
    finally:
        file_manager.discard(output_dir)
        file_manager.discard(input_path)

    return SplitResponse(
        total_segments=len(segments),
        segment_duration=f"{params.segment_time} seconds",
        segments=segments,
    )
