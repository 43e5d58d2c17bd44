"""Format conversion and audio extraction endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from ..dependencies import get_file_manager, get_transcoder, verify_api_key
from ..models.requests import AudioExtractionParams, ConversionParams
from ..services.exceptions import ToolError
from ..services.file_manager import FileManager
from ..services.transcoder import Transcoder
from .common import file_download, store_upload, tool_failure

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("/convert")
async def convert(
    file: Optional[UploadFile] = File(None, description="Media file to convert"),
    output_format: str = Form("mp3", alias="outputFormat"),
    transcoder: Transcoder = Depends(get_transcoder),
    file_manager: FileManager = Depends(get_file_manager),
):
    """Convert a file to ``outputFormat``; ffmpeg picks codecs from the extension."""
    params = ConversionParams(output_format=output_format)

    input_path, _ = await store_upload(file, file_manager)
    output_path = file_manager.new_output_path(params.output_format)

    try:
        await run_in_threadpool(transcoder.convert, input_path, output_path)
    except ToolError as e:
        file_manager.discard(output_path)
        raise tool_failure("CONVERSION_FAILED", "Conversion failed", e)
    finally:
        file_manager.discard(input_path)

    return file_download(
        output_path, f"converted.{params.output_format}", params.output_format, file_manager
    )


@router.post("/extract-audio")
async def extract_audio(
    file: Optional[UploadFile] = File(None, description="Video file"),
    audio_format: str = Form("mp3", alias="format"),
    bitrate: str = Form("192k"),
    transcoder: Transcoder = Depends(get_transcoder),
    file_manager: FileManager = Depends(get_file_manager),
):
    """Extract the audio track of a video."""
    params = AudioExtractionParams(format=audio_format, bitrate=bitrate)

    input_path, _ = await store_upload(file, file_manager)
    output_path = file_manager.new_output_path(params.format)

    try:
        await run_in_threadpool(
            transcoder.extract_audio, input_path, output_path, params.bitrate, params.format
        )
    except ToolError as e:
        file_manager.discard(output_path)
        raise tool_failure("EXTRACTION_FAILED", "Extraction failed", e)
    finally:
        file_manager.discard(input_path)

    return file_download(output_path, f"audio.{params.format}", params.format, file_manager)
