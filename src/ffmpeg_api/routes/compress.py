"""Compression endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from ..dependencies import get_file_manager, get_transcoder, verify_api_key
from ..models.requests import CustomCompressionParams
from ..services.exceptions import ToolError
from ..services.file_manager import FileManager
from ..services.transcoder import Transcoder
from .common import file_download, store_upload, tool_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compress", dependencies=[Depends(verify_api_key)])


def compression_ratio(original_size: int, compressed_size: int) -> str:
    """Percentage saved, e.g. ``"62.50%"``."""
    if original_size <= 0:
        return "0.00%"
    return f"{(1 - compressed_size / original_size) * 100:.2f}%"


@router.post("/transcription")
async def compress_for_transcription(
    file: Optional[UploadFile] = File(None, description="Audio or video file"),
    transcoder: Transcoder = Depends(get_transcoder),
    file_manager: FileManager = Depends(get_file_manager),
):
    """
    Compress audio for speech-to-text.

    Produces 16 kHz mono FLAC, the input format Whisper-style models expect,
    and reports the size reduction in response headers.
    """
    input_path, original_size = await store_upload(file, file_manager)
    output_path = file_manager.new_output_path("flac")

    try:
        await run_in_threadpool(transcoder.compress_for_transcription, input_path, output_path)
    except ToolError as e:
        file_manager.discard(output_path)
        raise tool_failure("COMPRESSION_FAILED", "Compression failed", e)
    finally:
        file_manager.discard(input_path)

    compressed_size = output_path.stat().st_size
    logger.info("Compressed %s bytes to %s bytes for transcription", original_size, compressed_size)

    return file_download(
        output_path,
        "compressed.flac",
        "flac",
        file_manager,
        headers={
            "X-Original-Size": str(original_size),
            "X-Compressed-Size": str(compressed_size),
            "X-Compression-Ratio": compression_ratio(original_size, compressed_size),
        },
    )


@router.post("/custom")
async def compress_custom(
    file: Optional[UploadFile] = File(None, description="Audio or video file"),
    audio_format: str = Form("mp3", alias="format"),
    bitrate: Optional[str] = Form("128k"),
    sample_rate: Optional[str] = Form("44100", alias="sampleRate"),
    channels: Optional[str] = Form("2"),
    transcoder: Transcoder = Depends(get_transcoder),
    file_manager: FileManager = Depends(get_file_manager),
):
    """
    Re-encode with caller supplied settings.

    Sending an empty value for ``bitrate``, ``sampleRate`` or ``channels``
    leaves that setting to ffmpeg.
    """
    params = CustomCompressionParams(
        format=audio_format,
        bitrate=bitrate,
        sample_rate=sample_rate,
        channels=channels,
    )

    input_path, _ = await store_upload(file, file_manager)
    output_path = file_manager.new_output_path(params.format)

    try:
        await run_in_threadpool(
            transcoder.compress_custom,
            input_path,
            output_path,
            bitrate=params.bitrate,
            sample_rate=params.sample_rate,
            channels=params.channels,
        )
    except ToolError as e:
        file_manager.discard(output_path)
        raise tool_failure("COMPRESSION_FAILED", "Compression failed", e)
    finally:
        file_manager.discard(input_path)

    return file_download(output_path, f"compressed.{params.format}", params.format, file_manager)
