"""Transcoding service that wraps the ffmpeg and ffprobe binaries."""

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core import commands
from ..models.config import APIConfig
from .exceptions import ProbeParseError, ToolError, ToolTimeoutError

logger = logging.getLogger(__name__)


class Transcoder:
    """Runs ffmpeg/ffprobe for the API routes.

    Every method blocks until the tool exits; routes call them from the
    threadpool.
    """

    def __init__(self, config: APIConfig):
        self.config = config
        self.ffmpeg_path = config.ffmpeg_path
        self.ffprobe_path = config.ffprobe_path
        self.timeout = config.processing_timeout_seconds

    def _run(self, cmd: List[str]) -> subprocess.CompletedProcess:
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error("%s timed out after %ss", cmd[0], self.timeout)
            raise ToolTimeoutError(self.timeout, command=cmd)
        except OSError as e:
            logger.error("Could not start %s: %s", cmd[0], e)
            raise ToolError(f"Could not start {cmd[0]}: {e}", command=cmd)

        if result.returncode != 0:
            details = result.stderr.strip() or f"{cmd[0]} exited with status {result.returncode}"
            logger.error("%s failed (exit %s): %s", cmd[0], result.returncode, details)
            raise ToolError(details, command=cmd, return_code=result.returncode)

        return result

    def compress_for_transcription(self, input_path: Path, output_path: Path) -> Path:
        self._run(commands.transcription_command(self.ffmpeg_path, input_path, output_path))
        return output_path

    def compress_custom(
        self,
        input_path: Path,
        output_path: Path,
        bitrate: Optional[str] = None,
        sample_rate: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> Path:
        self._run(commands.custom_compression_command(
            self.ffmpeg_path, input_path, output_path,
            bitrate=bitrate, sample_rate=sample_rate, channels=channels,
        ))
        return output_path

    def convert(self, input_path: Path, output_path: Path) -> Path:
        self._run(commands.conversion_command(self.ffmpeg_path, input_path, output_path))
        return output_path

    def extract_audio(self, input_path: Path, output_path: Path, bitrate: str, audio_format: str) -> Path:
        self._run(commands.audio_extraction_command(
            self.ffmpeg_path, input_path, output_path, bitrate, audio_format,
        ))
        return output_path

    def split(self, input_path: Path, output_dir: Path, segment_time: str, segment_format: str) -> List[Path]:
        """
        Split a file into fixed-length segments.

        Returns:
            The segment files written to ``output_dir``, sorted by name
        """
        self._run(commands.split_command(
            self.ffmpeg_path, input_path, output_dir, segment_time, segment_format,
        ))
        return sorted(p for p in output_dir.iterdir() if p.is_file())

    def probe(self, input_path: Path) -> Dict[str, Any]:
        """Return ffprobe's format and stream report as a dict."""
        result = self._run(commands.probe_command(self.ffprobe_path, input_path))
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ProbeParseError(f"ffprobe returned invalid JSON: {e}") from e
