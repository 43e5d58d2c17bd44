"""
ffmpeg / ffprobe command construction.

Every builder returns an argument list for ``subprocess.run``; nothing here
goes through a shell, so user supplied values are never interpreted as shell
syntax.
"""

from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]

# Sample rate and channel layout preferred by speech-to-text models
TRANSCRIPTION_SAMPLE_RATE = 16000
TRANSCRIPTION_CHANNELS = 1

SEGMENT_PATTERN = "segment_%03d"

# Encoder used when extracting audio into a given container
AUDIO_CODECS = {
    "mp3": "libmp3lame",
    "aac": "aac",
    "m4a": "aac",
    "ogg": "libvorbis",
    "opus": "libopus",
    "flac": "flac",
    "wav": "pcm_s16le",
}


def _ffmpeg_base(ffmpeg_path: str, input_path: PathLike) -> List[str]:
    return [ffmpeg_path, "-hide_banner", "-nostdin", "-y", "-i", str(input_path)]


def transcription_command(ffmpeg_path: str, input_path: PathLike, output_path: PathLike) -> List[str]:
    """16 kHz mono FLAC."""
    return _ffmpeg_base(ffmpeg_path, input_path) + [
        "-ar", str(TRANSCRIPTION_SAMPLE_RATE),
        "-ac", str(TRANSCRIPTION_CHANNELS),
        "-c:a", "flac",
        str(output_path),
    ]


def custom_compression_command(
    ffmpeg_path: str,
    input_path: PathLike,
    output_path: PathLike,
    bitrate: Optional[str] = None,
    sample_rate: Optional[int] = None,
    channels: Optional[int] = None,
) -> List[str]:
    """Re-encode with whichever of bitrate, sample rate and channel count are given."""
    cmd = _ffmpeg_base(ffmpeg_path, input_path)
    if bitrate:
        cmd += ["-b:a", bitrate]
    if sample_rate:
        cmd += ["-ar", str(sample_rate)]
    if channels:
        cmd += ["-ac", str(channels)]
    cmd.append(str(output_path))
    return cmd


def conversion_command(ffmpeg_path: str, input_path: PathLike, output_path: PathLike) -> List[str]:
    """Let ffmpeg pick codecs from the output extension."""
    return _ffmpeg_base(ffmpeg_path, input_path) + [str(output_path)]


def audio_extraction_command(
    ffmpeg_path: str,
    input_path: PathLike,
    output_path: PathLike,
    bitrate: str,
    audio_format: str,
) -> List[str]:
    """Drop the video streams and encode the audio for ``audio_format``."""
    cmd = _ffmpeg_base(ffmpeg_path, input_path) + ["-vn"]
    codec = AUDIO_CODECS.get(audio_format.lower())
    if codec:
        cmd += ["-acodec", codec]
    cmd += ["-ab", bitrate, str(output_path)]
    return cmd


def split_command(
    ffmpeg_path: str,
    input_path: PathLike,
    output_dir: PathLike,
    segment_time: str,
    segment_format: str,
) -> List[str]:
    """Stream-copy the input into fixed-length numbered segments."""
    pattern = Path(output_dir) / f"{SEGMENT_PATTERN}.{segment_format}"
    return _ffmpeg_base(ffmpeg_path, input_path) + [
        "-f", "segment",
        "-segment_time", segment_time,
        "-c", "copy",
        str(pattern),
    ]


def probe_command(ffprobe_path: str, input_path: PathLike) -> List[str]:
    return [
        ffprobe_path,
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
