"""Request models for the API.

FastAPI receives these values as multipart form fields; the routes build the
models from them so that every parameter is validated before ffmpeg runs.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


FORMAT_PATTERN = r"^[A-Za-z0-9]{1,10}$"
BITRATE_PATTERN = r"^\d+(\.\d+)?[kKmM]?$"
SECONDS_PATTERN = r"^\d+(\.\d+)?$"


class CustomCompressionParams(BaseModel):
    """Parameters for /compress/custom. Unset values omit the ffmpeg flag."""
    format: str = Field(default="mp3", pattern=FORMAT_PATTERN)
    bitrate: Optional[str] = Field(default="128k", pattern=BITRATE_PATTERN)
    sample_rate: Optional[int] = Field(default=44100, ge=1, le=384000)
    channels: Optional[int] = Field(default=2, ge=1, le=8)

    @field_validator("bitrate", "sample_rate", "channels", mode="before")
    @classmethod
    def blank_as_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ConversionParams(BaseModel):
    """Parameters for /convert."""
    output_format: str = Field(default="mp3", pattern=FORMAT_PATTERN)


class AudioExtractionParams(BaseModel):
    """Parameters for /extract-audio."""
    format: str = Field(default="mp3", pattern=FORMAT_PATTERN)
    bitrate: str = Field(default="192k", pattern=BITRATE_PATTERN)


class SplitParams(BaseModel):
    """Parameters for /split."""
    segment_time: str = Field(default="600", pattern=SECONDS_PATTERN)
    format: str = Field(default="mp3", pattern=FORMAT_PATTERN)

    @field_validator("segment_time")
    @classmethod
    def positive(cls, value: str) -> str:
        if float(value) <= 0:
            raise ValueError("segment time must be greater than zero")
        return value
