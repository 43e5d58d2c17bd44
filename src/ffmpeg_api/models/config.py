"""Configuration models for the API."""

from typing import Optional
from pydantic import BaseModel, Field
import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class APIConfig(BaseModel):
    """API configuration settings."""

    # Server settings
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=3000, description="Port to bind to")

    # File management
    temp_dir: str = Field(default="/tmp/ffmpeg_api", description="Root of the uploads/ and outputs/ directories")
    cleanup_interval_seconds: int = Field(default=3600, description="Seconds between temp directory sweeps")
    file_ttl_seconds: int = Field(default=3600, description="Age after which a sweep removes a temp file")

    # Processing limits
    max_upload_bytes: int = Field(default=500 * 1024 * 1024, description="Maximum upload size in bytes")
    processing_timeout_seconds: int = Field(default=1800, description="ffmpeg/ffprobe timeout in seconds")

    # External tools
    ffmpeg_path: str = Field(default="ffmpeg", description="ffmpeg executable")
    ffprobe_path: str = Field(default="ffprobe", description="ffprobe executable")

    # Security
    api_key: Optional[str] = Field(default=None, description="Shared secret expected in X-API-Key")
    cors_origins: list = Field(default=["*"], description="CORS allowed origins")

    # Diagnostics
    log_level: str = Field(default="INFO", description="Root log level")
    debug: bool = Field(default=False, description="Expose unexpected error details")

    @property
    def uploads_dir(self) -> str:
        return os.path.join(self.temp_dir, "uploads")

    @property
    def outputs_dir(self) -> str:
        return os.path.join(self.temp_dir, "outputs")

    @property
    def max_upload_mb(self) -> float:
        return self.max_upload_bytes / (1024 * 1024)

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Create config from environment variables."""
        return cls(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", os.getenv("PORT", "3000"))),
            temp_dir=os.getenv("TEMP_DIR", "/tmp/ffmpeg_api"),
            cleanup_interval_seconds=int(os.getenv("CLEANUP_INTERVAL_SECONDS", "3600")),
            file_ttl_seconds=int(os.getenv("FILE_TTL_SECONDS", "3600")),
            max_upload_bytes=int(float(os.getenv("MAX_FILE_SIZE_MB", "500")) * 1024 * 1024),
            processing_timeout_seconds=int(os.getenv("PROCESSING_TIMEOUT_SECONDS", "1800")),
            ffmpeg_path=os.getenv("FFMPEG_PATH", "ffmpeg"),
            ffprobe_path=os.getenv("FFPROBE_PATH", "ffprobe"),
            api_key=os.getenv("API_KEY") or None,
            cors_origins=os.getenv("CORS_ORIGINS", "*").split(","),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            debug=_env_flag("DEBUG"),
        )
