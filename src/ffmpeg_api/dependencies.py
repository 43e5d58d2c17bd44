"""FastAPI dependencies shared by the routers."""

import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException

from .models.config import APIConfig
from .models.responses import error_detail
from .services.file_manager import FileManager
from .services.transcoder import Transcoder


def get_config() -> APIConfig:
    """Get API configuration."""
    return APIConfig.from_env()


def get_transcoder(config: APIConfig = Depends(get_config)) -> Transcoder:
    """Get transcoder instance."""
    return Transcoder(config)


def get_file_manager(config: APIConfig = Depends(get_config)) -> FileManager:
    """Get file manager instance."""
    return FileManager(config)


def verify_api_key(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
    config: APIConfig = Depends(get_config),
) -> None:
    """Reject the request unless it carries the configured shared secret."""
    if not config.api_key:
        return

    if x_api_key is None or not secrets.compare_digest(
        x_api_key.encode("utf-8"), config.api_key.encode("utf-8")
    ):
        raise HTTPException(
            status_code=401,
            detail=error_detail(
                "UNAUTHORIZED",
                "Invalid or missing API key",
                "Provide the shared secret in the X-API-Key header",
            ),
        )
