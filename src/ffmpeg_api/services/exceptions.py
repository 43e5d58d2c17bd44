"""Exceptions raised by the API services."""

from typing import List, Optional


class ServiceError(Exception):
    """Base class for service errors."""


class UploadTooLargeError(ServiceError):
    """The uploaded file exceeded the configured size limit."""

    def __init__(self, limit_bytes: int, received_bytes: int):
        self.limit_bytes = limit_bytes
        self.received_bytes = received_bytes
        super().__init__(
            f"Upload of at least {received_bytes} bytes exceeds the limit of {limit_bytes} bytes"
        )


class ToolError(ServiceError):
    """ffmpeg or ffprobe failed.

    ``details`` is the tool's stderr when it produced any, so callers can relay
    it verbatim.
    """

    def __init__(self, details: str, command: Optional[List[str]] = None, return_code: Optional[int] = None):
        self.details = details
        self.command = command
        self.return_code = return_code
        super().__init__(details)


class ToolTimeoutError(ToolError):
    """The tool did not finish within the processing timeout."""

    def __init__(self, timeout_seconds: int, command: Optional[List[str]] = None):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Processing timed out after {timeout_seconds} seconds", command=command)


class ProbeParseError(ServiceError):
    """ffprobe succeeded but did not print valid JSON."""
