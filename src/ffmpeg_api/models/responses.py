"""Response models for the API."""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


class SegmentInfo(BaseModel):
    """One segment produced by /split."""
    filename: str
    data: str  # base64
    size: int


class SplitResponse(BaseModel):
    """Response from the split endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    total_segments: int = Field(alias="totalSegments")
    segment_duration: str = Field(alias="segmentDuration")
    segments: List[SegmentInfo]


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = False
    error: Dict[str, Any]
    timestamp: datetime


def error_detail(code: str, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    """Build the structured ``detail`` carried by an HTTPException."""
    return {"code": code, "message": message, "details": details}
