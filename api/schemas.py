"""Pydantic schemas specific to the HTTP facade."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    base_url: str = ""
    history_size: int = 0
    version: str = "1.0.0"


class ErrorResponse(BaseModel):
    """Error body returned for failed requests."""

    message: str
    code: str = Field("UNKNOWN_ERROR", examples=["NOT_FOUND"])
