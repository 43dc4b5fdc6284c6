"""
API response models using Pydantic.
"""
from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    error: str = Field(
        description="One-line error message"
    )
    detail: Optional[Any] = Field(
        default=None,
        description="Extra context, e.g. the failing fields"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Area not found",
                "detail": None,
            }
        }


class HealthResponse(BaseModel):
    """Response model for health check endpoints."""
    status: str
    service: str
    version: Optional[str] = None


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Request body failed validation"},
    404: {"model": ErrorResponse, "description": "Entity not found"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}
