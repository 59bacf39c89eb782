"""Shared request and response models for API endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class PathRequest(BaseModel):
    """Request body naming a single path.

    Attributes:
        path: Target path on the served filesystem.
    """

    path: str = Field(..., min_length=1, description="Target path")


class WriteFileRequest(PathRequest):
    """Request body for writing a text file.

    Attributes:
        path: File to create or overwrite.
        content: New UTF-8 text content.
    """

    content: str = Field(default="", description="Text content to write")


class ReadFileResponse(BaseModel):
    content: str


class SuccessResponse(BaseModel):
    """Acknowledgement of a completed write, mkdir or delete."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Standard error response model.

    Attributes:
        error: Human-readable error message.
        type: Error kind (e.g. ``not_found``, ``access_denied``).
        details: Optional structured context.
    """

    error: str
    type: Optional[str] = None
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    status: str = "healthy"
    root: Optional[str] = None
