"""
Pydantic schemas for API request/response models.

Provides validation and serialization for API data.

Author: Blessing Ajala - Software Engineer
GitHub: https://github.com/Oyelamin
LinkedIn: https://www.linkedin.com/in/blessphp/
Twitter: @Blessin06147308
"""

from typing import Dict

from pydantic import BaseModel, Field, StrictStr, field_validator

AVAILABLE_ENDPOINTS: Dict[str, str] = {
    "health": "GET /",
    "query": "POST /query",
}

QUERY_EXAMPLE: Dict[str, str] = {"query": "What is the top ranked company?"}


class QueryRequest(BaseModel):
    """Request model for query endpoint."""

    query: StrictStr = Field(..., description="User query string")

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        """Reject blank queries; the text itself is passed on untouched."""
        if not v.strip():
            raise ValueError("Query must not be empty")
        return v


class QueryResponse(BaseModel):
    """Response model for a successful query."""

    success: bool = True
    answer: str
    timestamp: str


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = "healthy"
    timestamp: str


class RootResponse(BaseModel):
    """Response model for the API info endpoint."""

    status: str = "ok"
    message: str
    endpoints: Dict[str, str]
    version: str


class ValidationErrorResponse(BaseModel):
    """Returned when the query body is invalid."""

    error: str = "Invalid request"
    message: str = "Query is required and must be a non-empty string"
    example: Dict[str, str] = Field(default_factory=lambda: dict(QUERY_EXAMPLE))


class DataUnavailableResponse(BaseModel):
    """Returned when the rank data could not be loaded."""

    error: str = "Data unavailable"
    message: str


class ProcessingErrorResponse(BaseModel):
    """Returned when the assistant could not answer."""

    success: bool = False
    error: str = "Processing failed"
    message: str
    timestamp: str


class NotFoundResponse(BaseModel):
    """Returned for unknown routes."""

    error: str = "Not Found"
    message: str
    available_endpoints: Dict[str, str] = Field(
        default_factory=lambda: dict(AVAILABLE_ENDPOINTS),
        serialization_alias="availableEndpoints"
    )
