"""
Benefícios API: Pydantic Response Schemas
==========================================

What:  Pydantic models describing what the API returns.
Why:   Serialization of driver results and OpenAPI doc generation.
How:   Services build these from Motor result objects; routes declare them
       as response models.

Benefit records themselves are returned as plain dicts: the collection is
schemaless and the API hands back whatever fields were stored.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Write Results (mirrors of the driver's result objects)
# ══════════════════════════════════════════════════════════════════════════


class InsertResult(BaseModel):
    """Returned by POST /api/beneficios with HTTP 201."""
    acknowledged: bool = Field(description="Write acknowledged by the server")
    inserted_id: str = Field(description="Identifier assigned to the new benefit")


class UpdateResult(BaseModel):
    """Returned by PUT /api/beneficios with HTTP 202."""
    acknowledged: bool
    matched_count: int = Field(description="Records matching the identifier (0 or 1)")
    modified_count: int = Field(description="Records actually changed (0 or 1)")
    upserted_id: Optional[str] = Field(default=None, description="Always null: updates never upsert")


class DeleteResult(BaseModel):
    """Returned by DELETE /api/beneficios/{id} with HTTP 200."""
    acknowledged: bool
    deleted_count: int = Field(description="Records removed (always 1 on success)")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorDetail(BaseModel):
    """
    One failure item.

    For validation errors `param` is the field path and `value` the rejected
    value; for storage errors `param` is the route pattern and `value` the
    driver's message.
    """
    value: Any = Field(default=None, description="Rejected value or failure detail")
    msg: str = Field(description="Human-readable message (Portuguese)")
    param: str = Field(description="Field path or route pattern")


class ErrorResponse(BaseModel):
    """
    Envelope shared by every error response.

    Example:
        {
            "error": "not_found",
            "message": "Erro ao excluir o benefício",
            "errors": [{"value": "Não há nenhum benefício com o id 665f...",
                        "msg": "Erro ao excluir o benefício", "param": "/:id"}],
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: List[ErrorDetail] = Field(default_factory=list)
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


# ══════════════════════════════════════════════════════════════════════════
# Service Status
# ══════════════════════════════════════════════════════════════════════════


class StatusResponse(BaseModel):
    """Static payload of GET /api."""
    message: str
    version: str


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and container health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MongoDB connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
