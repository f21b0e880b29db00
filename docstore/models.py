"""
Pydantic models for request/response validation.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


# ============================================================================
# Document Models
# ============================================================================

class OperationResult(BaseModel):
    """Acknowledgement for mutating operations."""

    status: str = Field(..., examples=["ok"])
    message: str = Field(..., examples=["Value set", "File written"])


class DocumentList(BaseModel):
    """IDs of all stored documents."""

    count: int
    documents: List[str]


# ============================================================================
# Audit Log Models
# ============================================================================

class LogEntryModel(BaseModel):
    """One audit log entry."""

    message: str
    is_error: bool
    timestamp: int = Field(..., description="Milliseconds since epoch")


class LogListing(BaseModel):
    """Audit log contents in append order."""

    count: int
    entries: List[LogEntryModel]


# ============================================================================
# Health Check Models
# ============================================================================

class HealthStatus(BaseModel):
    """Health check response."""

    status: str = Field(..., examples=["healthy", "unhealthy"])
    version: str
    storage: str = Field(..., examples=["available", "unavailable"])
    uptime_seconds: float
    timestamp: datetime


class ServerStatus(BaseModel):
    """Legacy status payload."""

    up: bool
    owner: str
    timestamp: int
