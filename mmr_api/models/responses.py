"""
Module 09D - API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "mountain-range-api"
    version: str = "v1"
    hasher: str = Field(..., description="Configured hash backend")


class AppendResponse(BaseModel):
    """Response for POST /append endpoint."""

    ok: bool = True
    leaf_index: int = Field(..., description="Flat index assigned to the new leaf")
    width: int = Field(..., description="Leaf count after the append")
    size: int = Field(..., description="Node count after the append")
    root: str = Field(..., description="Root after the append")


class RootResponse(BaseModel):
    """Response for GET /root endpoint."""

    root: str = Field(..., description="Current root (zero hash when empty)")
    width: int
    size: int


class PeaksResponse(BaseModel):
    """Response for GET /peaks endpoint."""

    width: int
    peak_indexes: list[int] = Field(default_factory=list)
    peaks: list[str] = Field(default_factory=list, description="Tallest mountain first")


class NodeResponse(BaseModel):
    """Response for GET /nodes/{index} endpoint."""

    index: int
    hash: str = Field(..., description="Stored hash, zero hash when absent")
    present: bool = Field(..., description="Whether the node is materialized")


class ProofResponse(BaseModel):
    """Response for GET /proofs/{leaf_index} endpoint."""

    root: str
    width: int
    leaf_index: int
    peak_bag: list[str] = Field(default_factory=list)
    siblings: list[str] = Field(default_factory=list)


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = Field(..., description="Whether the proof authenticates the leaf")
    checks: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
