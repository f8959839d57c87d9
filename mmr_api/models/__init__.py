"""API request and response models."""

from mmr_api.models.requests import AppendRequest, VerifyRequest
from mmr_api.models.responses import (
    HealthResponse,
    AppendResponse,
    RootResponse,
    PeaksResponse,
    NodeResponse,
    ProofResponse,
    VerifyResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "AppendRequest",
    "VerifyRequest",
    "HealthResponse",
    "AppendResponse",
    "RootResponse",
    "PeaksResponse",
    "NodeResponse",
    "ProofResponse",
    "VerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]
