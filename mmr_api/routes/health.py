"""
Module 09D - Health Check Route

Liveness endpoint. Reports the hash backend the served tree is configured
with, so a client can tell which verifier settings match this service.
"""

from fastapi import APIRouter

from mmr_api.deps import get_config
from mmr_api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/", response_model=HealthResponse)
@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse(hasher=get_config().hasher.backend)
