"""
Module 09D - API Request Models

Pydantic models for API request validation.
"""

from pydantic import BaseModel, Field


HEX32_PATTERN = r"^0x[0-9a-fA-F]{64}$"


class AppendRequest(BaseModel):
    """Request body for POST /append endpoint."""

    value: str = Field(
        ...,
        pattern=HEX32_PATTERN,
        description="32-byte value digest, 0x-prefixed hex",
    )


class VerifyRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    root: str = Field(..., pattern=HEX32_PATTERN, description="Claimed root")
    width: int = Field(..., ge=0, description="Leaf count the root commits to")
    leaf_index: int = Field(..., ge=1, description="Flat index of the leaf")
    value: str = Field(..., pattern=HEX32_PATTERN, description="Leaf value digest")
    peak_bag: list[str] = Field(
        default_factory=list,
        description="Peak hashes, tallest mountain first",
    )
    siblings: list[str] = Field(
        default_factory=list,
        description="Sibling hashes, leaf level first",
    )
    include_checks: bool = Field(
        default=False,
        description="Include per-step verification checks in the response",
    )
