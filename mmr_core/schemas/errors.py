"""
Module 01 - Schemas
File: errors.py

Purpose: Standard error taxonomy for the MMR engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every exception here signals a violated precondition. They are raised
before any state is mutated and are never retryable: all engine
operations are deterministic.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Input Validation Errors
    INVALID_DIGEST = "INVALID_DIGEST"
    INVALID_FIELD_ELEMENT = "INVALID_FIELD_ELEMENT"
    UNKNOWN_HASHER = "UNKNOWN_HASHER"

    # Index Arithmetic Errors
    INVALID_WIDTH = "INVALID_WIDTH"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    NOT_A_LEAF = "NOT_A_LEAF"
    PEAK_NOT_FOUND = "PEAK_NOT_FOUND"

    # Commitment Errors
    PEAK_COUNT_MISMATCH = "PEAK_COUNT_MISMATCH"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Invariant Violations (fatal, unreachable in a correct index scheme)
    INVALID_PARENT = "INVALID_PARENT"
    NODE_OVERWRITE = "NODE_OVERWRITE"

    # Persistence Errors
    SNAPSHOT_INVALID = "SNAPSHOT_INVALID"


FATAL_ERROR_CODES: frozenset[str] = frozenset({
    ErrorCodes.INVALID_PARENT,
    ErrorCodes.NODE_OVERWRITE,
})


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MMRError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors between layers (engine, API, CLI) without
    exceptions, enabling structured error handling and serialization.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INDEX_OUT_OF_RANGE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MMRException":
        """Convert this error model to a raised exception."""
        return MMRException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MMRException(Exception):
    """
    Base exception for all MMR engine errors.

    This exception carries structured error information and can be
    converted to/from MMRError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MMR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    @property
    def is_fatal(self) -> bool:
        """True for invariant violations that indicate a corrupted index scheme."""
        return self.code in FATAL_ERROR_CODES

    def to_error_model(self) -> MMRError:
        """Convert this exception to an MMRError model."""
        return MMRError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidWidthException(MMRException):
    """Exception raised when a width (leaf count) is negative or otherwise unusable."""

    def __init__(self, width: int, message: str | None = None) -> None:
        super().__init__(
            message=message or f"Invalid width: {width}",
            code=ErrorCodes.INVALID_WIDTH,
            details={"width": width},
        )


class IndexOutOfRangeException(MMRException):
    """Exception raised when a node index falls outside the populated index space."""

    def __init__(
        self,
        index: int,
        size: int | None = None,
        message: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"index": index}
        if size is not None:
            details["size"] = size
        super().__init__(
            message=message or f"Index {index} out of range (size={size})",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=details,
        )


class NotALeafException(MMRException):
    """Exception raised when a leaf operation is requested for an internal node."""

    def __init__(self, index: int, height: int | None = None) -> None:
        details: dict[str, Any] = {"index": index}
        if height is not None:
            details["height"] = height
        super().__init__(
            message=f"Index {index} is not a leaf (height={height})",
            code=ErrorCodes.NOT_A_LEAF,
            details=details,
        )


class PeakNotFoundException(MMRException):
    """Exception raised when no peak covers an index at a given width."""

    def __init__(self, index: int, width: int) -> None:
        super().__init__(
            message=f"No peak covers index {index} at width {width}",
            code=ErrorCodes.PEAK_NOT_FOUND,
            details={"index": index, "width": width},
        )


class PeakCountMismatchException(MMRException):
    """Exception raised when a peak list does not match the popcount of width."""

    def __init__(self, width: int, expected: int, actual: int) -> None:
        super().__init__(
            message=(
                f"Received invalid number of peaks for width {width}: "
                f"expected {expected}, got {actual}"
            ),
            code=ErrorCodes.PEAK_COUNT_MISMATCH,
            details={"width": width, "expected": expected, "actual": actual},
        )


class InvalidParentException(MMRException):
    """Exception raised when children are requested for a node that has none."""

    def __init__(self, index: int) -> None:
        super().__init__(
            message=f"Index {index} is not a parent",
            code=ErrorCodes.INVALID_PARENT,
            details={"index": index},
        )


class NodeOverwriteException(MMRException):
    """Exception raised when a write targets an already populated node index."""

    def __init__(self, index: int) -> None:
        super().__init__(
            message=f"Node {index} is already populated",
            code=ErrorCodes.NODE_OVERWRITE,
            details={"index": index},
        )


class InvalidDigestException(MMRException):
    """Exception raised when a value digest is not exactly 32 bytes."""

    def __init__(self, length: int) -> None:
        super().__init__(
            message=f"Digest must be 32 bytes, got {length}",
            code=ErrorCodes.INVALID_DIGEST,
            details={"length": length},
        )


class FieldElementException(MMRException):
    """Exception raised when bytes do not encode a canonical field element."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_FIELD_ELEMENT,
            details=details,
        )


class RootMismatchException(MMRException):
    """Exception raised when peaks do not bag to the claimed root."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            message=f"Peaks bag to {actual}, expected root {expected}",
            code=ErrorCodes.ROOT_MISMATCH,
            details={"expected": expected, "actual": actual},
        )


class UnknownHasherException(MMRException):
    """Exception raised when a hash backend name is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(
            message=f"Unknown hasher backend: {name!r}",
            code=ErrorCodes.UNKNOWN_HASHER,
            details={"name": name, "available": available},
        )


class SnapshotException(MMRException):
    """Exception raised when a tree snapshot cannot be trusted or parsed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.SNAPSHOT_INVALID,
            details=details,
        )
