"""
Module 01 - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    FATAL_ERROR_CODES,
    ErrorCodes,
    FieldElementException,
    IndexOutOfRangeException,
    InvalidDigestException,
    InvalidParentException,
    InvalidWidthException,
    MMRError,
    MMRException,
    NodeOverwriteException,
    NotALeafException,
    PeakCountMismatchException,
    PeakNotFoundException,
    RootMismatchException,
    SnapshotException,
    UnknownHasherException,
)

# Verification results
from .verification import (
    CheckResult,
    VerificationResult,
)

__all__ = [
    # Errors
    "FATAL_ERROR_CODES",
    "ErrorCodes",
    "FieldElementException",
    "IndexOutOfRangeException",
    "InvalidDigestException",
    "InvalidParentException",
    "InvalidWidthException",
    "MMRError",
    "MMRException",
    "NodeOverwriteException",
    "NotALeafException",
    "PeakCountMismatchException",
    "PeakNotFoundException",
    "RootMismatchException",
    "SnapshotException",
    "UnknownHasherException",
    # Verification
    "CheckResult",
    "VerificationResult",
]
