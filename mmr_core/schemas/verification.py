"""
Module 01 - Schemas
File: verification.py

Purpose: Report format for inclusion proof verification.

The verifier walks a fixed sequence of steps (size_bound, leaf_position,
peak_bagging, target_peak, path_length, peak_hash) and stops at the first
one that fails, so a report holds zero or more passed checks followed by
at most one failed check. Malformed input is reported as a failed
``proof_format`` check with ``error`` set.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import MMRError


class CheckResult(BaseModel):
    """Outcome of one verification step."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., min_length=1, description="Verification step name")
    ok: bool
    message: str = ""
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=True, message=message, details=details or {})

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, message=message, details=details or {})


class VerificationResult(BaseModel):
    """Checks performed for one proof, in order."""

    model_config = ConfigDict(extra="forbid")

    ok: bool = True
    checks: list[CheckResult] = Field(default_factory=list)
    error: MMRError | None = Field(
        default=None,
        description="Set when the proof could not be decoded",
    )

    @property
    def failed_check(self) -> CheckResult | None:
        """The step that rejected the proof, if any."""
        return next((check for check in self.checks if not check.ok), None)

    def get_error_messages(self) -> list[str]:
        return [check.message for check in self.checks if not check.ok]

    def add_check(self, check: CheckResult) -> None:
        self.checks.append(check)
        if not check.ok:
            self.ok = False
