"""Exception types raised at the outreach run boundaries."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .error_codes import ErrorCode

if TYPE_CHECKING:  # pragma: no cover
    from .models import RunResult


class OutreachError(Exception):
    error_code: str = ErrorCode.INTERNAL

    def __init__(self, message: str, *, error_code: str | None = None) -> None:
        super().__init__(message)
        if error_code is not None:
            self.error_code = error_code

    def __str__(self) -> str:  # pragma: no cover - inherited behaviour
        return str(self.args[0]) if self.args else ""


class ConfigurationError(OutreachError, ValueError):
    """Blocking misconfiguration detected before any session is opened."""

    error_code = ErrorCode.CONFIG_INVALID


class SelectorNotFound(OutreachError):
    """A single locator candidate did not resolve."""

    error_code = ErrorCode.SELECTOR_NOT_FOUND

    def __init__(self, selector: str, message: str | None = None) -> None:
        super().__init__(message or f"selector {selector!r} not found")
        self.selector = selector


class AllCandidatesFailed(OutreachError):
    """Every candidate of a probe failed."""

    error_code = ErrorCode.ALL_CANDIDATES_FAILED

    def __init__(self, label: str, tried: Sequence[str]) -> None:
        super().__init__(f"no candidate matched for {label} (tried {len(tried)})")
        self.label = label
        self.tried = tuple(tried)


class FatalRunError(OutreachError):
    """Run-level failure that must stop the batch and surface to the operator."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        partial_result: Optional["RunResult"] = None,
    ) -> None:
        super().__init__(message, error_code=error_code)
        self.partial_result = partial_result


class ChallengeDetected(FatalRunError):
    """The target redirected to a verification / challenge page."""

    error_code = ErrorCode.CHALLENGE_DETECTED


class SessionLost(FatalRunError):
    """The authenticated session is gone (logged out or page closed)."""

    error_code = ErrorCode.SESSION_LOST


__all__ = [
    "OutreachError",
    "ConfigurationError",
    "SelectorNotFound",
    "AllCandidatesFailed",
    "FatalRunError",
    "ChallengeDetected",
    "SessionLost",
]
