"""Credential login driven by selector fallbacks.

States::

    INIT -> FORM_LOCATED -> SUBMITTED -> CONFIRMED
                                      -> CHALLENGE
    (any) -> FAILED

A challenge / checkpoint redirect always wins over a confirmed login: the run
cannot continue without a human solving it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import urllib.parse

from . import config
from .browser import safe_goto, screenshot
from .config import Credentials
from .error_codes import ErrorCode
from .errors import ChallengeDetected, SessionLost
from .logging_utils import _outreach_event
from .probe import click, probe, wait_for
from .selectors import LOGIN_SELECTORS, LoginSelectors
from .utils import log_line


class AuthState(str, Enum):
    INIT = "init"
    FORM_LOCATED = "form_located"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    CHALLENGE = "challenge"
    FAILED = "failed"


@dataclass
class AuthResult:
    state: AuthState = AuthState.INIT
    error_code: Optional[str] = None
    matched: Dict[str, str] = field(default_factory=dict)
    snapshot: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.state is AuthState.CONFIRMED

    def __bool__(self) -> bool:
        return self.ok


def _path_has_prefix(url: str, prefixes: Tuple[str, ...]) -> bool:
    path = urllib.parse.urlparse(url or "").path.lower().rstrip("/")
    return any(path == prefix or path.startswith(prefix + "/") for prefix in prefixes)


def is_challenge_url(url: str) -> bool:
    """``True`` for verification pages such as ``/checkpoint/challenge/...``."""

    return _path_has_prefix(url, config.CHALLENGE_PATH_PREFIXES)


def is_login_url(url: str) -> bool:
    return _path_has_prefix(url, config.LOGIN_PATH_PREFIXES)


def _transition(result: AuthResult, state: AuthState, **fields: Any) -> None:
    _outreach_event("auth", previous=result.state.value, state=state.value, **fields)
    result.state = state


def _fail(
    page: Any, result: AuthResult, *, reason: str, snapshot_name: str, error_code: str
) -> AuthResult:
    log_line(f"[AUTH] Login failed: {reason}")
    result.error_code = error_code
    result.snapshot = screenshot(page, snapshot_name)
    _transition(
        result,
        AuthState.CHALLENGE if error_code == ErrorCode.CHALLENGE_DETECTED else AuthState.FAILED,
        reason=reason,
    )
    return result


def login(
    page: Any,
    credentials: Credentials,
    *,
    selectors: LoginSelectors = LOGIN_SELECTORS,
    login_url: Optional[str] = None,
    debug: Optional[bool] = None,
) -> AuthResult:
    """Log in with ``credentials``; returns an ``AuthResult`` and never raises
    for expected failures (missing form, rejected credentials, challenge)."""

    debug = config.DEBUG_MODE if debug is None else debug
    result = AuthResult()
    field_timeout = int(config.LOGIN_FIELD_TIMEOUT_SECONDS * 1000)

    try:
        log_line("[AUTH] Attempting to log in...")
        if not safe_goto(page, login_url or config.LOGIN_URL, label="login"):
            return _fail(
                page,
                result,
                reason="login page did not load",
                snapshot_name="login-page-not-loaded",
                error_code=ErrorCode.NAVIGATION,
            )
        if debug:
            screenshot(page, "login-page")

        username = probe(
            selectors.username_inputs, wait_for(page), label="login_username", timeout_ms=field_timeout
        )
        password = probe(
            selectors.password_inputs, wait_for(page), label="login_password", timeout_ms=field_timeout
        )
        if not username or not password:
            return _fail(
                page,
                result,
                reason="could not find login form elements",
                snapshot_name="login-form-not-found",
                error_code=ErrorCode.ALL_CANDIDATES_FAILED,
            )
        result.matched["username"] = username.selector or ""
        result.matched["password"] = password.selector or ""
        _transition(result, AuthState.FORM_LOCATED)

        username.value.fill(credentials.identifier)
        password.value.fill(credentials.secret)

        submit = probe(
            selectors.submit_buttons, click(page), label="login_submit", timeout_ms=field_timeout
        )
        if not submit:
            return _fail(
                page,
                result,
                reason="could not find submit button",
                snapshot_name="submit-button-not-found",
                error_code=ErrorCode.ALL_CANDIDATES_FAILED,
            )
        result.matched["submit"] = submit.selector or ""
        _transition(result, AuthState.SUBMITTED)

        if is_challenge_url(page.url):
            return _fail(
                page,
                result,
                reason="additional verification required (captcha/2FA)",
                snapshot_name="login-verification-required",
                error_code=ErrorCode.CHALLENGE_DETECTED,
            )

        indicator = probe(
            selectors.logged_in_indicators,
            wait_for(page),
            label="login_confirm",
            timeout_ms=int(config.LOGIN_CONFIRM_TIMEOUT_SECONDS * 1000),
        )

        if is_challenge_url(page.url):
            return _fail(
                page,
                result,
                reason="additional verification required (captcha/2FA)",
                snapshot_name="login-verification-required",
                error_code=ErrorCode.CHALLENGE_DETECTED,
            )
        if not indicator:
            return _fail(
                page,
                result,
                reason="success indicators not found",
                snapshot_name="login-failed",
                error_code=ErrorCode.AUTH_FAILED,
            )

        result.matched["indicator"] = indicator.selector or ""
        _transition(result, AuthState.CONFIRMED)
        log_line("[AUTH] Successfully logged in.")
        return result
    except Exception as exc:  # noqa: BLE001
        return _fail(
            page,
            result,
            reason=f"login error: {exc}",
            snapshot_name="login-error",
            error_code=ErrorCode.INTERNAL,
        )


def ensure_session(page: Any) -> None:
    """Raise when the authenticated session is no longer usable."""

    if page.is_closed():
        raise SessionLost("browser page was closed")
    url = page.url or ""
    if is_challenge_url(url):
        raise ChallengeDetected(f"verification required at {url}")
    if is_login_url(url):
        raise SessionLost(f"session redirected to login at {url}")


__all__ = ["AuthState", "AuthResult", "login", "ensure_session", "is_challenge_url", "is_login_url"]
