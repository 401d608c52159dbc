from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from . import config
from .config import Credentials
from .error_codes import ErrorCode
from .errors import ConfigurationError
from .logging_utils import _outreach_event
from .utils import log_line

Entrypoint = Literal["cli", "ui", "replay", "tests"]


def _raise_config_error(
    message: str, *, entrypoint: Entrypoint, error: str, error_code: str = ErrorCode.CONFIG_INVALID
) -> None:
    _outreach_event(
        "error",
        phase="config",
        context="runtime_validation",
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ConfigurationError(message, error_code=error_code)


def validate_runtime_config(
    entrypoint: Entrypoint,
    *,
    credentials: Optional[Credentials] = None,
    require_credentials: bool = True,
) -> Credentials:
    """Validate runtime configuration for the given entrypoint.

    Returns the resolved credentials. Raises ``ConfigurationError`` when a
    blocking misconfiguration is detected; nothing here opens a browser.
    """

    creds = credentials if credentials is not None else config.load_credentials()

    if require_credentials:
        missing = []
        if not creds.identifier:
            missing.append("CREDENTIAL_ID")
        if not creds.secret:
            missing.append("CREDENTIAL_SECRET")
        if missing:
            _raise_config_error(
                f"Please set {' and '.join(missing)} environment variables.",
                entrypoint=entrypoint,
                error="credentials_missing",
                error_code=ErrorCode.CONFIG_MISSING,
            )

    if config.MIN_DELAY_SECONDS < 0 or config.MAX_DELAY_SECONDS < config.MIN_DELAY_SECONDS:
        _raise_config_error(
            "Delay bounds must satisfy 0 <= MIN_DELAY_SECONDS <= MAX_DELAY_SECONDS.",
            entrypoint=entrypoint,
            error="delay_bounds_invalid",
        )

    if config.PAGE_MODE not in config.PAGE_MODES:
        _raise_config_error(
            f"OUTREACH_PAGE_MODE must be one of {', '.join(config.PAGE_MODES)}.",
            entrypoint=entrypoint,
            error="page_mode_invalid",
        )

    if config.MESSAGE_FILE and not Path(config.MESSAGE_FILE).is_file():
        _raise_config_error(
            f"OUTREACH_MESSAGE_FILE {config.MESSAGE_FILE!r} does not exist.",
            entrypoint=entrypoint,
            error="message_file_missing",
        )

    if config.SCROLL_STEP_PX <= 0:
        _raise_config_error(
            "OUTREACH_SCROLL_STEP_PX must be greater than zero.",
            entrypoint=entrypoint,
            error="scroll_step_invalid",
        )

    timeout_fields = [
        ("NAV_TIMEOUT_SECONDS", config.NAV_TIMEOUT_SECONDS),
        ("LOGIN_FIELD_TIMEOUT_SECONDS", config.LOGIN_FIELD_TIMEOUT_SECONDS),
        ("LOGIN_CONFIRM_TIMEOUT_SECONDS", config.LOGIN_CONFIRM_TIMEOUT_SECONDS),
        ("LIST_TIMEOUT_SECONDS", config.LIST_TIMEOUT_SECONDS),
        ("CLICK_TIMEOUT_SECONDS", config.CLICK_TIMEOUT_SECONDS),
        ("COMPOSER_TIMEOUT_SECONDS", config.COMPOSER_TIMEOUT_SECONDS),
        ("SCROLL_MAX_SECONDS", config.SCROLL_MAX_SECONDS),
    ]

    for field_name, value in timeout_fields:
        if value <= 0:
            _raise_config_error(
                f"{field_name} must be greater than zero.",
                entrypoint=entrypoint,
                error="invalid_timeout",
            )

    return creds


__all__ = ["validate_runtime_config", "Entrypoint"]
