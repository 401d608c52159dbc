"""Configuration constants for the connection outreach automation."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_flag(env_var: str, default: bool = False) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _parse_timeout_seconds(env_var: str, default: float, *, minimum: float = 1) -> float:
    """Parse a timeout value in seconds from the environment with bounds."""

    try:
        value = float(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    return max(minimum, value)


DATA_DIR: Path = Path(os.getenv("OUTREACH_DATA_DIR", "data"))
LOG_DIR: Path = DATA_DIR / "logs"
LOG_FILE: Path = LOG_DIR / "latest.log"
SCREENSHOT_DIR: Path = DATA_DIR / "screenshots"
RUNS_DIR: Path = DATA_DIR / "runs"
EXPORTS_DIR: Path = DATA_DIR / "exports"
CONNECTIONS_FILE: Path = DATA_DIR / "connections.json"
LISTING_HTML_FILE: Path = DATA_DIR / "connections-page.html"

LOGIN_URL: str = os.getenv("OUTREACH_LOGIN_URL", "https://www.linkedin.com/login")
CONNECTIONS_URL: str = os.getenv(
    "OUTREACH_CONNECTIONS_URL",
    "https://www.linkedin.com/mynetwork/invite-connect/connections/",
)
# URL path prefixes, matched on whole path segments.
CHALLENGE_PATH_PREFIXES: tuple[str, ...] = ("/checkpoint", "/challenge")
LOGIN_PATH_PREFIXES: tuple[str, ...] = ("/login", "/uas/login", "/authwall")

# Visible browser, slowed actions and diagnostic captures.
DEBUG_MODE: bool = _env_flag("DEBUG_MODE")
DEBUG_SLOW_MO_MS: int = int(os.getenv("OUTREACH_DEBUG_SLOW_MO_MS", "1000"))

# Throttle between messages (seconds).
MIN_DELAY_SECONDS: float = float(os.getenv("OUTREACH_MIN_DELAY_SECONDS", "10"))
MAX_DELAY_SECONDS: float = float(os.getenv("OUTREACH_MAX_DELAY_SECONDS", "40"))

# Playwright timeouts (seconds)
NAV_TIMEOUT_SECONDS: float = _parse_timeout_seconds("OUTREACH_NAV_TIMEOUT_SECONDS", 60)
LOGIN_FIELD_TIMEOUT_SECONDS: float = _parse_timeout_seconds("OUTREACH_LOGIN_FIELD_TIMEOUT_SECONDS", 5)
LOGIN_CONFIRM_TIMEOUT_SECONDS: float = _parse_timeout_seconds(
    "OUTREACH_LOGIN_CONFIRM_TIMEOUT_SECONDS", 30
)
LIST_TIMEOUT_SECONDS: float = _parse_timeout_seconds("OUTREACH_LIST_TIMEOUT_SECONDS", 30)
CLICK_TIMEOUT_SECONDS: float = _parse_timeout_seconds("OUTREACH_CLICK_TIMEOUT_SECONDS", 5)
COMPOSER_TIMEOUT_SECONDS: float = _parse_timeout_seconds("OUTREACH_COMPOSER_TIMEOUT_SECONDS", 10)

# Incremental loading of the connections list.
SCROLL_STEP_PX: int = int(os.getenv("OUTREACH_SCROLL_STEP_PX", "100"))
SCROLL_INTERVAL_SECONDS: float = float(os.getenv("OUTREACH_SCROLL_INTERVAL_SECONDS", "0.1"))
SCROLL_MAX_SECONDS: float = float(os.getenv("OUTREACH_SCROLL_MAX_SECONDS", "30"))
# Re-measure document height after every step instead of once before the loop.
SCROLL_REFRESH_HEIGHT: bool = _env_flag("SCROLL_REFRESH_HEIGHT")

# Short sleeps (seconds) and typing pace
PROFILE_SETTLE_SECONDS: float = float(os.getenv("OUTREACH_PROFILE_SETTLE_SECONDS", "2"))
PRE_SEND_PAUSE_SECONDS: float = float(os.getenv("OUTREACH_PRE_SEND_PAUSE_SECONDS", "1"))
TYPE_DELAY_MS: int = int(os.getenv("OUTREACH_TYPE_DELAY_MS", "50"))

# "reuse" keeps one page for the whole batch, "new_page" opens one per profile.
PAGE_MODES: tuple[str, ...] = ("reuse", "new_page")
PAGE_MODE: str = os.getenv("OUTREACH_PAGE_MODE", "reuse").strip().lower() or "reuse"

NAME_PLACEHOLDER: str = "[Name]"
DEFAULT_MESSAGE_TEMPLATE: str = (
    "Hi [Name], I hope you're doing well! I'm currently exploring new opportunities "
    "in software engineering and wanted to reach out. If you're aware of any openings "
    "at your company, or could point me in the right direction, I'd really appreciate "
    "it. Thanks a lot in advance!"
)
MESSAGE_TEMPLATE: str = os.getenv("OUTREACH_MESSAGE_TEMPLATE", DEFAULT_MESSAGE_TEMPLATE)
MESSAGE_FILE: str = os.getenv("OUTREACH_MESSAGE_FILE", "").strip()

USER_AGENT: str = os.getenv(
    "OUTREACH_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
)
LOCALE: str = "en-US"

CREDENTIAL_ID_VARS: tuple[str, ...] = ("CREDENTIAL_ID", "LINKEDIN_EMAIL")
CREDENTIAL_SECRET_VARS: tuple[str, ...] = ("CREDENTIAL_SECRET", "LINKEDIN_PASSWORD")


@dataclass(frozen=True)
class Credentials:
    identifier: str
    secret: str

    def __repr__(self) -> str:
        return f"Credentials(identifier={self.identifier!r}, secret='***')"


def _first_env(names: tuple[str, ...]) -> str:
    for name in names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return ""


def load_credentials() -> Credentials:
    """Read credentials from the environment at call time (may be empty)."""

    return Credentials(
        identifier=_first_env(CREDENTIAL_ID_VARS),
        secret=_first_env(CREDENTIAL_SECRET_VARS),
    )


def load_message_template() -> str:
    """Return the message template, preferring ``MESSAGE_FILE`` when set."""

    if MESSAGE_FILE:
        content = Path(MESSAGE_FILE).read_text(encoding="utf-8").strip()
        if content:
            return content
    return MESSAGE_TEMPLATE
