"""Playwright session helpers shared by the login, scrape and messaging steps."""
from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from playwright.sync_api import (
    Error as PWError,
    Page,
    TimeoutError as PWTimeout,
    sync_playwright,
)

from . import config
from .logging_utils import _outreach_event
from .probe import is_target_closed_error
from .utils import log_line, sanitize_filename


@contextmanager
def open_session(*, debug: Optional[bool] = None) -> Iterator[Page]:
    """Launch Chromium and yield a page; the browser is always closed on exit.

    Debug mode runs a visible browser with ``slow_mo`` so an operator can
    follow the automation.
    """

    debug = config.DEBUG_MODE if debug is None else debug
    with sync_playwright() as pw:
        browser = pw.chromium.launch(
            headless=not debug,
            slow_mo=config.DEBUG_SLOW_MO_MS if debug else 0,
        )
        context = browser.new_context(user_agent=config.USER_AGENT, locale=config.LOCALE)
        context.set_default_navigation_timeout(config.NAV_TIMEOUT_SECONDS * 1000)
        _outreach_event("session", step="launch", headless=not debug)
        try:
            yield context.new_page()
        finally:
            try:
                context.close()
                browser.close()
            except Exception as exc:  # noqa: BLE001
                log_line(f"[SESSION][WARN] Error closing browser: {exc}")
            _outreach_event("session", step="closed")


def safe_goto(page: Page, url: str, *, label: str, wait_until: str = "networkidle") -> bool:
    """Navigate to ``url`` with bounded timeouts and structured logging."""

    try:
        _outreach_event("nav", step="goto", label=label, url=url)
        page.goto(url, wait_until=wait_until, timeout=config.NAV_TIMEOUT_SECONDS * 1000)
        return True
    except PWTimeout as exc:
        log_line(f"[OUTREACH][ERROR][NAV] goto({url!r}) timed out: {exc}")
        _outreach_event("error", phase="nav", step="goto_timeout", label=label, url=url)
        return False
    except PWError as exc:
        if is_target_closed_error(exc):
            raise
        log_line(f"[OUTREACH][ERROR][NAV] goto({url!r}) failed: {exc}")
        _outreach_event("error", phase="nav", step="goto_error", label=label, url=url)
        return False


def screenshot(page: Any, name: str) -> Optional[Path]:
    """Save a full-page screenshot under SCREENSHOT_DIR; never raises."""

    stem = sanitize_filename(name[:-4] if name.lower().endswith(".png") else name)
    path = config.SCREENSHOT_DIR / f"{stem}.png"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        page.screenshot(path=str(path), full_page=True)
        log_line(f"Saved debug screenshot -> {path}")
        return path
    except Exception as exc:  # noqa: BLE001
        log_line(f"Failed to save debug screenshot {path.name}: {exc}")
        return None


def save_page_html(page: Any, path: Path) -> Optional[Path]:
    """Write the current document HTML to *path* for offline replay."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(page.content(), encoding="utf-8")
        log_line(f"Saved page HTML -> {path}")
        return path
    except Exception as exc:  # noqa: BLE001
        log_line(f"Failed to save page HTML: {exc}")
        return None


__all__ = ["open_session", "safe_goto", "screenshot", "save_page_html"]
