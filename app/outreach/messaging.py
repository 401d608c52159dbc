"""Per-connection messaging: open profile, open composer, type, send."""
from __future__ import annotations

from typing import Any, Callable, Optional

from . import config
from .auth import ensure_session
from .browser import safe_goto, screenshot
from .delays import wait_seconds
from .logging_utils import _outreach_event
from .models import Connection
from .probe import click, probe, wait_for
from .selectors import MESSAGING_SELECTORS, MessagingSelectors
from .utils import log_line

MessageAction = Callable[[Connection], bool]


def render_message(template: str, name: str) -> str:
    """Substitute ``name`` for every ``[Name]`` placeholder in ``template``."""

    return template.replace(config.NAME_PLACEHOLDER, name)


def _step_failed(page: Any, connection: Connection, step: str, debug: bool) -> bool:
    log_line(f"Could not find {step.replace('-', ' ')} for {connection.name}")
    _outreach_event("message", name=connection.name, step=step, outcome="not_found")
    if debug:
        screenshot(page, f"{step}-not-found-{connection.name}")
    return False


def send_message(
    page: Any,
    connection: Connection,
    *,
    template: Optional[str] = None,
    selectors: MessagingSelectors = MESSAGING_SELECTORS,
    debug: Optional[bool] = None,
) -> bool:
    """Send the rendered message to ``connection``; return ``True`` on success.

    Never raises: every error is logged and reported as ``False``. A half-typed
    draft is simply abandoned with the page.
    """

    debug = config.DEBUG_MODE if debug is None else debug
    template = config.load_message_template() if template is None else template
    click_timeout = int(config.CLICK_TIMEOUT_SECONDS * 1000)

    try:
        log_line(f"Attempting to message {connection.name}...")
        if not safe_goto(page, connection.profile_url, label="profile"):
            return _step_failed(page, connection, "profile-page", debug)
        wait_seconds(page, config.PROFILE_SETTLE_SECONDS)

        if not probe(
            selectors.compose_buttons, click(page), label="compose_button", timeout_ms=click_timeout
        ):
            return _step_failed(page, connection, "message-button", debug)

        composer = probe(
            selectors.message_inputs,
            wait_for(page),
            label="message_input",
            timeout_ms=int(config.COMPOSER_TIMEOUT_SECONDS * 1000),
        )
        if not composer:
            return _step_failed(page, connection, "message-dialog", debug)

        composer.value.type(render_message(template, connection.name), delay=config.TYPE_DELAY_MS)
        wait_seconds(page, config.PRE_SEND_PAUSE_SECONDS)

        if not probe(
            selectors.send_buttons, click(page), label="send_button", timeout_ms=click_timeout
        ):
            return _step_failed(page, connection, "send-button", debug)

        log_line(f"Message sent to {connection.name}!")
        _outreach_event("message", name=connection.name, outcome="sent")
        return True
    except Exception as exc:  # noqa: BLE001
        log_line(f"Error messaging {connection.name}: {exc}")
        _outreach_event("error", phase="message", name=connection.name, error=str(exc))
        return False


def message_action(
    page: Any,
    *,
    page_mode: Optional[str] = None,
    template: Optional[str] = None,
    debug: Optional[bool] = None,
) -> MessageAction:
    """Bind ``send_message`` to a page strategy for the batch runner.

    ``reuse`` navigates the shared page for every profile; ``new_page`` opens a
    fresh tab per profile in the same context and closes it afterwards. In
    ``new_page`` mode the tab is checked with ``ensure_session`` before it is
    closed, so ``SessionLost`` / ``ChallengeDetected`` propagate to the batch.
    """

    page_mode = (page_mode or config.PAGE_MODE).strip().lower()
    template = config.load_message_template() if template is None else template

    if page_mode == "new_page":

        def _in_new_page(connection: Connection) -> bool:
            try:
                profile_page = page.context.new_page()
            except Exception as exc:  # noqa: BLE001
                log_line(f"Could not open a page for {connection.name}: {exc}")
                return False
            try:
                sent = send_message(profile_page, connection, template=template, debug=debug)
                # The shared page stays on the list; a logout only shows up here.
                ensure_session(profile_page)
                return sent
            finally:
                try:
                    profile_page.close()
                except Exception as exc:  # noqa: BLE001
                    log_line(f"[MESSAGE][WARN] Error closing profile page: {exc}")

        return _in_new_page

    def _in_shared_page(connection: Connection) -> bool:
        return send_message(page, connection, template=template, debug=debug)

    return _in_shared_page


__all__ = ["render_message", "send_message", "message_action", "MessageAction"]
