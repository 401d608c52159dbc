from __future__ import annotations

"""Selector candidate lists for the login, connections and messaging views.

Each field is an ordered tuple of locators; probes try them front to back and
stop at the first match, so the most specific selector goes first.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class LoginSelectors:
    username_inputs: Tuple[str, ...] = (
        "input#username",
        "input[name='session_key']",
        "input[type='email']",
    )
    password_inputs: Tuple[str, ...] = (
        "input#password",
        "input[name='session_password']",
        "input[type='password']",
    )
    submit_buttons: Tuple[str, ...] = (
        "button[type='submit']",
        "button[data-id='sign-in-form__submit-btn']",
        ".login__form_action_container button",
    )
    logged_in_indicators: Tuple[str, ...] = (
        "div.feed-identity-module",
        "nav.global-nav",
        "[data-test-global-nav]",
        ".global-nav__me",
    )


@dataclass(frozen=True)
class ConnectionsSelectors:
    list_containers: Tuple[str, ...] = (
        "ul.mn-connection-list",
        ".mn-connections",
        "[data-test-connections-list]",
        ".artdeco-list",
    )
    cards: Tuple[str, ...] = (
        ".mn-connection-card",
        ".connection-card",
        "[data-test-connection-list-item]",
    )
    names: Tuple[str, ...] = (
        ".mn-connection-card__name",
        ".connection-card__name",
        ".actor-name",
        "[data-test-connection-name]",
    )
    links: Tuple[str, ...] = (
        "a[href*='/in/']",
        ".mn-connection-card__link",
        ".connection-card__link",
    )
    link_attribute: str = "href"


@dataclass(frozen=True)
class MessagingSelectors:
    compose_buttons: Tuple[str, ...] = (
        "button[aria-label^='Message']",
        "button[aria-label^='Send message']",
        "button:has-text('Message')",
        ".pv-s-profile-actions button:has-text('Message')",
        "[data-test-message-button]",
    )
    message_inputs: Tuple[str, ...] = (
        ".msg-form__contenteditable",
        "[data-test-message-compose]",
        ".msg-form__msg-content-container",
        "div[role='textbox']",
    )
    send_buttons: Tuple[str, ...] = (
        "button.msg-form__send-button",
        "button[type='submit']",
        "button:has-text('Send')",
        "[data-test-send-button]",
    )


LOGIN_SELECTORS = LoginSelectors()
CONNECTIONS_SELECTORS = ConnectionsSelectors()
MESSAGING_SELECTORS = MessagingSelectors()

__all__ = [
    "LoginSelectors",
    "ConnectionsSelectors",
    "MessagingSelectors",
    "LOGIN_SELECTORS",
    "CONNECTIONS_SELECTORS",
    "MESSAGING_SELECTORS",
]
