from __future__ import annotations

import pytest

from app.outreach import messaging
from app.outreach.batch import run_batch
from app.outreach.errors import SessionLost
from app.outreach.messaging import message_action, render_message, send_message
from app.outreach.models import Connection
from tests.fake_page import FakePage

COMPOSER = {
    "button[aria-label^='Message']",
    ".msg-form__contenteditable",
    "button.msg-form__send-button",
}
ADA = Connection(name="Ada", profile_url="https://www.linkedin.com/in/ada/")


def test_render_message_replaces_every_placeholder() -> None:
    assert render_message("Hi [Name], bye [Name]", "Ada") == "Hi Ada, bye Ada"
    assert render_message("No placeholder", "Ada") == "No placeholder"


def test_send_message_types_rendered_text_and_sends() -> None:
    page = FakePage(present=COMPOSER)

    ok = send_message(page, ADA, template="Hello [Name]!", debug=False)

    assert ok is True
    assert page.visited == [ADA.profile_url]
    assert page.typed == [(".msg-form__contenteditable", "Hello Ada!")]
    assert page.calls[-1] == ("click", "button.msg-form__send-button")


def test_send_message_without_send_button_returns_false() -> None:
    page = FakePage(present=COMPOSER - {"button.msg-form__send-button"})

    assert send_message(page, ADA, template="Hi [Name]", debug=True) is False
    assert page.screenshots == ["send-button-not-found-Ada.png"]


def test_send_message_without_compose_button_skips_typing() -> None:
    page = FakePage(present={".msg-form__contenteditable"})

    assert send_message(page, ADA, template="Hi", debug=False) is False
    assert page.typed == []
    assert page.screenshots == []


def test_send_message_never_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    page = FakePage(present=COMPOSER)

    def _boom(*_args, **_kwargs):  # noqa: ANN001
        raise RuntimeError("renderer crashed")

    monkeypatch.setattr(messaging, "safe_goto", _boom)

    assert send_message(page, ADA, template="Hi", debug=False) is False


def test_new_page_mode_closes_profile_page() -> None:
    page = FakePage(present=COMPOSER)
    action = message_action(page, page_mode="new_page", template="Hi [Name]", debug=False)

    assert action(ADA) is True
    assert len(page.context.opened) == 1
    child = page.context.opened[0]
    assert child.closed is True
    assert child.typed == [(".msg-form__contenteditable", "Hi Ada")]
    assert page.visited == []


def test_reuse_mode_with_batch_tallies_outcomes() -> None:
    page = FakePage(
        present=COMPOSER - {"button.msg-form__send-button"},
        by_url={ADA.profile_url: {"button.msg-form__send-button"}},
    )
    bob = Connection(name="Bob", profile_url="https://www.linkedin.com/in/bob/")

    result = run_batch(
        [ADA, bob],
        message_action(page, page_mode="reuse", template="Hi [Name]", debug=False),
        min_delay=0,
        max_delay=0,
        sleep=lambda _s: None,
    )

    assert (result.success_count, result.failure_count, result.total) == (1, 1, 2)


def test_new_page_mode_raises_session_loss_from_profile_tab() -> None:
    page = FakePage(present=COMPOSER, redirects={ADA.profile_url: "https://www.linkedin.com/login"})
    action = message_action(page, page_mode="new_page", template="Hi [Name]", debug=False)

    with pytest.raises(SessionLost):
        action(ADA)

    assert page.context.opened[0].closed is True
