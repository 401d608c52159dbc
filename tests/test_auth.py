from __future__ import annotations

from pathlib import Path

import pytest

from app.outreach import config
from app.outreach.auth import AuthState, ensure_session, is_challenge_url, is_login_url, login
from app.outreach.config import Credentials
from app.outreach.error_codes import ErrorCode
from app.outreach.errors import ChallengeDetected, SessionLost
from tests.fake_page import FakePage

LOGIN_URL = "https://www.linkedin.com/login"
FEED_URL = "https://www.linkedin.com/feed/"
CHALLENGE_URL = "https://www.linkedin.com/checkpoint/challenge/abc"
LOGIN_FORM = {"input#username", "input#password", "button[type='submit']"}
CREDS = Credentials(identifier="user@example.com", secret="hunter2")


def _login_page(after_submit: str | None = None, **kwargs) -> FakePage:  # noqa: ANN003
    page = FakePage(present=LOGIN_FORM, **kwargs)
    if after_submit is not None:
        page.on_click["button[type='submit']"] = lambda p: setattr(p, "url", after_submit)
    return page


def test_login_confirms_on_indicator() -> None:
    page = _login_page(FEED_URL, by_url={FEED_URL: {"nav.global-nav"}})

    result = login(page, CREDS, login_url=LOGIN_URL, debug=False)

    assert result.ok
    assert result.state is AuthState.CONFIRMED
    assert result.matched["indicator"] == "nav.global-nav"
    assert page.filled == {"input#username": "user@example.com", "input#password": "hunter2"}
    assert page.screenshots == []


def test_login_fills_fallback_handles() -> None:
    page = FakePage(
        present={"input[name='session_key']", "input[type='password']", "button[type='submit']"},
    )
    page.on_click["button[type='submit']"] = lambda p: setattr(p, "url", FEED_URL)
    page.by_url = {FEED_URL: {"div.feed-identity-module"}}

    result = login(page, CREDS, login_url=LOGIN_URL, debug=False)

    assert result.ok
    assert page.filled["input[name='session_key']"] == "user@example.com"
    assert page.filled["input[type='password']"] == "hunter2"


def test_rejected_credentials_fail_with_snapshot() -> None:
    page = _login_page()

    result = login(page, CREDS, login_url=LOGIN_URL, debug=False)

    assert not result.ok
    assert result.state is AuthState.FAILED
    assert result.error_code == ErrorCode.AUTH_FAILED
    assert page.screenshots == ["login-failed.png"]
    assert result.snapshot == Path(config.SCREENSHOT_DIR) / "login-failed.png"
    assert result.snapshot.exists()


def test_missing_login_form_fails_before_submit() -> None:
    page = FakePage(present={"button[type='submit']"})

    result = login(page, CREDS, login_url=LOGIN_URL, debug=False)

    assert result.state is AuthState.FAILED
    assert result.error_code == ErrorCode.ALL_CANDIDATES_FAILED
    assert page.screenshots == ["login-form-not-found.png"]
    assert not any(call[0] == "click" for call in page.calls)


def test_challenge_wins_over_confirmed_indicator() -> None:
    page = _login_page(CHALLENGE_URL, by_url={CHALLENGE_URL: {"nav.global-nav"}})

    result = login(page, CREDS, login_url=LOGIN_URL, debug=False)

    assert result.state is AuthState.CHALLENGE
    assert result.error_code == ErrorCode.CHALLENGE_DETECTED
    assert page.screenshots == ["login-verification-required.png"]


def test_login_page_not_loaded() -> None:
    page = _login_page(fail_goto={LOGIN_URL})

    result = login(page, CREDS, login_url=LOGIN_URL, debug=False)

    assert result.error_code == ErrorCode.NAVIGATION
    assert page.screenshots == ["login-page-not-loaded.png"]


def test_debug_login_captures_login_page() -> None:
    page = _login_page(FEED_URL, by_url={FEED_URL: {"nav.global-nav"}})

    login(page, CREDS, login_url=LOGIN_URL, debug=True)

    assert page.screenshots == ["login-page.png"]


def test_ensure_session_detects_lost_sessions() -> None:
    ensure_session(FakePage(url=FEED_URL))

    with pytest.raises(SessionLost):
        ensure_session(FakePage(url="https://www.linkedin.com/authwall?trk=x"))
    with pytest.raises(ChallengeDetected):
        ensure_session(FakePage(url=CHALLENGE_URL))

    closed = FakePage(url=FEED_URL)
    closed.close()
    with pytest.raises(SessionLost):
        ensure_session(closed)


@pytest.mark.parametrize(
    "url",
    [
        "https://www.linkedin.com/in/challenger-bob/",
        "https://www.linkedin.com/in/loginova-anna/",
        "https://www.linkedin.com/in/checkpoint-charlie/",
        "https://www.linkedin.com/in/authwall-fan/",
        "https://www.linkedin.com/feed/?trk=login",
    ],
)
def test_profile_urls_with_marker_words_keep_session(url: str) -> None:
    assert not is_challenge_url(url)
    assert not is_login_url(url)
    ensure_session(FakePage(url=url))


@pytest.mark.parametrize(
    ("url", "challenge", "login_page"),
    [
        ("https://www.linkedin.com/checkpoint/challenge/abc", True, False),
        ("https://www.linkedin.com/challenge", True, False),
        ("https://www.linkedin.com/login?session_redirect=x", False, True),
        ("https://www.linkedin.com/uas/login", False, True),
        ("https://www.linkedin.com/authwall?trk=x", False, True),
    ],
)
def test_url_classification_matches_path_segments(url: str, challenge: bool, login_page: bool) -> None:
    assert is_challenge_url(url) is challenge
    assert is_login_url(url) is login_page
