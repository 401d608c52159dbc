from pathlib import Path

import pytest

from app.outreach import config
from app.outreach.config import Credentials
from app.outreach.config_validation import validate_runtime_config
from app.outreach.error_codes import ErrorCode
from app.outreach.errors import ConfigurationError

CREDS = Credentials(identifier="user@example.com", secret="s3cret")


def test_validate_runtime_config_accepts_defaults() -> None:
    assert validate_runtime_config("tests", credentials=CREDS) is CREDS


def test_missing_credentials_are_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CREDENTIAL_ID", "user@example.com")

    with pytest.raises(ConfigurationError) as excinfo:
        validate_runtime_config("cli")

    assert excinfo.value.error_code == ErrorCode.CONFIG_MISSING
    assert "CREDENTIAL_SECRET" in str(excinfo.value)
    assert "CREDENTIAL_ID" not in str(excinfo.value)


def test_legacy_credential_variables_are_accepted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINKEDIN_EMAIL", "legacy@example.com")
    monkeypatch.setenv("LINKEDIN_PASSWORD", "pw")

    creds = validate_runtime_config("cli")

    assert creds.identifier == "legacy@example.com"
    assert "pw" not in repr(creds)


def test_credentials_not_required_for_replay() -> None:
    creds = validate_runtime_config("replay", require_credentials=False)
    assert creds.identifier == ""


@pytest.mark.parametrize(
    ("attr", "value"),
    [
        ("MIN_DELAY_SECONDS", -1),
        ("MAX_DELAY_SECONDS", 1),
        ("PAGE_MODE", "tabs"),
        ("SCROLL_STEP_PX", 0),
        ("NAV_TIMEOUT_SECONDS", 0),
        ("SCROLL_MAX_SECONDS", -5),
    ],
)
def test_invalid_settings_raise(monkeypatch: pytest.MonkeyPatch, attr: str, value) -> None:  # noqa: ANN001
    monkeypatch.setattr(config, attr, value)

    with pytest.raises(ConfigurationError) as excinfo:
        validate_runtime_config("tests", credentials=CREDS)

    assert excinfo.value.error_code == ErrorCode.CONFIG_INVALID
    assert isinstance(excinfo.value, ValueError)


def test_missing_message_file_is_rejected(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "MESSAGE_FILE", str(tmp_path / "nope.txt"))

    with pytest.raises(ConfigurationError):
        validate_runtime_config("tests", credentials=CREDS)


def test_message_file_takes_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    message = tmp_path / "message.txt"
    message.write_text("  Hello [Name]  \n", encoding="utf-8")
    monkeypatch.setattr(config, "MESSAGE_FILE", str(message))

    assert config.load_message_template() == "Hello [Name]"
