from __future__ import annotations

from pathlib import Path

import pytest

from app.outreach import config, utils


@pytest.fixture(autouse=True)
def _isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every data path at a temporary directory for each test."""

    data_dir = tmp_path / "data"
    data_dir.mkdir(parents=True, exist_ok=True)

    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "LOG_DIR", data_dir / "logs")
    monkeypatch.setattr(config, "LOG_FILE", data_dir / "logs" / "latest.log")
    monkeypatch.setattr(config, "SCREENSHOT_DIR", data_dir / "screenshots")
    monkeypatch.setattr(config, "RUNS_DIR", data_dir / "runs")
    monkeypatch.setattr(config, "EXPORTS_DIR", data_dir / "exports")
    monkeypatch.setattr(config, "CONNECTIONS_FILE", data_dir / "connections.json")
    monkeypatch.setattr(config, "LISTING_HTML_FILE", data_dir / "connections-page.html")
    monkeypatch.setattr(config, "DEBUG_MODE", False)
    monkeypatch.setattr(config, "MESSAGE_FILE", "")
    monkeypatch.setattr(config, "PAGE_MODE", "reuse")
    for name in config.CREDENTIAL_ID_VARS + config.CREDENTIAL_SECRET_VARS:
        monkeypatch.delenv(name, raising=False)

    utils._configure_logger(data_dir / "logs" / "latest.log")
    return data_dir
