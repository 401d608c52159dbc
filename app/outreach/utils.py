from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, List

from . import config

LOGGER = logging.getLogger("outreach")
_LOG_FORMAT = "[%(asctime)s] %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
_active_log_path: Path | None = None


def _configure_logger(log_path: Path) -> None:
    """Route the ``outreach`` logger to stdout and ``log_path``.

    Existing handlers are closed first, so calling this again (per run, or per
    test) swaps the file target without duplicating output.
    """

    global _active_log_path

    log_path.parent.mkdir(parents=True, exist_ok=True)
    while LOGGER.handlers:
        handler = LOGGER.handlers.pop()
        try:
            handler.close()
        except Exception:  # noqa: BLE001
            pass

    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATEFMT)
    for handler in (
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_path, encoding="utf-8"),
    ):
        handler.setFormatter(formatter)
        LOGGER.addHandler(handler)

    LOGGER.setLevel(logging.INFO)
    LOGGER.propagate = False
    _active_log_path = log_path


def setup_run_logger() -> Path:
    """Start a fresh ``outreach_<timestamp>.log`` for the current run."""

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = config.LOG_DIR / f"outreach_{stamp}.log"
    _configure_logger(log_path)
    LOGGER.info("Logging to %s", log_path)
    return log_path


def get_current_log_path() -> Path:
    if _active_log_path is None:
        _configure_logger(config.LOG_FILE)
    return _active_log_path  # type: ignore[return-value]


def tail_log_lines(limit: int = 150) -> List[str]:
    """Return the last ``limit`` lines of the active log file."""

    path = get_current_log_path()
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as handle:
        return [line.rstrip("\n") for line in handle.readlines()[-limit:]]


def ensure_dirs() -> None:
    for directory in (config.DATA_DIR, config.LOG_DIR, config.SCREENSHOT_DIR, config.RUNS_DIR):
        directory.mkdir(parents=True, exist_ok=True)


def log_line(message: str) -> None:
    """Log one human-readable line to stdout and the run log."""

    if _active_log_path is None:
        _configure_logger(config.LOG_FILE)
    LOGGER.info(message)


def sanitize_filename(name: str) -> str:
    """Map ``name`` to ``[A-Za-z0-9._-]``; empty results become ``"file"``."""

    safe = "".join(ch if ch.isalnum() or ch in "._-" else "_" for ch in name.strip())
    return safe.strip("._") or "file"


def load_json_file(path: Path, default: Any = None) -> Any:
    path = Path(path)
    if not path.is_file():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return default


def save_json_file(path: Path, payload: Any) -> None:
    """Write ``payload`` as indented JSON via a temp file and rename."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.parent / f".{path.name}.tmp"
    tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp_path.replace(path)


__all__ = [
    "ensure_dirs",
    "setup_run_logger",
    "get_current_log_path",
    "tail_log_lines",
    "log_line",
    "sanitize_filename",
    "load_json_file",
    "save_json_file",
]
