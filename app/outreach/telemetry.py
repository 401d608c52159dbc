"""Run telemetry: per-connection outcomes persisted as one JSON file per run."""

from __future__ import annotations

import time
import uuid
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from .utils import load_json_file, save_json_file


def _ts() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


class RunTelemetry:
    """Collect per-run telemetry for the summary CLI, exports and the API."""

    def __init__(self, mode: str) -> None:
        self.run_id = f"{_ts()}_{uuid.uuid4().hex[:8]}"
        self.mode = mode
        self.started_at = time.time()
        self.entries: List[Dict[str, Any]] = []
        self.summary: Dict[str, Any] = defaultdict(int)

    def add(self, status: str, reason: Optional[str], meta: Dict[str, Any]) -> None:
        self.entries.append(
            {
                "status": status,
                "reason": reason,
                **meta,
            }
        )
        self.summary[f"count_{status}"] += 1

    def finalize(self, extra: Optional[Dict[str, Any]] = None) -> Path:
        payload = {
            "run_id": self.run_id,
            "mode": self.mode,
            "started_at": self.started_at,
            "ended_at": time.time(),
            "summary": dict(self.summary),
            "entries": self.entries,
            **(extra or {}),
        }
        path = run_path(self.run_id)
        save_json_file(path, payload)
        return path


def run_path(run_id: str) -> Path:
    return Path(config.RUNS_DIR) / f"run_{run_id}.json"


def list_run_paths() -> List[Path]:
    runs_dir = Path(config.RUNS_DIR)
    if not runs_dir.is_dir():
        return []
    return sorted(p for p in runs_dir.glob("run_*.json") if p.is_file())


def latest_run_path() -> Optional[Path]:
    """Return the most recent run telemetry JSON path, if any."""

    runs = list_run_paths()
    return runs[-1] if runs else None


def load_run(run_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Load a run payload by id, or the latest run when ``run_id`` is None."""

    path = latest_run_path() if run_id is None else run_path(run_id)
    if path is None:
        return None
    return load_json_file(path, default=None)


__all__ = [
    "RunTelemetry",
    "run_path",
    "list_run_paths",
    "latest_run_path",
    "load_run",
]
