"""Excel export helpers for run telemetry."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import pandas as pd

from . import config
from .telemetry import load_run


def prune_old_exports(max_exports: int = 5) -> None:
    exports_dir = Path(config.EXPORTS_DIR)
    files = sorted(p for p in exports_dir.glob("*.xlsx") if p.is_file())
    while len(files) > max_exports:
        old = files.pop(0)
        try:
            os.remove(old)
        except Exception:  # noqa: BLE001
            continue


def export_run_to_excel(run_id: Optional[str] = None, dest_path: Optional[Path] = None) -> Path:
    """Create an Excel workbook from a run telemetry payload (latest by default)."""

    payload = load_run(run_id)
    if payload is None:
        raise FileNotFoundError("No run telemetry available to export")

    df = pd.DataFrame(payload.get("entries", []))
    if df.empty:
        df = pd.DataFrame([{"info": "No entries in run"}])

    has_status = "status" in df.columns
    messaged = df[df["status"] == "messaged"].copy() if has_status else pd.DataFrame()
    failed = df[df["status"] == "failed"].copy() if has_status else pd.DataFrame()

    summary_status = (
        df.groupby("status").size().reset_index(name="count") if has_status else pd.DataFrame()
    )
    failure_reasons = (
        failed.groupby("reason").size().reset_index(name="count").sort_values("count", ascending=False)
        if not failed.empty
        else pd.DataFrame()
    )

    exports_dir = Path(config.EXPORTS_DIR)
    exports_dir.mkdir(parents=True, exist_ok=True)
    if dest_path is None:
        dest_path = exports_dir / f"outreach_{payload['run_id']}.xlsx"

    with pd.ExcelWriter(dest_path, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="All")
        messaged.to_excel(writer, index=False, sheet_name="Messaged")
        failed.to_excel(writer, index=False, sheet_name="Failed")
        summary_status.to_excel(writer, index=False, sheet_name="Summary_Status")
        if not failure_reasons.empty:
            failure_reasons.to_excel(writer, index=False, sheet_name="Failure_Reasons")

    prune_old_exports()
    return Path(dest_path)


if __name__ == "__main__":  # pragma: no cover - CLI entry
    print(export_run_to_excel())

__all__ = ["export_run_to_excel", "prune_old_exports"]
