from __future__ import annotations

import pandas as pd
import pytest

from app.outreach import config
from app.outreach.export_excel import export_run_to_excel, prune_old_exports
from app.outreach.telemetry import RunTelemetry


def test_export_run_to_excel_writes_expected_sheets() -> None:
    telemetry = RunTelemetry(mode="message")
    telemetry.add("messaged", None, {"index": 1, "name": "Ada", "profile_url": "https://example.com/in/ada/"})
    telemetry.add("failed", "action_failed", {"index": 2, "name": "Bob", "profile_url": "https://example.com/in/bob/"})
    telemetry.finalize({"status": "completed"})

    path = export_run_to_excel()

    assert path.parent == config.EXPORTS_DIR
    sheets = pd.ExcelFile(path).sheet_names
    assert sheets == ["All", "Messaged", "Failed", "Summary_Status", "Failure_Reasons"]
    failed = pd.read_excel(path, sheet_name="Failed")
    assert list(failed["name"]) == ["Bob"]


def test_export_without_runs_raises() -> None:
    with pytest.raises(FileNotFoundError):
        export_run_to_excel()


def test_prune_old_exports_keeps_newest() -> None:
    config.EXPORTS_DIR.mkdir(parents=True, exist_ok=True)
    for index in range(7):
        (config.EXPORTS_DIR / f"outreach_2024010{index}.xlsx").write_bytes(b"x")

    prune_old_exports(max_exports=5)

    remaining = sorted(p.name for p in config.EXPORTS_DIR.glob("*.xlsx"))
    assert remaining == [f"outreach_2024010{i}.xlsx" for i in range(2, 7)]
