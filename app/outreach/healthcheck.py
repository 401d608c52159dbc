from __future__ import annotations

import shutil
from dataclasses import dataclass
from typing import Any

from . import config
from .config_validation import validate_runtime_config
from .errors import ConfigurationError
from .logging_utils import _outreach_event
from .utils import ensure_dirs, load_json_file, log_line


@dataclass
class HealthResult:
    ok: bool
    checks: dict[str, dict[str, Any]]


def run_health_checks(entrypoint: str = "cli") -> HealthResult:
    checks: dict[str, dict[str, Any]] = {}

    try:
        validate_runtime_config(entrypoint or "cli")
        checks["config"] = {"ok": True}
    except ConfigurationError as exc:
        checks["config"] = {"ok": False, "error": str(exc), "error_code": exc.error_code}

    try:
        ensure_dirs()
        free_mb = shutil.disk_usage(config.DATA_DIR).free // (1024 * 1024)
        checks["filesystem"] = {"ok": True, "data_dir": str(config.DATA_DIR), "free_mb": free_mb}
    except OSError as exc:
        checks["filesystem"] = {"ok": False, "data_dir": str(config.DATA_DIR), "error": str(exc)}

    snapshot = load_json_file(config.CONNECTIONS_FILE, default=None)
    checks["snapshot"] = {
        "ok": snapshot is None or isinstance(snapshot, list),
        "present": snapshot is not None,
        "count": len(snapshot) if isinstance(snapshot, list) else 0,
    }

    overall_ok = all(check.get("ok", False) for check in checks.values())

    _outreach_event(
        "state" if overall_ok else "error",
        phase="health",
        context="healthcheck",
        ok=overall_ok,
        checks=checks,
    )

    return HealthResult(ok=overall_ok, checks=checks)


if __name__ == "__main__":  # pragma: no cover
    result = run_health_checks(entrypoint="cli")
    for name, info in result.checks.items():
        status = "OK" if info.get("ok") else "FAIL"
        log_line(f"[HEALTH] {name}: {status} {info}")
    raise SystemExit(0 if result.ok else 1)
