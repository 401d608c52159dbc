from __future__ import annotations

"""Centralised error code taxonomy for outreach failures.

These codes appear in structured logs, run telemetry entries and exception
``error_code`` attributes so that a run transcript can explain why a step
failed. Keep the values stable; reporting groups on them.
"""


class ErrorCode:
    CONFIG_MISSING = "config_missing"
    CONFIG_INVALID = "config_invalid"
    SELECTOR_NOT_FOUND = "selector_not_found"
    ALL_CANDIDATES_FAILED = "all_candidates_failed"
    CHALLENGE_DETECTED = "challenge_detected"
    AUTH_FAILED = "auth_failed"
    SESSION_LOST = "session_lost"
    NAVIGATION = "navigation_failed"
    NO_RECORDS = "no_records"
    INTERNAL = "internal_error"


__all__ = ["ErrorCode"]
