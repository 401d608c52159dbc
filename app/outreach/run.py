"""Connection outreach run: login, scrape, snapshot, throttled messaging.

Workflow:

- Validate configuration (credentials, delay bounds, timeouts) before any
  browser is launched.
- Log in through the selector-fallback login flow; a challenge / checkpoint
  page ends the run.
- Open the connections list, scroll to load it and extract ``{name, link}``
  records.
- Write ``connections.json`` before messaging so the scrape survives a crash.
- Message each connection in order with a random delay between messages and
  record every outcome in the run telemetry file.

Exit codes: 0 completed (per-record failures allowed), 1 fatal run error,
2 configuration error, 130 interrupted.
"""

from __future__ import annotations

import argparse
import random
import time
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from . import config
from .auth import ensure_session, login
from .batch import run_batch
from .browser import open_session, screenshot
from .config import Credentials
from .config_validation import validate_runtime_config
from .error_codes import ErrorCode
from .errors import ChallengeDetected, ConfigurationError, FatalRunError
from .logging_utils import _outreach_event
from .messaging import message_action
from .models import Connection
from .scrape import scrape_connections
from .telemetry import RunTelemetry
from .utils import ensure_dirs, log_line, save_json_file, setup_run_logger

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

SessionFactory = Callable[..., AbstractContextManager]


def write_connections_snapshot(connections: Sequence[Connection], path: Optional[Path] = None) -> Path:
    """Persist scraped connections as an ordered JSON list of ``{name, profileUrl}``."""

    target = Path(path or config.CONNECTIONS_FILE)
    save_json_file(target, [connection.to_dict() for connection in connections])
    log_line(f"Saved {len(connections)} connections to {target}")
    return target


def _log_final_summary(summary: Dict[str, Any]) -> None:
    log_line("Messaging completed!")
    log_line(f"Successful messages: {summary['success_count']}")
    log_line(f"Failed messages: {summary['failure_count']}")
    if summary.get("skipped_by_limit"):
        log_line(f"Skipped by --limit: {summary['skipped_by_limit']}")
    if summary["total"]:
        log_line(f"Success rate: {summary['success_count'] / summary['total'] * 100:.1f}%")


def _run_with_page(
    page: Any,
    *,
    credentials: Credentials,
    telemetry: RunTelemetry,
    debug: bool,
    limit: Optional[int],
    scrape_only: bool,
    min_delay: float,
    max_delay: float,
    page_mode: str,
    template: str,
    sleep: Callable[[float], None],
    rng: Optional[random.Random],
) -> Dict[str, Any]:
    auth = login(page, credentials, debug=debug)
    if not auth.ok:
        if auth.error_code == ErrorCode.CHALLENGE_DETECTED:
            raise ChallengeDetected("login requires additional verification (captcha/2FA)")
        raise FatalRunError("login failed", error_code=auth.error_code or ErrorCode.AUTH_FAILED)

    connections = scrape_connections(page, debug=debug)
    if not connections:
        raise FatalRunError("no connections found", error_code=ErrorCode.NO_RECORDS)

    snapshot_path = write_connections_snapshot(connections)
    planned = len(connections) if limit is None else min(len(connections), max(0, limit))
    log_line("Found connections:")
    for index, connection in enumerate(connections, start=1):
        log_line(f"{index}. {connection.name} - {connection.profile_url}")

    summary: Dict[str, Any] = {
        "run_id": telemetry.run_id,
        "scraped": len(connections),
        "snapshot": str(snapshot_path),
        "scrape_only": scrape_only,
        "planned": 0 if scrape_only else planned,
        "skipped_by_limit": 0 if scrape_only else len(connections) - planned,
        "success_count": 0,
        "failure_count": 0,
        "total": 0,
        "transcript": [],
    }
    if scrape_only:
        return summary
    if summary["skipped_by_limit"]:
        log_line(f"Limit {limit}: messaging {planned} of {len(connections)} connections")

    result = run_batch(
        connections,
        message_action(page, page_mode=page_mode, template=template, debug=debug),
        min_delay=min_delay,
        max_delay=max_delay,
        sleep=sleep,
        rng=rng,
        session_check=lambda: ensure_session(page),
        telemetry=telemetry,
        limit=limit,
    )
    summary.update(result.to_dict())
    summary["transcript_lines"] = result.transcript_lines()
    return summary


def run_outreach(
    *,
    credentials: Optional[Credentials] = None,
    debug: Optional[bool] = None,
    limit: Optional[int] = None,
    scrape_only: bool = False,
    min_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    page_mode: Optional[str] = None,
    template: Optional[str] = None,
    session_factory: SessionFactory = open_session,
    sleep: Callable[[float], None] = time.sleep,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """Public entrypoint: run one outreach pass and return its summary.

    Raises ``ConfigurationError`` before opening a session and
    ``FatalRunError`` (or a subclass) for run-fatal conditions.
    """

    ensure_dirs()
    setup_run_logger()
    debug = config.DEBUG_MODE if debug is None else debug
    credentials = validate_runtime_config("cli", credentials=credentials)
    template = config.load_message_template() if template is None else template
    min_delay = config.MIN_DELAY_SECONDS if min_delay is None else min_delay
    max_delay = config.MAX_DELAY_SECONDS if max_delay is None else max_delay
    page_mode = (page_mode or config.PAGE_MODE).strip().lower()
    if min_delay < 0 or max_delay < min_delay:
        raise ConfigurationError(
            f"Invalid delay bounds: min={min_delay} max={max_delay}", error_code=ErrorCode.CONFIG_INVALID
        )
    if page_mode not in config.PAGE_MODES:
        raise ConfigurationError(f"Unknown page mode {page_mode!r}", error_code=ErrorCode.CONFIG_INVALID)

    log_line("Starting connection messaging automation...")
    log_line(f"Debug mode: {'ON' if debug else 'OFF'}")

    telemetry = RunTelemetry(mode="scrape_only" if scrape_only else "message")
    extra: Dict[str, Any] = {"status": "failed"}
    try:
        with session_factory(debug=debug) as page:
            try:
                summary = _run_with_page(
                    page,
                    credentials=credentials,
                    telemetry=telemetry,
                    debug=debug,
                    limit=limit,
                    scrape_only=scrape_only,
                    min_delay=min_delay,
                    max_delay=max_delay,
                    page_mode=page_mode,
                    template=template,
                    sleep=sleep,
                    rng=rng,
                )
            except FatalRunError as exc:
                extra.update({"error_code": exc.error_code, "error": str(exc)})
                if exc.partial_result is not None:
                    extra["partial_result"] = exc.partial_result.to_dict()
                raise
            except Exception as exc:  # noqa: BLE001
                screenshot(page, "fatal-error")
                extra.update({"error_code": ErrorCode.INTERNAL, "error": str(exc)})
                raise FatalRunError(f"fatal error: {exc}", error_code=ErrorCode.INTERNAL) from exc
        extra = {"status": "completed", "result": summary}
        if not scrape_only:
            _log_final_summary(summary)
        return summary
    finally:
        try:
            telemetry_path = telemetry.finalize(extra)
            log_line(f"Run telemetry written to {telemetry_path}")
        except Exception as exc:  # noqa: BLE001
            log_line(f"[RUN][WARN] Unable to write run telemetry: {exc}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Log in, scrape connections and send each a templated message."
    )
    parser.add_argument("--debug", action="store_true", default=None, help="Visible, slowed browser with diagnostics.")
    parser.add_argument("--limit", type=int, default=None, help="Message at most N connections.")
    parser.add_argument("--scrape-only", action="store_true", help="Stop after writing connections.json.")
    parser.add_argument("--min-delay", type=float, default=None, help="Minimum seconds between messages.")
    parser.add_argument("--max-delay", type=float, default=None, help="Maximum seconds between messages.")
    parser.add_argument("--page-mode", choices=list(config.PAGE_MODES), default=None)
    parser.add_argument("--message-file", type=Path, default=None, help="Read the message template from a file.")
    return parser


def main(argv: Optional[List[str]] = None, *, session_factory: SessionFactory = open_session) -> int:
    """CLI entry point; returns the process exit code."""

    args = _build_parser().parse_args(argv)

    template = None
    if args.message_file is not None:
        try:
            template = args.message_file.read_text(encoding="utf-8").strip()
        except OSError as exc:
            log_line(f"[CONFIG] Unable to read message file: {exc}")
            return EXIT_CONFIG

    try:
        run_outreach(
            debug=args.debug,
            limit=args.limit,
            scrape_only=args.scrape_only,
            min_delay=args.min_delay,
            max_delay=args.max_delay,
            page_mode=args.page_mode,
            template=template,
            session_factory=session_factory,
        )
    except ConfigurationError as exc:
        log_line(f"[CONFIG] {exc}")
        return EXIT_CONFIG
    except FatalRunError as exc:
        log_line(f"[RUN] {exc} ({exc.error_code}). Exiting...")
        partial = exc.partial_result
        if partial is not None:
            log_line(
                f"Partial result: {partial.success_count} sent, {partial.failure_count} failed"
            )
        return EXIT_FATAL
    except KeyboardInterrupt:
        log_line("[RUN] Interrupted by operator.")
        _outreach_event("state", phase="run", kind="interrupted")
        return EXIT_INTERRUPTED
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

__all__ = ["run_outreach", "write_connections_snapshot", "main"]
