"""Sequential, throttled execution of one action per scraped connection."""
from __future__ import annotations

import random
import time
from typing import Callable, Optional, Sequence

from . import config
from .delays import random_delay_seconds
from .errors import FatalRunError
from .logging_utils import _outreach_event
from .models import Connection, RunResult
from .telemetry import RunTelemetry
from .utils import log_line


def run_batch(
    connections: Sequence[Connection],
    action: Callable[[Connection], bool],
    *,
    min_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
    rng: Optional[random.Random] = None,
    session_check: Optional[Callable[[], None]] = None,
    telemetry: Optional[RunTelemetry] = None,
    limit: Optional[int] = None,
) -> RunResult:
    """Run ``action`` for each connection in order and tally the outcomes.

    A random delay in ``[min_delay, max_delay]`` separates consecutive actions;
    there is none after the last. Per-record failures never stop the batch.
    ``session_check`` runs before each action and may raise a
    ``FatalRunError``; so may the action itself (the record is then counted as
    failed). Either stops the batch with ``partial_result`` attached.
    """

    min_delay = config.MIN_DELAY_SECONDS if min_delay is None else min_delay
    max_delay = config.MAX_DELAY_SECONDS if max_delay is None else max_delay
    planned = list(connections if limit is None else connections[: max(0, limit)])
    result = RunResult()

    def _record(connection: Connection, ok: bool, reason: Optional[str]) -> None:
        entry = result.record(connection, ok, reason=reason)
        log_line(entry.describe(len(planned)))
        if telemetry is not None:
            telemetry.add(
                entry.status,
                entry.reason,
                {"index": entry.index, "name": entry.name, "profile_url": entry.profile_url},
            )

    def _abort(exc: FatalRunError) -> None:
        exc.partial_result = result
        _outreach_event(
            "error",
            phase="batch",
            error_code=exc.error_code,
            processed=result.total,
            remaining=len(planned) - result.total,
        )

    log_line(f"Starting to send messages to {len(planned)} connections...")
    for position, connection in enumerate(planned, start=1):
        log_line(f"[{position}/{len(planned)}] Processing {connection.name}...")

        if session_check is not None:
            try:
                session_check()
            except FatalRunError as exc:
                _abort(exc)
                raise

        try:
            ok = bool(action(connection))
            reason = None if ok else "action_failed"
        except FatalRunError as exc:
            _record(connection, False, exc.error_code)
            _abort(exc)
            raise
        except Exception as exc:  # noqa: BLE001
            log_line(f"Unhandled error messaging {connection.name}: {exc}")
            ok = False
            reason = f"exception: {type(exc).__name__}"

        _record(connection, ok, reason)

        if position < len(planned):
            delay = random_delay_seconds(min_delay, max_delay, rng)
            log_line(f"Waiting {delay:.1f}s before next message...")
            sleep(delay)

    _outreach_event(
        "summary",
        phase="batch",
        success=result.success_count,
        failure=result.failure_count,
        total=result.total,
    )
    return result


__all__ = ["run_batch"]
