"""Randomised pacing between outbound actions."""
from __future__ import annotations

import random
from typing import Any, Optional


def random_delay_seconds(
    min_seconds: float, max_seconds: float, rng: Optional[random.Random] = None
) -> float:
    """Return a duration drawn uniformly from ``[min_seconds, max_seconds]``."""

    if min_seconds < 0 or max_seconds < min_seconds:
        raise ValueError(
            f"invalid delay bounds: min={min_seconds!r} max={max_seconds!r}"
        )
    source = rng if rng is not None else random
    return source.uniform(min_seconds, max_seconds)


def wait_seconds(page: Optional[Any], seconds: float) -> None:
    """Wait safely for ``seconds`` only if *page* remains open."""

    if page is None:
        return

    if seconds is None or seconds <= 0:
        return

    if not page.is_closed():
        page.wait_for_timeout(int(seconds * 1000))


__all__ = ["random_delay_seconds", "wait_seconds"]
