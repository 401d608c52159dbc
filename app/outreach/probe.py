"""Ordered selector fallback: try each locator until one resolves.

``probe`` is deliberately generic. The ``attempt`` callable receives the
candidate selector and the per-candidate timeout in milliseconds and either
returns a value or raises; Playwright timeouts, Playwright errors and
``SelectorNotFound`` count as a miss for that candidate only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from playwright.sync_api import Error as PWError, TimeoutError as PWTimeout

from .errors import AllCandidatesFailed, SelectorNotFound
from .logging_utils import _outreach_event

T = TypeVar("T")

Attempt = Callable[[str, int], T]


def is_target_closed_error(exc: BaseException) -> bool:
    """Return ``True`` if *exc* indicates the Playwright target is gone."""

    message = str(exc)
    return any(
        marker in message
        for marker in (
            "Target closed",
            "Target crashed",
            "has been closed",
            "Execution context was destroyed",
        )
    )


@dataclass
class ProbeResult(Generic[T]):
    label: str
    found: bool
    selector: Optional[str] = None
    value: Optional[T] = None
    tried: List[str] = field(default_factory=list)

    @property
    def attempts(self) -> int:
        return len(self.tried)

    def __bool__(self) -> bool:
        return self.found

    def raise_for_failure(self) -> "ProbeResult[T]":
        if not self.found:
            raise AllCandidatesFailed(self.label, self.tried)
        return self


def probe(
    candidates: Sequence[str],
    attempt: Attempt[T],
    *,
    label: str,
    timeout_ms: int = 5000,
    quiet: bool = False,
) -> ProbeResult[T]:
    """Try ``candidates`` in order and return the first successful attempt."""

    result: ProbeResult[T] = ProbeResult(label=label, found=False)
    for selector in candidates:
        result.tried.append(selector)
        try:
            value = attempt(selector, timeout_ms)
        except PWTimeout as exc:
            outcome = "timeout"
            error: BaseException = exc
        except SelectorNotFound as exc:
            outcome = "not_found"
            error = exc
        except PWError as exc:
            if is_target_closed_error(exc):
                raise
            outcome = "error"
            error = exc
        else:
            result.found = True
            result.selector = selector
            result.value = value
            if not quiet:
                _outreach_event("probe", label=label, selector=selector, outcome="found")
            return result

        if not quiet:
            _outreach_event(
                "probe",
                label=label,
                selector=selector,
                outcome=outcome,
                error=str(error).splitlines()[0] if str(error) else type(error).__name__,
            )

    if not quiet:
        _outreach_event(
            "probe", label=label, outcome="all_candidates_failed", tried=len(result.tried)
        )
    return result


# ---------------------------------------------------------------------------
# Attempt factories
# ---------------------------------------------------------------------------


def wait_for(page: Any, *, state: str = "visible") -> Attempt[Any]:
    """Attempt that waits for the selector and returns its element handle."""

    def _attempt(selector: str, timeout_ms: int) -> Any:
        handle = page.wait_for_selector(selector, timeout=timeout_ms, state=state)
        if handle is None:
            raise SelectorNotFound(selector)
        return handle

    return _attempt


def click(page: Any) -> Attempt[str]:
    """Attempt that clicks the selector and returns it."""

    def _attempt(selector: str, timeout_ms: int) -> str:
        page.click(selector, timeout=timeout_ms)
        return selector

    return _attempt


def _query_text(element: Any) -> Attempt[str]:
    def _attempt(selector: str, _timeout_ms: int) -> str:
        node = element.query_selector(selector)
        text = (node.text_content() or "").strip() if node is not None else ""
        if not text:
            raise SelectorNotFound(selector)
        return " ".join(text.split())

    return _attempt


def _query_attr(element: Any, attribute: str) -> Attempt[str]:
    def _attempt(selector: str, _timeout_ms: int) -> str:
        node = element.query_selector(selector)
        value = (node.get_attribute(attribute) or "").strip() if node is not None else ""
        if not value:
            raise SelectorNotFound(selector)
        return value

    return _attempt


def first_text(element: Any, candidates: Iterable[str], *, label: str = "text") -> str:
    """Return the trimmed text of the first candidate with content, else ``""``."""

    found = probe(list(candidates), _query_text(element), label=label, quiet=True)
    return found.value or ""


def first_attr(
    element: Any, candidates: Iterable[str], attribute: str, *, label: str = "attribute"
) -> str:
    """Return the first non-empty ``attribute`` among candidates, else ``""``."""

    found = probe(list(candidates), _query_attr(element, attribute), label=label, quiet=True)
    return found.value or ""


__all__ = [
    "ProbeResult",
    "probe",
    "wait_for",
    "click",
    "first_text",
    "first_attr",
    "is_target_closed_error",
]
