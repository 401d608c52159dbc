"""Scrape connection names and profile links from the connections list view."""
from __future__ import annotations

import time
import urllib.parse
from typing import Any, Callable, List, Optional

from playwright.sync_api import Error as PWError

from . import config
from .browser import safe_goto, save_page_html, screenshot
from .delays import wait_seconds
from .errors import SelectorNotFound
from .logging_utils import _outreach_event
from .models import Connection
from .probe import first_attr, first_text, is_target_closed_error, probe, wait_for
from .selectors import CONNECTIONS_SELECTORS, ConnectionsSelectors
from .utils import log_line


def _normalize_url(raw: str, *, page_url: str) -> str:
    raw = (raw or "").strip()
    if not raw:
        return ""
    lowered = raw.lower()
    if lowered.startswith("javascript:") or raw == "#":
        return ""
    if raw.startswith("//"):
        return "https:" + raw
    if not urllib.parse.urlparse(raw).scheme and page_url:
        return urllib.parse.urljoin(page_url, raw)
    return raw


def _document_height(page: Any) -> int:
    height = page.evaluate("document.body.scrollHeight")
    return int(height) if isinstance(height, (int, float)) else 0


def scroll_to_load(
    page: Any,
    *,
    step_px: Optional[int] = None,
    interval_seconds: Optional[float] = None,
    max_seconds: Optional[float] = None,
    refresh_height: Optional[bool] = None,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """Scroll in fixed steps to trigger lazy loading; return the distance scrolled.

    Stops once the cumulative distance reaches the document height or
    ``max_seconds`` elapse. By default the height is measured once before the
    loop, so content appended while scrolling may be left unloaded; pass
    ``refresh_height=True`` to re-measure after every step.
    """

    step_px = config.SCROLL_STEP_PX if step_px is None else step_px
    interval_seconds = config.SCROLL_INTERVAL_SECONDS if interval_seconds is None else interval_seconds
    max_seconds = config.SCROLL_MAX_SECONDS if max_seconds is None else max_seconds
    refresh_height = config.SCROLL_REFRESH_HEIGHT if refresh_height is None else refresh_height

    started = clock()
    target_height = _document_height(page)
    scrolled = 0
    steps = 0
    reason = "height_reached"

    while scrolled < target_height:
        if clock() - started >= max_seconds:
            reason = "time_ceiling"
            break
        page.evaluate("(distance) => window.scrollBy(0, distance)", step_px)
        scrolled += step_px
        steps += 1
        wait_seconds(page, interval_seconds)
        if refresh_height:
            target_height = max(target_height, _document_height(page))

    _outreach_event(
        "scroll",
        steps=steps,
        scrolled=scrolled,
        target_height=target_height,
        refresh_height=refresh_height,
        reason=reason,
    )
    return scrolled


def extract_connections(
    page: Any, selectors: ConnectionsSelectors = CONNECTIONS_SELECTORS
) -> List[Connection]:
    """Extract connections from the rendered list in DOM order.

    Card selectors are tried in order; the first that yields at least one
    complete record wins. Cards missing a name or a link are dropped.
    """

    page_url = getattr(page, "url", "") or ""
    for card_selector in selectors.cards:
        try:
            cards = page.query_selector_all(card_selector)
        except PWError as exc:
            if is_target_closed_error(exc):
                raise
            log_line(f"[SCRAPE][WARN] Card selector {card_selector!r} failed: {exc}")
            continue
        except SelectorNotFound as exc:
            log_line(f"[SCRAPE][WARN] Card selector {card_selector!r} failed: {exc}")
            continue

        records: List[Connection] = []
        seen_urls: set[str] = set()
        dropped = 0
        for card in cards:
            name = first_text(card, selectors.names, label="connection_name")
            link = _normalize_url(
                first_attr(card, selectors.links, selectors.link_attribute, label="connection_link"),
                page_url=page_url,
            )
            if not name or not link:
                dropped += 1
                continue
            if link in seen_urls:
                continue
            seen_urls.add(link)
            records.append(Connection(name=name, profile_url=link))

        _outreach_event(
            "extract",
            selector=card_selector,
            cards=len(cards),
            kept=len(records),
            dropped=dropped,
        )
        if records:
            log_line(f"Found {len(records)} connections with selector: {card_selector}")
            return records

    return []


def scrape_connections(
    page: Any,
    *,
    selectors: ConnectionsSelectors = CONNECTIONS_SELECTORS,
    url: Optional[str] = None,
    debug: Optional[bool] = None,
) -> List[Connection]:
    """Navigate to the connections view, load it fully and return its records.

    Assumes the page holds an authenticated session. A missing list is
    reported as zero results (with a snapshot), not raised.
    """

    debug = config.DEBUG_MODE if debug is None else debug
    log_line("Navigating to connections page...")
    if not safe_goto(page, url or config.CONNECTIONS_URL, label="connections"):
        screenshot(page, "connections-page-not-loaded")
        return []

    found = probe(
        selectors.list_containers,
        wait_for(page),
        label="connections_list",
        timeout_ms=int(config.LIST_TIMEOUT_SECONDS * 1000),
    )
    if not found:
        log_line("Could not find connections list")
        screenshot(page, "connections-list-not-found")
        return []

    log_line("Scrolling to load connections...")
    scroll_to_load(page)
    if debug:
        save_page_html(page, config.LISTING_HTML_FILE)

    connections = extract_connections(page, selectors)
    if not connections:
        log_line("No connections found with any selector")
        screenshot(page, "no-connections-found")
    return connections


__all__ = ["scroll_to_load", "extract_connections", "scrape_connections"]
