from __future__ import annotations

import itertools

from app.outreach import config
from app.outreach.scrape import extract_connections, scrape_connections, scroll_to_load
from app.outreach.selectors import ConnectionsSelectors
from tests.fake_page import CARD_HTML, CONNECTIONS_URL, FakePage


def _listing_page(html: str = CARD_HTML, heights: list[int] | None = None) -> FakePage:
    return FakePage(present={"ul.mn-connection-list"}, html=html, heights=heights or [250])


def test_scrape_keeps_complete_cards_in_order() -> None:
    page = _listing_page()

    connections = scrape_connections(page, url=CONNECTIONS_URL, debug=False)

    assert [c.name for c in connections] == ["Ada Lovelace", "Alan Turing", "Grace Hopper"]
    assert connections[0].profile_url == "https://www.linkedin.com/in/ada/"
    assert connections[1].profile_url == "https://www.linkedin.com/in/alan/"
    assert page.screenshots == []


def test_scrape_without_list_returns_empty_with_snapshot() -> None:
    page = FakePage(html=CARD_HTML)

    assert scrape_connections(page, url=CONNECTIONS_URL, debug=False) == []
    assert page.screenshots == ["connections-list-not-found.png"]


def test_scrape_with_no_cards_returns_empty() -> None:
    page = _listing_page(html="<ul class='mn-connection-list'></ul>")

    assert scrape_connections(page, url=CONNECTIONS_URL, debug=False) == []
    assert page.screenshots == ["no-connections-found.png"]


def test_debug_scrape_saves_listing_html() -> None:
    page = _listing_page()

    scrape_connections(page, url=CONNECTIONS_URL, debug=True)

    assert config.LISTING_HTML_FILE.read_text(encoding="utf-8") == CARD_HTML


def test_extract_falls_back_to_later_card_selector() -> None:
    html = """
    <div class="connection-card">
      <span class="actor-name">Linus</span>
      <a class="connection-card__link" href="https://example.com/people/linus">x</a>
    </div>
    """
    page = FakePage(html=html, url=CONNECTIONS_URL)

    connections = extract_connections(page)

    assert [(c.name, c.profile_url) for c in connections] == [
        ("Linus", "https://example.com/people/linus")
    ]


def test_extract_skips_unsupported_selector_and_collapses_duplicates() -> None:
    html = """
    <li class="card"><span class="n">Ada</span><a href="/in/ada/">x</a></li>
    <li class="card"><span class="n">Ada again</span><a href="/in/ada/">x</a></li>
    <li class="card"><span class="n">Bob</span><a href="javascript:void(0)">x</a></li>
    """
    selectors = ConnectionsSelectors(
        cards=("div:has-text('Ada')", "li.card"),
        names=(".n",),
        links=("a",),
    )
    page = FakePage(html=html, url=CONNECTIONS_URL)

    connections = extract_connections(page, selectors)

    assert [c.name for c in connections] == ["Ada"]


def test_scroll_uses_height_measured_once_by_default() -> None:
    page = FakePage(heights=[300, 1000, 1000, 1000])

    scrolled = scroll_to_load(page, step_px=100, interval_seconds=0.01, max_seconds=30)

    assert scrolled == 300
    assert page.scrolled == 300


def test_scroll_refresh_follows_growing_document() -> None:
    page = FakePage(heights=[300, 400, 500, 500])

    scrolled = scroll_to_load(
        page, step_px=100, interval_seconds=0.01, max_seconds=30, refresh_height=True
    )

    assert scrolled == 500


def test_scroll_stops_at_time_ceiling() -> None:
    ticks = itertools.count(start=0, step=10)
    page = FakePage(heights=[100_000])

    scrolled = scroll_to_load(
        page, step_px=100, interval_seconds=0, max_seconds=30, clock=lambda: next(ticks)
    )

    assert scrolled == 200
