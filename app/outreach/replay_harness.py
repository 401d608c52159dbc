"""Offline replay of connection extraction against captured listing HTML.

Debug runs save the rendered connections page (``connections-page.html``).
This harness feeds that HTML through the same ``extract_connections`` code
path without Playwright, which makes selector changes testable offline. Only
plain CSS selectors are supported; Playwright pseudo-classes such as
``:has-text()`` are not understood by BeautifulSoup.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from . import config
from .config_validation import validate_runtime_config
from .errors import SelectorNotFound
from .logging_utils import _outreach_event
from .models import Connection
from .scrape import extract_connections
from .selectors import CONNECTIONS_SELECTORS, ConnectionsSelectors
from .utils import log_line, save_json_file


class SnapshotElement:
    """Element-handle lookalike backed by a BeautifulSoup tag."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def _select_one(self, selector: str) -> Optional[Tag]:
        try:
            return self._tag.select_one(selector)
        except Exception as exc:  # noqa: BLE001
            raise SelectorNotFound(selector, f"unsupported selector {selector!r}: {exc}") from exc

    def query_selector(self, selector: str) -> Optional["SnapshotElement"]:
        found = self._select_one(selector)
        return SnapshotElement(found) if found is not None else None

    def query_selector_all(self, selector: str) -> List["SnapshotElement"]:
        try:
            return [SnapshotElement(tag) for tag in self._tag.select(selector)]
        except Exception as exc:  # noqa: BLE001
            raise SelectorNotFound(selector, f"unsupported selector {selector!r}: {exc}") from exc

    def text_content(self) -> str:
        return self._tag.get_text()

    def get_attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value


class HtmlSnapshotPage(SnapshotElement):
    """Read-only page stand-in for an HTML document captured from a live run."""

    def __init__(self, html: str, *, url: str = "") -> None:
        super().__init__(BeautifulSoup(html, "html.parser"))
        self.url = url

    @classmethod
    def from_file(cls, path: Path, *, url: str = "") -> "HtmlSnapshotPage":
        return cls(Path(path).read_text(encoding="utf-8", errors="ignore"), url=url)


@dataclass
class ReplayConfig:
    html_path: Path
    base_url: str = ""
    output_path: Optional[Path] = None


def run_replay(
    config_obj: ReplayConfig, selectors: ConnectionsSelectors = CONNECTIONS_SELECTORS
) -> Dict[str, Any]:
    validate_runtime_config("replay", require_credentials=False)
    _outreach_event("replay", phase="start", html=str(config_obj.html_path))

    page = HtmlSnapshotPage.from_file(
        config_obj.html_path, url=config_obj.base_url or config.CONNECTIONS_URL
    )
    connections: List[Connection] = extract_connections(page, selectors)
    for index, connection in enumerate(connections, start=1):
        log_line(f"[REPLAY] {index}. {connection.name} - {connection.profile_url}")

    if config_obj.output_path is not None:
        save_json_file(config_obj.output_path, [c.to_dict() for c in connections])

    _outreach_event("replay", phase="end", html=str(config_obj.html_path), found=len(connections))
    return {
        "html": str(config_obj.html_path),
        "found": len(connections),
        "connections": [c.to_dict() for c in connections],
    }


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Replay connection extraction offline.")
    parser.add_argument("html", help="Path to a captured connections-page.html")
    parser.add_argument("--base-url", default="")
    parser.add_argument("--output", type=Path, default=None, help="Write the records as JSON.")
    args = parser.parse_args()

    summary = run_replay(
        ReplayConfig(html_path=Path(args.html), base_url=args.base_url, output_path=args.output)
    )
    raise SystemExit(0 if summary["found"] else 1)
