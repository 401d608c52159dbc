from __future__ import annotations

"""CLI helper for printing the outcome summary of an outreach run."""

import argparse
from typing import Sequence

from . import telemetry


def _build_parser() -> argparse.ArgumentParser:
    """Return an argument parser for the run summary CLI."""

    parser = argparse.ArgumentParser(
        description="Show the messaging summary for an outreach run.",
    )
    parser.add_argument(
        "--run-id",
        help="Run ID to summarise (the part after run_ in runs/run_<id>.json).",
    )
    parser.add_argument(
        "--latest",
        action="store_true",
        help="Summarise the most recent run.",
    )
    parser.add_argument(
        "--failures",
        action="store_true",
        help="List failed connections with their reason.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the run summary CLI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.run_id is None and not args.latest:
        parser.error("You must provide --run-id or --latest")

    payload = telemetry.load_run(args.run_id)
    if payload is None:
        parser.error(f"Run {args.run_id or 'latest'} does not exist")

    print(f"Run {payload['run_id']} ({payload.get('mode')}, {payload.get('status', 'unknown')})")
    for key, count in sorted((payload.get("summary") or {}).items()):
        print(f"  {key.replace('count_', '')}: {count}")

    if payload.get("error_code"):
        print(f"\nFatal error: {payload['error_code']} {payload.get('error', '')}".rstrip())

    if args.failures:
        failed = [e for e in payload.get("entries", []) if e.get("status") == "failed"]
        if failed:
            print("\nFailed connections:")
            for entry in failed:
                print(f"  {entry.get('name')} - {entry.get('profile_url')} ({entry.get('reason')})")

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
