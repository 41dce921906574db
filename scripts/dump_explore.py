#!/usr/bin/env python3
"""Dump everything an explore view would read for a query string.

This script decodes the filters from an explore URL query, then calls
every read endpoint and prints the parsed models (or JSON) so you can
check what the API returns for a given view.

Usage
-----
Set the API URL and run::

    export CONFLICT_API_URL="http://localhost:3001"
    python scripts/dump_explore.py "countries=Mali&minDeaths=5"

Options::

    --page N             Events table page (default: 1)
    --page-size N        Events table page size (default: 25)
    --event ID           Also fetch this event's detail record
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --verbose            Enable DEBUG logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyconflict import ConflictClient, ConflictConfig, ConflictError, analytics_panels  # noqa: E402
from pyconflict.query import decode, encode  # noqa: E402
from pyconflict.views import StatsSummary  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _dump(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", exclude={"raw"})
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


async def _read(label: str, coro: Any, out: dict[str, Any]) -> None:
    try:
        out[label] = _dump(await coro)
    except ConflictError as exc:
        out[label] = {"error": type(exc).__name__, "message": str(exc)}


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    config = ConflictConfig.from_env()
    filters = decode(args.query)
    out: dict[str, Any] = {
        "query": encode(filters),
        "api_url": config.api_url,
        "analytics": [
            {"panel": str(target.panel), "url": target.url, "notice": target.notice}
            for target in analytics_panels(config.analytics)
        ],
    }

    async with ConflictClient(config) as client:
        out["available"] = await client.is_available()
        await _read("lookups", client.get_lookups(), out)
        await _read("events", client.get_events(filters, page=args.page, page_size=args.page_size), out)
        await _read("series", client.get_series(filters), out)
        await _read("regions", client.get_region_aggregates(filters), out)
        await _read("heat", client.get_heat(filters), out)
        if args.event:
            await _read("event", client.get_event(args.event), out)

    series = out.get("series")
    if isinstance(series, list):
        out["summary"] = StatsSummary(
            total_events=sum(point["event_count"] for point in series),
            total_deaths=sum(point["death_count"] for point in series),
            total_civilians=sum(point["civilian_death_count"] for point in series),
        ).model_dump()
    return out


def _format_text(out: dict[str, Any]) -> str:
    lines: list[str] = []
    for key, value in out.items():
        lines.append(_section(key))
        lines.append(json.dumps(value, indent=2, default=str, ensure_ascii=False))
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump the data behind an explore view.")
    parser.add_argument("query", nargs="?", default="", help="Explore URL query string")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=25)
    parser.add_argument("--event", help="Event identifier to fetch")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--output", type=Path, help="Write output to FILE")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        out = asyncio.run(_run(args))
    except ConflictError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    text = json.dumps(out, indent=2, default=str, ensure_ascii=False) if args.json else _format_text(out)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
