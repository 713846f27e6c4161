"""Command-line bootstrap for the engagement report.

Reads a JSON export produced by the persistence layer, builds the shop report
(optionally with the analytics deep-dive and a monthly trend) and prints the
markdown or posts it to Slack. Environment loading and logging setup happen
only here, so the scoring modules stay free of import-time side effects.

Expected input::

    {
      "shop": {"id": "s1", "name": "Shibuya", "industry": "RESTAURANT"},
      "responses": [{"answers": {"q1": 4}, "enpsScore": 9, "submittedAt": "..."}],
      "previous_responses": [...],            # optional comparison period
      "benchmarks": {"MANAGER_LEADERSHIP": 3.4, ...},
      "industry_responses": {"s1": [...], "s2": [...]},  # optional cohort
      "trend_responses": [...]            # optional, defaults to "responses"
    }
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from engagement.reporting.aggregator import (
    build_shop_analytics,
    build_shop_report,
    build_shop_trend,
)
from engagement.reporting.render import post_report_to_slack, render_report
from engagement.responses import Response

logger = logging.getLogger("engagement")


def _configure_logging() -> None:
    logging_level = os.environ.get("ENGAGEMENT_LOG_LEVEL", "INFO")
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging_level
    )


def _responses(rows: Optional[Sequence[Dict[str, Any]]]) -> List[Response]:
    return [Response.from_dict(row) for row in rows or []]


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{raw!r} is not an integer") from None
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive number of months")
    return value


def _time_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise argparse.ArgumentTypeError(f"unknown time zone {name!r}") from None


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="engagement-report",
        description="Build an employee-engagement report from a JSON export.",
    )
    parser.add_argument("input", type=Path, help="JSON export with shop responses")
    parser.add_argument(
        "--analytics",
        action="store_true",
        help="include question stats, correlations, patterns and percentile",
    )
    parser.add_argument(
        "--trend",
        type=_positive_int,
        metavar="MONTHS",
        help="append a monthly trend over the last MONTHS calendar months",
    )
    parser.add_argument(
        "--timezone",
        type=_time_zone,
        default=None,
        help="IANA time zone whose calendar defines trend months (default: timestamps as given)",
    )
    parser.add_argument(
        "--slack-channel",
        default=os.getenv("REPORT_SLACK_CHANNEL"),
        help="post the report to this Slack channel instead of printing it",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for ``engagement-report``; returns a process exit code."""

    load_dotenv()
    _configure_logging()
    args = _parse_args(argv)

    try:
        payload = json.loads(args.input.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Cannot read %s: %s", args.input, exc)
        return 1

    shop = payload.get("shop") or {}
    shop_id = shop.get("id", "unknown")
    responses = _responses(payload.get("responses"))
    previous = payload.get("previous_responses")

    report = build_shop_report(
        responses,
        shop_id=shop_id,
        shop_name=shop.get("name"),
        industry=shop.get("industry"),
        benchmarks=payload.get("benchmarks"),
        previous_responses=_responses(previous) if previous is not None else None,
    )

    analytics = None
    if args.analytics:
        industry = {
            sid: _responses(rows)
            for sid, rows in (payload.get("industry_responses") or {}).items()
        }
        analytics = build_shop_analytics(
            responses, shop_id=shop_id, industry_responses=industry or None
        )

    trend = None
    if args.trend:
        trend_rows = payload.get("trend_responses")
        trend = build_shop_trend(
            _responses(trend_rows) if trend_rows is not None else responses,
            shop_id=shop_id,
            months=args.trend,
            tz=args.timezone,
        )

    if not args.slack_channel:
        print(render_report(report, analytics, trend))
        return 0

    token = os.getenv("SLACK_BOT_TOKEN")
    if not token:
        logger.error("Environment variable SLACK_BOT_TOKEN is required to post to Slack.")
        return 1

    from slack_sdk import WebClient  # local import: only needed for delivery

    post_report_to_slack(
        report=report,
        client=WebClient(token=token),
        channel=args.slack_channel,
        analytics=analytics,
        trend=trend,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
