"""Render shop reports using Jinja2 templates."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader
from slack_sdk.errors import SlackApiError

from engagement.analysis.sentinels import InsufficientData
from engagement.reporting import config
from engagement.reporting.context import build_report_context
from engagement.reporting.models import ShopAnalytics, ShopReport, ShopTrend

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Markdown/slack templates don’t need HTML escaping – it breaks apostrophes etc.
# Disable autoescape to preserve original characters.
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_report(
    report: ShopReport,
    analytics: Union[ShopAnalytics, InsufficientData, None] = None,
    trend: Optional[ShopTrend] = None,
) -> str:
    """Render a Slack-friendly markdown report from ``ShopReport``."""

    context = build_report_context(report, analytics, trend)

    template = _env.get_template("report.md.j2")
    return template.render(**context.to_dict())


def post_report_to_slack(
    *,
    report: ShopReport,
    client,
    channel: str,
    analytics: Union[ShopAnalytics, InsufficientData, None] = None,
    trend: Optional[ShopTrend] = None,
) -> None:
    """Send the rendered report to Slack *channel* using *client* (WebClient)."""

    # ------------------------------------------------------------------
    # 1. Post parent message
    # ------------------------------------------------------------------

    title = report.shop_name or report.shop_id
    try:
        parent_resp = client.chat_postMessage(
            channel=channel,
            text=f"*Engagement Report for {title}*",
        )
    except SlackApiError as exc:
        logger.warning(
            "Failed to post report header for shop %s: %s",
            report.shop_id,
            exc.response.get("error"),
        )
        raise

    parent_ts = parent_resp["ts"]
    report_text = render_report(report, analytics, trend)
    report_len = len(report_text)
    logger.debug(
        "Report generated for shop=%s channel=%s len=%d",
        report.shop_id,
        channel,
        report_len,
    )

    # ------------------------------------------------------------------
    # 2. Post threaded report (message or file)
    # ------------------------------------------------------------------

    try:
        if report_len < config.SLACK_MESSAGE_LIMIT:
            logger.debug("Posting report as chat message (len=%d)", report_len)
            client.chat_postMessage(
                channel=channel,
                text=report_text,
                thread_ts=parent_ts,
            )
        else:
            logger.debug("Uploading report as file (len=%d) via files_upload_v2", report_len)
            client.files_upload_v2(
                channels=channel,
                title=f"Engagement Report {report.shop_id}",
                content=report_text,
                filename=f"engagement_{report.shop_id}.md",
                thread_ts=parent_ts,
            )
    except SlackApiError as exc:
        logger.warning(
            "Failed to deliver report body for shop %s: %s",
            report.shop_id,
            exc.response.get("error"),
        )
        raise
    logger.info("Report for shop %s delivered to %s", report.shop_id, channel)
