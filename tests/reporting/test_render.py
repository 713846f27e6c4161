"""Unit tests for report rendering and Slack posting helpers."""
from __future__ import annotations

import datetime
from unittest.mock import MagicMock, patch

import pytest
from slack_sdk.errors import SlackApiError

from engagement.reporting.aggregator import (
    build_shop_analytics,
    build_shop_report,
    build_shop_trend,
)
from engagement.reporting.models import ShopReport
from engagement.reporting.render import post_report_to_slack, render_report
from engagement.responses import Response


def _responses():
    return [
        Response(answers={f"q{i}": v for i in range(1, 11)}, enps_score=e, comment=c)
        for v, e, c in ((4, 9, "Great crew"), (2, 4, None), (3, 8, "Need more staff"))
    ]


@pytest.fixture()
def report() -> ShopReport:
    return build_shop_report(
        _responses(), shop_id="s1", shop_name="Shibuya", industry="RESTAURANT"
    )


def test_render_report_basic(report: ShopReport):
    out = render_report(report)

    assert "Shibuya" in out
    assert "RESTAURANT" in out
    assert "*Overall score:* 3.00" in out
    assert "Staffing & Resources (lower is better)" in out
    assert "> Great crew" in out
    assert "*Analytics*" not in out


def test_render_report_with_analytics(report: ShopReport):
    analytics = build_shop_analytics(_responses(), shop_id="s1")
    out = render_report(report, analytics)

    assert "*Analytics*" in out
    assert "Lowest scoring questions" in out
    assert "Correlation analysis needs at least 10 responses." in out


def test_post_report_short_message(report: ShopReport):
    with patch("engagement.reporting.render.render_report", return_value="short") as render_mp:
        client = MagicMock()
        client.chat_postMessage.return_value = {"ts": "111.222"}
        post_report_to_slack(report=report, client=client, channel="C123")

    render_mp.assert_called_once()
    assert client.chat_postMessage.call_count == 2
    client.chat_postMessage.assert_called_with(
        channel="C123", text="short", thread_ts="111.222"
    )
    client.files_upload_v2.assert_not_called()


def test_post_report_long_upload(report: ShopReport):
    long_text = "x" * 3000
    with patch("engagement.reporting.render.render_report", return_value=long_text):
        client = MagicMock()
        client.chat_postMessage.return_value = {"ts": "111.222"}
        post_report_to_slack(report=report, client=client, channel="C123")

    client.files_upload_v2.assert_called_once()
    kwargs = client.files_upload_v2.call_args.kwargs
    assert kwargs["content"] == long_text
    assert kwargs["filename"] == "engagement_s1.md"
    assert kwargs["thread_ts"] == "111.222"
    client.chat_postMessage.assert_called_once_with(
        channel="C123", text="*Engagement Report for Shibuya*"
    )


def test_post_report_header_failure_propagates(report: ShopReport, caplog):
    client = MagicMock()
    client.chat_postMessage.side_effect = SlackApiError(
        "failed", {"ok": False, "error": "channel_not_found"}
    )
    with pytest.raises(SlackApiError):
        post_report_to_slack(report=report, client=client, channel="C404")

    assert "channel_not_found" in caplog.text
    client.files_upload_v2.assert_not_called()


def test_post_report_upload_failure_is_logged(report: ShopReport, caplog):
    client = MagicMock()
    client.chat_postMessage.return_value = {"ts": "111.222"}
    client.files_upload_v2.side_effect = SlackApiError(
        "failed", {"ok": False, "error": "not_in_channel"}
    )
    with patch("engagement.reporting.render.render_report", return_value="x" * 3000):
        with pytest.raises(SlackApiError):
            post_report_to_slack(report=report, client=client, channel="C123")

    assert "not_in_channel" in caplog.text
    assert "delivered" not in caplog.text


def test_post_report_threaded_message_failure_is_logged(report: ShopReport, caplog):
    client = MagicMock()
    client.chat_postMessage.side_effect = [
        {"ts": "111.222"},
        SlackApiError("failed", {"ok": False, "error": "msg_too_long"}),
    ]
    with patch("engagement.reporting.render.render_report", return_value="short"):
        with pytest.raises(SlackApiError):
            post_report_to_slack(report=report, client=client, channel="C123")

    assert "msg_too_long" in caplog.text


def test_render_report_with_trend(report: ShopReport):
    now = datetime.datetime(2026, 10, 16, tzinfo=datetime.timezone.utc)
    trend = build_shop_trend(_responses(), shop_id="s1", months=3, now=now)
    out = render_report(report, trend=trend)

    assert "*Monthly trend*" in out
    assert "• 2026-08: no responses" in out
    assert out.index("*Monthly trend*") < out.index("*Recent comments*")
