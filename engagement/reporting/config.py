"""Configuration constants for the reporting pipeline."""
from __future__ import annotations

import os

# Most recent non-empty comments carried into a shop report
MAX_RECENT_COMMENTS: int = int(os.getenv("REPORT_RECENT_COMMENTS", "20"))

# Comments rendered verbatim in the markdown report (safety cap)
MAX_COMMENTS: int = int(os.getenv("REPORT_MAX_COMMENTS", "10"))

# Lowest/highest scoring questions listed in the analytics section
MAX_QUESTION_HIGHLIGHTS: int = int(os.getenv("REPORT_MAX_QUESTION_HIGHLIGHTS", "3"))

# Reports at or above this length are uploaded as a file instead of a message
SLACK_MESSAGE_LIMIT: int = int(os.getenv("REPORT_SLACK_MESSAGE_LIMIT", "2800"))
