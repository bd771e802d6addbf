"""MCP tools for viewing the activity log.

The activity log is PHI-free: it records which tools ran, when, and how
they ended, with inputs reduced to a hash.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from carewise.core.audit.logger import ActivityLogger

logger = logging.getLogger(__name__)

MAX_LOOKBACK_DAYS = 3650


def register_audit_tools(
    mcp: FastMCP,
    activity_logger: ActivityLogger,
) -> None:
    """Register activity log tools on the MCP server."""

    @mcp.tool
    async def activity_summary(
        ctx: Context,
        days: int = 30,
    ) -> str:
        """View recent assessment activity: saves, clears and analysis requests.

        Args:
            days: Number of days to look back, 1 to 3650 (default: 30).
        """
        if not 1 <= days <= MAX_LOOKBACK_DAYS:
            return json.dumps({
                "status": "error",
                "message": f"days must be between 1 and {MAX_LOOKBACK_DAYS}, got {days}",
            })
        since = (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()

        total_events = activity_logger.count_events(since=since)
        failure_count = activity_logger.count_failures(since=since)
        by_tool = activity_logger.count_by_tool(since=since)
        recent_events = activity_logger.get_events(since=since, limit=20)

        display_events = []
        for event in recent_events:
            display_events.append({
                "timestamp": event.get("timestamp"),
                "action": event.get("action"),
                "tool_name": event.get("tool_name"),
                "status": event.get("status"),
                "error_type": event.get("error_type"),
                "duration_ms": event.get("duration_ms"),
            })

        return json.dumps({
            "status": "ok",
            "period_days": days,
            "total_events": total_events,
            "failures": failure_count,
            "by_tool": by_tool,
            "recent_events": display_events,
            "note": "The activity log contains no health data.",
        }, indent=2)
