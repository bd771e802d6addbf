"""Activity logger — PHI-free record of tool invocations.

Every tool call is recorded with its name, a hash of its input, its
outcome and duration. No health values are written:

* ``tool_input_hash`` — SHA-256 of canonical JSON, never the raw input.
* ``metadata`` — counts and category labels only.
"""

from __future__ import annotations

import hashlib
import json
import logging
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from carewise.core.storage.database import DatabaseError, HealthDatabase

logger = logging.getLogger(__name__)


def _hash_input(data: Any) -> str:
    """SHA-256 hash of canonical JSON, or empty string if not serializable."""
    try:
        canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()
    except (TypeError, ValueError):
        return ""


@dataclass
class ActivityEvent:
    """A single activity log entry."""

    action: str                          # 'tool_invocation' | 'profile_saved' | 'profile_cleared'
    tool_name: str = ""
    tool_input_hash: str = ""
    duration_ms: float | None = None
    status: str = "success"              # 'success' | 'failure'
    error_type: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class ActivityLogger:
    """Records activity events to the ``activity_log`` SQLite table.

    Usage::

        activity = ActivityLogger(health_db)
        activity.log_tool_call("get_health_risks", metadata={"risk_count": 2})
    """

    def __init__(self, database: HealthDatabase) -> None:
        self._db = database

    # ---------------------------------------------------------------
    # Write
    # ---------------------------------------------------------------

    def log_event(self, event: ActivityEvent) -> str:
        """Insert an event and return its UUID, or "" if the write failed.

        A failed write is logged and dropped so it never breaks the caller.
        """
        event_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()

        metadata_json = (
            json.dumps(event.metadata, separators=(",", ":"))
            if event.metadata
            else None
        )

        try:
            conn = self._db.connection
            conn.execute(
                """INSERT INTO activity_log
                   (id, timestamp, action, tool_name, tool_input_hash,
                    duration_ms, status, error_type, metadata_json)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    event_id,
                    now,
                    event.action,
                    event.tool_name or None,
                    event.tool_input_hash or None,
                    event.duration_ms,
                    event.status,
                    event.error_type,
                    metadata_json,
                ),
            )
            conn.commit()
        except (DatabaseError, sqlite3.Error, TypeError, ValueError):
            logger.exception("Failed to write activity event; event lost")
            return ""

        return event_id

    def log_tool_call(
        self,
        tool_name: str,
        tool_input: Any = None,
        *,
        action: str = "tool_invocation",
        duration_ms: float | None = None,
        status: str = "success",
        error_type: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Convenience wrapper for logging a tool invocation.

        Args:
            tool_name: Name of the MCP tool.
            tool_input: Tool input data (hashed, never stored raw).
            action: Event action, 'tool_invocation' unless the call changed stored data.
            duration_ms: Tool execution duration in milliseconds.
            status: 'success' or 'failure'.
            error_type: Exception class name on failure.
            metadata: Additional non-PHI metadata.
        """
        return self.log_event(ActivityEvent(
            action=action,
            tool_name=tool_name,
            tool_input_hash=_hash_input(tool_input) if tool_input else "",
            duration_ms=duration_ms,
            status=status,
            error_type=error_type,
            metadata=metadata or {},
        ))

    # ---------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------

    def get_events(
        self,
        *,
        action: str | None = None,
        tool_name: str | None = None,
        since: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Query events with optional filters, newest first."""
        conditions: list[str] = []
        params: list[Any] = []

        if action:
            conditions.append("action = ?")
            params.append(action)
        if tool_name:
            conditions.append("tool_name = ?")
            params.append(tool_name)
        if since:
            conditions.append("timestamp >= ?")
            params.append(since)

        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        query = f"SELECT * FROM activity_log{where} ORDER BY timestamp DESC LIMIT ?"
        params.append(limit)

        rows = self._db.connection.execute(query, params).fetchall()
        return [dict(row) for row in rows]

    def count_events(self, *, since: str | None = None) -> int:
        """Count total events, optionally since a timestamp."""
        if since:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM activity_log WHERE timestamp >= ?", (since,)
            ).fetchone()
        else:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM activity_log"
            ).fetchone()
        return row[0]

    def count_failures(self, *, since: str | None = None) -> int:
        if since:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM activity_log WHERE status = 'failure' AND timestamp >= ?",
                (since,),
            ).fetchone()
        else:
            row = self._db.connection.execute(
                "SELECT COUNT(*) FROM activity_log WHERE status = 'failure'"
            ).fetchone()
        return row[0]

    def count_by_tool(self, *, since: str | None = None) -> dict[str, int]:
        """Event counts per tool name, optionally since a timestamp."""
        query = "SELECT tool_name, COUNT(*) FROM activity_log WHERE tool_name IS NOT NULL"
        params: list[Any] = []
        if since:
            query += " AND timestamp >= ?"
            params.append(since)
        query += " GROUP BY tool_name ORDER BY tool_name"
        rows = self._db.connection.execute(query, params).fetchall()
        return {row[0]: row[1] for row in rows}
