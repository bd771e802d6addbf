"""CareWise Health MCP Server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from carewise.core.audit.logger import ActivityLogger
from carewise.core.config.settings import get_settings
from carewise.core.storage.database import DatabaseError, HealthDatabase
from carewise.core.storage.encryption import EncryptionError, FieldEncryptor
from carewise.core.storage.repository import (
    EncryptedKeyValueRepository,
    InMemoryKeyValueRepository,
    KeyValueRepository,
    SQLiteKeyValueRepository,
)
from carewise.domains.health.connectors.profile_store import HealthProfileStore, ProfileStoreError
from carewise.domains.health.tools.assessment_tools import register_assessment_tools
from carewise.domains.health.tools.audit_tools import register_audit_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "CareWise Health"
SERVER_VERSION = "0.1.0"


def create_app(
    *,
    repository_override: KeyValueRepository | None = None,
    database_override: HealthDatabase | None = None,
) -> FastMCP:
    """Create and configure the CareWise Health MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Opens the data bank and the activity log (when an encryption key is set)
    3. Builds the profile store over the chosen key-value repository
    4. Registers all tools
    """
    settings = get_settings()

    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "CareWise personal health self-assessment. Save an assessment "
            "(age, height, weight, lifestyle, conditions, family history), then "
            "ask for BMI, BMI category, potential health risks with preventive "
            "measures, or the full analysis. Results are general wellness "
            "information, not medical advice."
        ),
    )

    # --- Initialize storage ---
    database: HealthDatabase | None = database_override
    repository: KeyValueRepository | None = repository_override
    storage_enabled = repository_override is not None

    if repository is None and settings.encryption_key:
        try:
            encryptor = FieldEncryptor(settings.encryption_key)
            if database is None:
                database = HealthDatabase(settings.db_path)
                database.initialize()
            repository = EncryptedKeyValueRepository(SQLiteKeyValueRepository(database), encryptor)
            storage_enabled = True
            logger.info(
                "Health data bank initialized: %s (schema v%d)",
                settings.db_path,
                database.get_schema_version(),
            )
        except (EncryptionError, DatabaseError) as exc:
            database = database_override
            logger.error("Failed to initialize storage: %s", exc)
            logger.warning("Continuing without persistence; assessments will not be stored")
    elif repository is None:
        logger.info(
            "No ENCRYPTION_KEY configured; running without persistence. "
            "Set ENCRYPTION_KEY to keep assessments between restarts."
        )

    if repository is None:
        repository = InMemoryKeyValueRepository()

    store = HealthProfileStore(repository, key=settings.profile_key)
    activity_logger = ActivityLogger(database) if database is not None else None

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        status = "ok"
        try:
            has_assessment: bool | None = store.has_profile()
        except ProfileStoreError as exc:
            logger.error("Data bank check failed: %s", exc)
            status, has_assessment = "degraded", None
        return {
            "status": status,
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "storage_enabled": storage_enabled,
            "activity_log_enabled": activity_logger is not None,
            "has_assessment": has_assessment,
        }

    register_assessment_tools(server, store, activity_logger)
    logger.info("Assessment tools registered")

    if activity_logger is not None:
        register_audit_tools(server, activity_logger)
        logger.info("Activity log tools registered")

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
