"""CareWise server entry point — ``python -m carewise.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from carewise.core.config.settings import get_settings
from carewise.core.server.app import create_app


def _is_loopback_host(host: str) -> bool:
    if host in {"localhost"}:
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def run() -> None:
    """Start the CareWise MCP server with Streamable HTTP transport."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.carewise_log_level.upper(), logging.INFO))

    logger = logging.getLogger(__name__)
    if not settings.carewise_allow_insecure_bind and not _is_loopback_host(settings.carewise_host):
        raise RuntimeError(
            "Refusing to bind CareWise server to a non-loopback host without an auth layer. "
            "Set CAREWISE_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    logger.info(
        "Starting CareWise Health server on %s:%d",
        settings.carewise_host,
        settings.carewise_port,
    )

    mcp = create_app()
    mcp.run(
        transport="streamable-http",
        host=settings.carewise_host,
        port=settings.carewise_port,
    )


if __name__ == "__main__":
    run()
