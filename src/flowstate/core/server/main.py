"""Run the FlowState dashboard over MCP: ``python -m flowstate.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from flowstate.core.config.settings import Settings, get_settings
from flowstate.core.server.app import create_app

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def _check_bind(settings: Settings) -> None:
    """Dashboard tools act on the user's calendar; keep them off the network by default."""
    if settings.flowstate_allow_insecure_bind or _is_loopback_host(settings.flowstate_host):
        return
    raise RuntimeError(
        f"FlowState dashboard tools are unauthenticated; refusing to listen on "
        f"{settings.flowstate_host}. Bind to a loopback address or set "
        "FLOWSTATE_ALLOW_INSECURE_BIND=true."
    )


def run() -> None:
    """Serve the dashboard tools over Streamable HTTP."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.flowstate_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _check_bind(settings)

    mcp = create_app()
    logger.info(
        "FlowState dashboard listening on http://%s:%d (backend %s, animation scale %.2f)",
        settings.flowstate_host,
        settings.flowstate_port,
        settings.backend_base_url,
        settings.animation_time_scale,
    )
    mcp.run(
        transport="streamable-http",
        host=settings.flowstate_host,
        port=settings.flowstate_port,
    )


if __name__ == "__main__":
    run()
