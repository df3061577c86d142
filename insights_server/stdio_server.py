"""Stdio MCP server using FastMCP from the mcp Python SDK.

This module creates a standard MCP server that speaks the JSON-RPC
protocol over stdio, making it compatible with:
- Claude Desktop (claude_desktop_config.json)
- MCP Inspector (npx @modelcontextprotocol/inspector)
- Any MCP client that uses the stdio transport

It is a thin wrapper: all business logic lives in the service layer.
The ServiceContainer handles initialization and dependency wiring.

Usage::

    # Run directly (stdio transport):
    python -m insights_server.stdio_server

    # Test with MCP Inspector:
    npx @modelcontextprotocol/inspector python -m insights_server.stdio_server
"""

import asyncio
import json
import logging

from mcp.server.fastmcp import FastMCP

from .container import ServiceContainer
from .services.view_selector import ScopeNotFoundError

logger = logging.getLogger(__name__)

# Create the FastMCP server instance
mcp = FastMCP("FinOps Org Insights")

# Module-level container (initialized in main)
_container: ServiceContainer | None = None

SCOPE_SUGGESTION = "Call get_org_hierarchy to list valid scope ids."


def _error_response(error: str, message: str, suggestion: str) -> str:
    return json.dumps({
        "error": error,
        "message": message,
        "suggestion": suggestion,
    })


# ---------------------------------------------------------------------------
# Tool 1: get_org_hierarchy
# ---------------------------------------------------------------------------
@mcp.tool()
async def get_org_hierarchy() -> str:
    """List the organisation hierarchy.

    Returns every Area with its Departments, Teams and cloud accounts, and
    the number of accounts under each node.

    IMPORTANT: This is the starting point for scoped questions. The "id" of
    any node can be passed as scope_id to get_dashboard_view, get_chart_data
    and get_assistant_context. NEVER guess ids.
    """
    _ensure_initialized()
    from .tools import get_org_hierarchy as _hierarchy

    result = await _hierarchy(dataset_service=_container.dataset_service)
    return json.dumps(result.model_dump(mode="json"), default=str)


# ---------------------------------------------------------------------------
# Tool 2: get_dashboard_view
# ---------------------------------------------------------------------------
@mcp.tool()
async def get_dashboard_view(scope_id: str | None = None) -> str:
    """Get the dashboard for one scope of the organisation.

    Returns total spend and forecast, forecast variance with budget status,
    vulnerability and safe deployment risk totals, the table rows for the
    next level down (with a security badge per row), account details when
    the scope is a single account, and every chart projection.

    Args:
        scope_id: Id of an Area, Department, Team or Account from
            get_org_hierarchy. Omit for the global view.
    """
    _ensure_initialized()
    from .tools import get_dashboard_view as _dashboard

    try:
        result = await _dashboard(
            dataset_service=_container.dataset_service,
            dashboard_service=_container.dashboard_service,
            scope_id=scope_id,
        )
    except ScopeNotFoundError as e:
        logger.error(f"Dashboard view failed: {e}")
        return _error_response("scope_not_found", str(e), SCOPE_SUGGESTION)

    return json.dumps(result.model_dump(mode="json"), default=str)


# ---------------------------------------------------------------------------
# Tool 3: get_chart_data
# ---------------------------------------------------------------------------
@mcp.tool()
async def get_chart_data(chart: str, scope_id: str | None = None) -> str:
    """Get a single chart projection for one scope.

    Args:
        chart: One of spend_by_area, spend_by_provider, spend_by_tier,
            spend_by_sku_type, top_accounts, top_skus, vulnerabilities_by_tier,
            vulnerabilities_by_area, deployment_risks_by_tier,
            deployment_risks_by_area, monthly_trend
        scope_id: Id of an Area, Department, Team or Account from
            get_org_hierarchy. Omit for the global view.
    """
    _ensure_initialized()
    from .tools import get_chart_data as _chart

    try:
        result = await _chart(
            dataset_service=_container.dataset_service,
            dashboard_service=_container.dashboard_service,
            chart=chart,
            scope_id=scope_id,
        )
    except ScopeNotFoundError as e:
        logger.error(f"Chart data failed: {e}")
        return _error_response("scope_not_found", str(e), SCOPE_SUGGESTION)
    except ValueError as e:
        logger.error(f"Chart data failed: {e}")
        return _error_response(
            "invalid_chart", str(e), "Use one of the chart names listed in the message."
        )

    return json.dumps(result.model_dump(mode="json"), default=str)


# ---------------------------------------------------------------------------
# Tool 4: get_assistant_context
# ---------------------------------------------------------------------------
@mcp.tool()
async def get_assistant_context(scope_id: str | None = None) -> str:
    """Get the analysis context for one scope.

    Returns compact JSON with two parts:
    - current_view: totals, forecast variance, top spenders and the monthly
      trend of the selected scope
    - available_entities: the monthly spend of EVERY Area and Department

    Figures are rounded to whole dollars. Use available_entities to answer
    questions about entities outside the selected scope instead of asking
    the user to navigate.

    Args:
        scope_id: Id of an Area, Department, Team or Account from
            get_org_hierarchy. Omit for the global view.
    """
    _ensure_initialized()
    from .tools import get_assistant_context as _context

    try:
        result = await _context(
            dataset_service=_container.dataset_service,
            context_service=_container.context_service,
            scope_id=scope_id,
        )
    except ScopeNotFoundError as e:
        logger.error(f"Assistant context failed: {e}")
        return _error_response("scope_not_found", str(e), SCOPE_SUGGESTION)

    return result.serialized


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ensure_initialized() -> None:
    """Raise if the container hasn't been initialized yet."""
    if _container is None or not _container.initialized:
        raise RuntimeError(
            "ServiceContainer not initialized. "
            "Call initialize_container() before using tools."
        )


async def initialize_container() -> ServiceContainer:
    """Initialize the ServiceContainer for the stdio server."""
    global _container
    from .config import settings

    _container = ServiceContainer(settings=settings())
    await _container.initialize()
    return _container


async def shutdown_container() -> None:
    """Shut down the ServiceContainer."""
    global _container
    if _container:
        await _container.shutdown()
        _container = None


def main() -> None:
    """Entry point for the stdio MCP server."""
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,  # MCP uses stdout for JSON-RPC; logs go to stderr
    )

    logger.info("Starting FinOps Org Insights MCP Server (stdio transport)")

    async def _run() -> None:
        await initialize_container()
        try:
            await mcp.run_stdio_async()
        finally:
            await shutdown_container()

    asyncio.run(_run())


if __name__ == "__main__":
    main()
