"""FastAPI application entry point for the FinOps Org Insights MCP Server.

This module creates the FastAPI application with MCP protocol support,
registers the insight tools, configures CORS, and sets up error handling.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .config import settings
from .container import ServiceContainer
from .models import DashboardView, HealthStatus
from .mcp_handler import MCPHandler
from .services.view_selector import ScopeNotFoundError
from .tools import (
    GetAssistantContextResult,
    GetChartDataResult,
    GetOrgHierarchyResult,
    get_assistant_context,
    get_chart_data,
    get_dashboard_view,
    get_org_hierarchy,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Global instances
container: Optional[ServiceContainer] = None
mcp_handler: Optional[MCPHandler] = None


# Request/Response models for MCP protocol
class MCPToolCallRequest(BaseModel):
    """Request model for MCP tool invocation."""
    name: str
    arguments: dict = {}


class MCPToolCallResponse(BaseModel):
    """Response model for MCP tool invocation."""
    content: list[dict]
    is_error: bool = False


class MCPListToolsResponse(BaseModel):
    """Response model for listing available tools."""
    tools: list[dict]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - startup and shutdown.

    Builds the service container (dataset, rollup, context and dashboard
    services) and the MCP handler on startup, and releases them on shutdown.
    """
    global container, mcp_handler

    # Startup
    logger.info("Starting FinOps Org Insights MCP Server")

    app_settings = settings()
    container = ServiceContainer(settings=app_settings)
    await container.initialize()

    mcp_handler = MCPHandler(
        dataset_service=container.dataset_service,
        dashboard_service=container.dashboard_service,
        context_service=container.context_service,
    )
    logger.info("MCP handler initialized with 4 tools")

    logger.info(f"MCP Server v{__version__} started successfully on port {app_settings.port}")

    yield

    # Shutdown
    logger.info("Shutting down FinOps Org Insights MCP Server")
    await container.shutdown()
    container = None
    mcp_handler = None
    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="FinOps Org Insights MCP Server",
    description=(
        "Cloud spend, vulnerability and safe deployment insights across an "
        "Area > Department > Team > Account hierarchy, exposed via MCP. "
        "Exposes 4 tools for listing the hierarchy, building dashboards, "
        "retrieving chart projections, and building AI assistant context."
    ),
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware for cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for MCP protocol
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    Logs the error and returns a structured error response.
    """
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc),
        },
    )


def _require_container() -> ServiceContainer:
    if not container or not container.initialized:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return container


@app.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """
    Health check endpoint for monitoring server status.

    Returns:
        HealthStatus with server status, version and dataset information
    """
    dataset_service = container.dataset_service if container else None

    if dataset_service and dataset_service.is_loaded:
        return HealthStatus(
            status="healthy",
            version=__version__,
            dataset_loaded=True,
            dataset_version=dataset_service.dataset_version,
            account_count=dataset_service.account_count,
        )

    return HealthStatus(
        status="unhealthy",
        version=__version__,
        dataset_loaded=False,
    )


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "FinOps Org Insights MCP Server",
        "version": __version__,
        "description": "Cloud spend and risk insights across an organisation hierarchy via MCP",
        "health_check": "/health",
        "mcp_endpoints": {
            "list_tools": "/mcp/tools",
            "call_tool": "/mcp/tools/call",
        },
        "api_endpoints": {
            "hierarchy": "/api/v1/hierarchy",
            "dashboard": "/api/v1/dashboard",
            "charts": "/api/v1/charts/{chart}",
            "context": "/api/v1/context",
        },
        "tools_count": 4,
    }


# MCP Protocol Endpoints

@app.get("/mcp/tools", response_model=MCPListToolsResponse)
async def list_tools() -> MCPListToolsResponse:
    """
    List all available MCP tools.

    Returns the definitions of all registered tools including
    their names, descriptions, and input schemas.
    """
    if not mcp_handler:
        raise HTTPException(
            status_code=503,
            detail="MCP handler not initialized",
        )

    tools = mcp_handler.get_tool_definitions()
    return MCPListToolsResponse(tools=tools)


@app.post("/mcp/tools/call", response_model=MCPToolCallResponse)
async def call_tool(request: MCPToolCallRequest) -> MCPToolCallResponse:
    """
    Invoke an MCP tool by name.

    Args:
        request: MCPToolCallRequest with tool name and arguments

    Returns:
        MCPToolCallResponse with tool output or error
    """
    if not mcp_handler:
        raise HTTPException(
            status_code=503,
            detail="MCP handler not initialized",
        )

    logger.info(f"MCP tool call: {request.name} with args: {request.arguments}")

    result = await mcp_handler.invoke_tool(
        name=request.name,
        arguments=request.arguments,
    )

    return MCPToolCallResponse(
        content=result.content,
        is_error=result.is_error,
    )


# Tool-specific endpoints for direct HTTP access

@app.get("/api/v1/hierarchy", response_model=GetOrgHierarchyResult)
async def api_get_hierarchy() -> GetOrgHierarchyResult:
    """Direct API endpoint for the organisation hierarchy outline."""
    services = _require_container()
    return await get_org_hierarchy(dataset_service=services.dataset_service)


@app.get("/api/v1/dashboard", response_model=DashboardView)
async def api_get_dashboard(scope_id: Optional[str] = None) -> DashboardView:
    """Direct API endpoint for the dashboard of a scope."""
    services = _require_container()
    try:
        return await get_dashboard_view(
            dataset_service=services.dataset_service,
            dashboard_service=services.dashboard_service,
            scope_id=scope_id,
        )
    except ScopeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/api/v1/charts/{chart}", response_model=GetChartDataResult)
async def api_get_chart(chart: str, scope_id: Optional[str] = None) -> GetChartDataResult:
    """Direct API endpoint for a single chart projection."""
    services = _require_container()
    try:
        return await get_chart_data(
            dataset_service=services.dataset_service,
            dashboard_service=services.dashboard_service,
            chart=chart,
            scope_id=scope_id,
        )
    except ScopeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/v1/context", response_model=GetAssistantContextResult)
async def api_get_context(scope_id: Optional[str] = None) -> GetAssistantContextResult:
    """Direct API endpoint for the AI assistant context of a scope."""
    services = _require_container()
    try:
        return await get_assistant_context(
            dataset_service=services.dataset_service,
            context_service=services.context_service,
            scope_id=scope_id,
        )
    except ScopeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
