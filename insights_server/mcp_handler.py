"""MCP Protocol Handler for the FinOps Org Insights Server.

This module implements the Model Context Protocol (MCP) handler that exposes
the organisation insight tools to AI assistants.
"""

import json
import logging
from typing import Callable, Optional
from pydantic import BaseModel

from .services import (
    CHART_NAMES,
    ContextService,
    DashboardService,
    DatasetService,
)
from .tools import (
    get_assistant_context,
    get_chart_data,
    get_dashboard_view,
    get_org_hierarchy,
)

logger = logging.getLogger(__name__)

SCOPE_ID_SCHEMA = {
    "type": "string",
    "description": (
        "Id of an Area, Department, Team or Account as returned by "
        "get_org_hierarchy. Omit for the global view."
    ),
}


class MCPToolDefinition(BaseModel):
    """Definition of an MCP tool."""
    name: str
    description: str
    input_schema: dict


class MCPToolResult(BaseModel):
    """Result from an MCP tool invocation."""
    content: list[dict]
    is_error: bool = False


class MCPHandler:
    """
    MCP Protocol Handler for the FinOps Org Insights Server.

    This handler manages the registration and invocation of 4 MCP tools:
    1. get_org_hierarchy - Outline the Area > Department > Team > Account tree
    2. get_dashboard_view - Stats, table rows and charts for one scope
    3. get_chart_data - A single chart projection for one scope
    4. get_assistant_context - Scope totals plus per-entity monthly spend
    """

    def __init__(
        self,
        dataset_service: Optional[DatasetService] = None,
        dashboard_service: Optional[DashboardService] = None,
        context_service: Optional[ContextService] = None,
    ):
        """
        Initialize the MCP handler with required services.

        Args:
            dataset_service: DatasetService holding the organisation forest
            dashboard_service: DashboardService assembling dashboard views
            context_service: ContextService building assistant payloads
        """
        self.dataset_service = dataset_service
        self.dashboard_service = dashboard_service
        self.context_service = context_service

        # Register all tools
        self._tools: dict[str, Callable] = {}
        self._tool_definitions: dict[str, MCPToolDefinition] = {}
        self._register_tools()

    def _register_tools(self) -> None:
        """Register all MCP tools with their definitions."""

        # Tool 1: get_org_hierarchy
        self._register_tool(
            name="get_org_hierarchy",
            handler=self._handle_get_org_hierarchy,
            description=(
                "List the organisation hierarchy: Areas, their Departments, Teams and "
                "cloud accounts, with the number of accounts under each node. Use the "
                "returned ids as scope_id for the other tools."
            ),
            input_schema={
                "type": "object",
                "properties": {},
                "required": [],
            },
        )

        # Tool 2: get_dashboard_view
        self._register_tool(
            name="get_dashboard_view",
            handler=self._handle_get_dashboard_view,
            description=(
                "Get the dashboard for a scope: total spend and forecast, forecast "
                "variance, vulnerability and safe deployment totals, the rows of the "
                "next level down, account details and every chart."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "scope_id": SCOPE_ID_SCHEMA,
                },
                "required": [],
            },
        )

        # Tool 3: get_chart_data
        self._register_tool(
            name="get_chart_data",
            handler=self._handle_get_chart_data,
            description=(
                "Get a single chart projection for a scope, e.g. spend by provider, "
                "spend by tier, top accounts or the monthly spend trend."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "chart": {
                        "type": "string",
                        "enum": list(CHART_NAMES),
                        "description": "Name of the projection",
                    },
                    "scope_id": SCOPE_ID_SCHEMA,
                },
                "required": ["chart"],
            },
        )

        # Tool 4: get_assistant_context
        self._register_tool(
            name="get_assistant_context",
            handler=self._handle_get_assistant_context,
            description=(
                "Get the analysis context for a scope: its aggregate totals, top "
                "spenders and monthly trend, plus a monthly spend summary of every "
                "Area and Department for comparisons outside the current view."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "scope_id": SCOPE_ID_SCHEMA,
                },
                "required": [],
            },
        )

        logger.info(f"Registered {len(self._tools)} MCP tools")

    def _register_tool(
        self,
        name: str,
        handler: Callable,
        description: str,
        input_schema: dict,
    ) -> None:
        """Register a single MCP tool."""
        self._tools[name] = handler
        self._tool_definitions[name] = MCPToolDefinition(
            name=name,
            description=description,
            input_schema=input_schema,
        )

    def get_tool_definitions(self) -> list[dict]:
        """
        Get all tool definitions for MCP protocol.

        Returns:
            List of tool definitions with name, description, and input schema
        """
        return [
            {
                "name": defn.name,
                "description": defn.description,
                "inputSchema": defn.input_schema,
            }
            for defn in self._tool_definitions.values()
        ]

    async def invoke_tool(self, name: str, arguments: dict) -> MCPToolResult:
        """
        Invoke an MCP tool by name with the given arguments.

        Args:
            name: Name of the tool to invoke
            arguments: Tool arguments as a dictionary

        Returns:
            MCPToolResult with the tool output. Unknown tools and tool
            failures are reported with is_error=True.
        """
        if name not in self._tools:
            return MCPToolResult(
                content=[{"type": "text", "text": f"Unknown tool: {name}"}],
                is_error=True,
            )

        handler = self._tools[name]

        try:
            result = await handler(arguments or {})
            return MCPToolResult(
                content=[{"type": "text", "text": json.dumps(result, default=str)}],
                is_error=False,
            )

        except Exception as e:
            logger.error(f"Error invoking tool {name}: {str(e)}")
            return MCPToolResult(
                content=[{"type": "text", "text": f"Error: {str(e)}"}],
                is_error=True,
            )

    # Tool handlers

    async def _handle_get_org_hierarchy(self, arguments: dict) -> dict:
        """Handle get_org_hierarchy tool invocation."""
        if not self.dataset_service:
            raise ValueError("DatasetService not initialized")

        result = await get_org_hierarchy(dataset_service=self.dataset_service)
        return result.model_dump(mode="json")

    async def _handle_get_dashboard_view(self, arguments: dict) -> dict:
        """Handle get_dashboard_view tool invocation."""
        if not self.dataset_service or not self.dashboard_service:
            raise ValueError("DatasetService or DashboardService not initialized")

        result = await get_dashboard_view(
            dataset_service=self.dataset_service,
            dashboard_service=self.dashboard_service,
            scope_id=arguments.get("scope_id"),
        )
        return result.model_dump(mode="json")

    async def _handle_get_chart_data(self, arguments: dict) -> dict:
        """Handle get_chart_data tool invocation."""
        if not self.dataset_service or not self.dashboard_service:
            raise ValueError("DatasetService or DashboardService not initialized")

        result = await get_chart_data(
            dataset_service=self.dataset_service,
            dashboard_service=self.dashboard_service,
            chart=arguments["chart"],
            scope_id=arguments.get("scope_id"),
        )
        return result.model_dump(mode="json")

    async def _handle_get_assistant_context(self, arguments: dict) -> dict:
        """Handle get_assistant_context tool invocation."""
        if not self.dataset_service or not self.context_service:
            raise ValueError("DatasetService or ContextService not initialized")

        result = await get_assistant_context(
            dataset_service=self.dataset_service,
            context_service=self.context_service,
            scope_id=arguments.get("scope_id"),
        )
        return result.model_dump(mode="json")
