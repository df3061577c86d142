"""MCP tools for organisation spend and risk insights."""

from .get_org_hierarchy import get_org_hierarchy, GetOrgHierarchyResult, OrgHierarchyNode
from .get_dashboard_view import get_dashboard_view
from .get_chart_data import get_chart_data, GetChartDataResult
from .get_assistant_context import get_assistant_context, GetAssistantContextResult

__all__ = [
    "get_org_hierarchy",
    "GetOrgHierarchyResult",
    "OrgHierarchyNode",
    "get_dashboard_view",
    "get_chart_data",
    "GetChartDataResult",
    "get_assistant_context",
    "GetAssistantContextResult",
]
