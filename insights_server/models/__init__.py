"""Data models for the FinOps Org Insights server."""

from .enums import BudgetStatus, CloudProvider, HierarchyLevel, SkuType
from .account import (
    MONTH_LABELS,
    CloudAccount,
    MonthlyMetric,
    SafeDeploymentProfile,
    SkuDetail,
    VulnerabilityReport,
)
from .hierarchy import Area, Department, Forest, OrgNode, Team
from .navigation import GLOBAL_SCOPE_LABEL, NavigationState
from .aggregates import (
    AggregatedStats,
    ChartDatum,
    ForecastVariance,
    MonthlyTrendPoint,
    RowRollup,
    TopSpender,
    VulnerabilityStack,
)
from .context import AssistantContext, CurrentViewBundle, EntitySummary, MonthlySpendPoint
from .dashboard import (
    AccountDetail,
    DashboardCharts,
    DashboardView,
    DeploymentCheck,
    HierarchyRow,
    StatCard,
)
from .health import HealthStatus

__all__ = [
    "BudgetStatus",
    "CloudProvider",
    "HierarchyLevel",
    "SkuType",
    "MONTH_LABELS",
    "CloudAccount",
    "MonthlyMetric",
    "SafeDeploymentProfile",
    "SkuDetail",
    "VulnerabilityReport",
    "Area",
    "Department",
    "Forest",
    "OrgNode",
    "Team",
    "GLOBAL_SCOPE_LABEL",
    "NavigationState",
    "AggregatedStats",
    "ChartDatum",
    "ForecastVariance",
    "MonthlyTrendPoint",
    "RowRollup",
    "TopSpender",
    "VulnerabilityStack",
    "AssistantContext",
    "CurrentViewBundle",
    "EntitySummary",
    "MonthlySpendPoint",
    "AccountDetail",
    "DashboardCharts",
    "DashboardView",
    "DeploymentCheck",
    "HierarchyRow",
    "StatCard",
    "HealthStatus",
]
